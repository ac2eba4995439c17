"""InsightReportGenerator: renders one insight run as HTML + Markdown."""

from __future__ import annotations

from datetime import UTC, datetime
from pathlib import Path

from jinja2 import Environment, FileSystemLoader

from suggestion_box.insights.pipeline import InsightResult, InsightSummary
from suggestion_box.reporting.charts import keyword_bar, sentiment_donut

_TEMPLATES_DIR = Path(__file__).parent / "templates"


class InsightReportGenerator:
    """Write ``insights_<timestamp>.html`` and ``.md`` into ``reports_dir``."""

    def __init__(self, reports_dir: Path) -> None:
        self._reports_dir = reports_dir
        self._reports_dir.mkdir(parents=True, exist_ok=True)
        self._jinja = Environment(
            loader=FileSystemLoader(str(_TEMPLATES_DIR)),
            autoescape=True,
        )

    def generate(self, result: InsightResult, timestamp: str | None = None) -> tuple[Path, Path]:
        """Render the report files.

        Returns:
            (html_path, markdown_path)
        """
        if timestamp is None:
            timestamp = datetime.now(tz=UTC).strftime("%Y%m%d_%H%M%S")

        report_date = result.generated_at.strftime("%Y-%m-%d %H:%M UTC")

        template = self._jinja.get_template("insights.html.j2")
        html_content = template.render(
            report_date=report_date,
            result=result,
            pct=result.sentiment.percentages() if result.has_data else {},
            chart_donut=sentiment_donut(result),
            chart_keywords=keyword_bar(result),
        )
        html_path = self._reports_dir / f"insights_{timestamp}.html"
        html_path.write_text(html_content, encoding="utf-8")

        md_path = self._reports_dir / f"insights_{timestamp}.md"
        md_path.write_text(self._render_markdown(report_date, result), encoding="utf-8")

        print(f"[report] HTML  → {html_path}")
        print(f"[report] MD    → {md_path}")
        return html_path, md_path

    @staticmethod
    def _render_markdown(report_date: str, result: InsightResult) -> str:
        lines = [
            "# Suggestion Box Insights",
            "",
            f"Generated: {report_date}",
            "",
        ]
        if not isinstance(result, InsightSummary):
            lines.append(f"_{result.message}_")
            return "\n".join(lines) + "\n"

        pct = result.sentiment.percentages()
        lines += [
            "## Summary",
            "| Metric | Value |",
            "|--------|-------|",
            f"| Total Submissions | {result.total:,} |",
            f"| Suggestions | {result.suggestion_count:,} |",
            f"| Feedback | {result.feedback_count:,} |",
            "",
            "## Sentiment",
            "| Bucket | Count | Share |",
            "|--------|-------|-------|",
        ]
        for bucket in result.sentiment.buckets():
            lines.append(f"| {bucket.label} | {bucket.count} | {pct[bucket.label]}% |")

        lines += [
            "",
            "## Top Keywords",
            "| Keyword | Mentions |",
            "|---------|----------|",
        ]
        for kw in result.keywords:
            lines.append(f"| {kw.word} | {kw.count} |")

        lines += ["", "## Recommendations"]
        lines += [f"- {rec}" for rec in result.recommendations]

        return "\n".join(lines) + "\n"
