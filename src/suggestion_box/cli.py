"""Click CLI: serve | insights | report | reports | quiz | dashboard."""

from __future__ import annotations

import subprocess
import sys
from pathlib import Path

import click

from suggestion_box.config import app_config, insights_config, store_config


def _open_store():
    from suggestion_box.store.row_store import RowStore

    return RowStore.from_config(store_config)


def _analyze(store):
    from suggestion_box.insights.pipeline import AnalysisFailedError, InsightPipeline

    try:
        return InsightPipeline(config=insights_config).analyze_store_sync(store)
    except AnalysisFailedError as exc:
        click.echo(f"Analysis failed: {exc}", err=True)
        sys.exit(1)


@click.group()
def cli() -> None:
    """Suggestion Box: submissions, caps and keyword insights."""


@cli.command()
@click.option("--host", default="127.0.0.1", show_default=True)
@click.option("--port", default=8000, show_default=True, type=int)
@click.option("--reload", is_flag=True, default=False, help="Auto-reload on code changes")
def serve(host: str, port: int, reload: bool) -> None:
    """Start the FastAPI server."""
    import uvicorn

    uvicorn.run("suggestion_box.api.app:app", host=host, port=port, reload=reload)


@cli.command()
@click.option("--save", is_flag=True, default=False, help="Append the result to the report log")
def insights(save: bool) -> None:
    """Analyse all submissions and print the summary."""
    from suggestion_box.insights.pipeline import InsightSummary, save_report

    store = _open_store()
    result = _analyze(store)

    if not isinstance(result, InsightSummary):
        click.echo(result.message)
        return

    pct = result.sentiment.percentages()
    click.echo(f"Analysed {result.total} submissions "
               f"({result.suggestion_count} suggestions, {result.feedback_count} feedback)")
    for bucket in result.sentiment.buckets():
        click.echo(f"  {bucket.label:<9} {bucket.count:>4}  ({pct[bucket.label]}%)")
    click.echo("Top keywords:")
    for kw in result.keywords:
        click.echo(f"  {kw.word:<20} {kw.count}")
    click.echo("Recommendations:")
    for rec in result.recommendations:
        click.echo(f"  - {rec}")

    if save:
        row = save_report(store, result)
        click.echo(f"Saved report {row['id']}")


@cli.command()
@click.option(
    "--output-dir",
    "-o",
    type=click.Path(),
    default=None,
    help="Where to write the files (default: data/reports/)",
)
def report(output_dir: str | None) -> None:
    """Generate HTML + Markdown insight report → data/reports/"""
    from suggestion_box.reporting.generator import InsightReportGenerator

    store = _open_store()
    result = _analyze(store)

    out_dir = Path(output_dir) if output_dir else app_config.reports_dir
    generator = InsightReportGenerator(reports_dir=out_dir)
    html_path, md_path = generator.generate(result)
    click.echo(f"HTML report: {html_path}")
    click.echo(f"Markdown:    {md_path}")


@cli.command("reports")
@click.option("--limit", "-n", default=10, show_default=True, type=int)
def list_reports(limit: int) -> None:
    """List saved reports, newest first."""
    from suggestion_box.store.schemas import Report

    rows = _open_store().select("reports", order_by="generated_at", descending=True)
    if not rows:
        click.echo("No reports saved yet. Run 'insights --save' first.")
        return
    for row in rows[:limit]:
        rep = Report.from_row(row)
        topics = ", ".join(rep.topics[:5])
        click.echo(f"{rep.generated_at}  [{rep.sentiment}]  {rep.summary}  topics: {topics}")


@cli.command()
@click.argument("state", type=click.Choice(["on", "off", "status"]), default="status")
def quiz(state: str) -> None:
    """Show or switch quiz visibility."""
    from suggestion_box.submissions.service import QuizToggle

    toggle = QuizToggle(_open_store())
    if state != "status":
        toggle.set_active(state == "on")
    click.echo(f"Quiz is {'on' if toggle.is_active() else 'off'}")


@cli.command()
def dashboard() -> None:
    """Launch the streamlit admin dashboard."""
    app_path = Path(__file__).parent / "dashboard" / "app.py"
    sys.exit(subprocess.call([sys.executable, "-m", "streamlit", "run", str(app_path)]))


if __name__ == "__main__":
    cli()
