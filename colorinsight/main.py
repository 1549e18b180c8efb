"""
Command line entry point for the ColorInsight wizard.
"""

import base64
from pathlib import Path
from typing import Optional

import typer
from rich.console import Console

from colorinsight import views
from colorinsight.factory import create_controller
from colorinsight.models.scheme import SubScores
from colorinsight.models.session import UploadedFile, WizardState
from colorinsight.scoring import weighted_score
from colorinsight.utils.config import config
from colorinsight.utils.constants import EXPORT_STRATEGIES
from colorinsight.utils.logger import logger
from colorinsight.utils.utils import safe_file_stem

app = typer.Typer(help="Turn a client positioning report into a scored color strategy.")
console = Console()


def _fail(controller, message):
    views.render(console, controller.session)
    controller.shutdown(wait=False)
    typer.secho(message, fg=typer.colors.RED, err=True)
    raise typer.Exit(code=1)


def _save_preview(data_uri: str, output_dir: Path, customer_name: str) -> Path:
    header, payload = data_uri.split(",", 1)
    extension = header.split("/")[1].split(";")[0] if "/" in header else "png"
    if not extension.isalnum():
        extension = "png"
    path = output_dir / f"{safe_file_stem(customer_name)}_Preview.{extension}"
    output_dir.mkdir(parents=True, exist_ok=True)
    path.write_bytes(base64.b64decode(payload))
    return path


@app.command()
def run(
    pdf_path: Path = typer.Argument(..., exists=True, dir_okay=False, help="Client positioning report (PDF)"),
    search_mode: Optional[str] = typer.Option(None, help="grounded or simulated"),
    export_strategy: str = typer.Option(config.export_strategy, help="structured or snapshot"),
    output_dir: Path = typer.Option(config.output_dir, help="Directory for the exported report"),
    yes: bool = typer.Option(False, "--yes", "-y", help="Accept every confirmation step"),
    preview: bool = typer.Option(True, help="Generate a preview image for the recommended scheme"),
    preview_timeout: float = typer.Option(120.0, help="Seconds to wait for the preview image before exporting"),
):
    """
    Run the wizard end to end: upload, confirm, search, compare, export.
    """
    if export_strategy not in EXPORT_STRATEGIES:
        raise typer.BadParameter(f"export strategy must be one of {', '.join(EXPORT_STRATEGIES)}")

    try:
        controller = create_controller(search_mode)
    except ValueError as e:
        typer.secho(str(e), fg=typer.colors.RED, err=True)
        raise typer.Exit(code=2)

    session = controller.session
    if session.state == WizardState.LANDING:
        views.render(console, session)
        controller.start()

    session = controller.upload(UploadedFile.from_path(pdf_path))
    if session.state != WizardState.CONFIRM_REQUIREMENTS:
        _fail(controller, "Could not analyze the report.")
    views.render(console, session)

    if not yes and not typer.confirm("Start AI search & analysis with these requirements?", default=True):
        controller.shutdown(wait=False)
        raise typer.Exit()

    session = controller.confirm_requirements()
    if session.state == WizardState.VIEW_SEARCH_RESULTS:
        views.render(console, session)
        if not yes and not typer.confirm("Generate color schemes from this research?", default=True):
            controller.shutdown(wait=False)
            raise typer.Exit()
        session = controller.continue_to_generation()

    if session.state != WizardState.COMPARING:
        _fail(controller, "Color scheme generation failed.")
    views.render(console, session)

    session = controller.view_result(generate_preview=preview)
    if preview:
        session = controller.wait_for_preview(timeout=preview_timeout)
    views.render(console, session)

    if session.preview_image:
        preview_path = _save_preview(session.preview_image, output_dir, session.customer_name)
        console.print(f"Preview image saved to [bold]{preview_path}[/bold]")

    session = controller.export_report(output_dir, export_strategy)
    controller.shutdown(wait=False)
    if session.error:
        typer.secho(f"Export failed: {session.error}", fg=typer.colors.RED, err=True)
        raise typer.Exit(code=1)

    logger.info(f"Report exported to {session.last_export_path}")
    console.print(f"Report saved to [bold]{session.last_export_path}[/bold]")


@app.command()
def score(
    match: float = typer.Argument(..., min=0, max=10),
    trend: float = typer.Argument(..., min=0, max=10),
    market: float = typer.Argument(..., min=0, max=10),
    innovation: float = typer.Argument(..., min=0, max=10),
    harmony: float = typer.Argument(..., min=0, max=10),
):
    """
    Print the weighted composite score for five sub-scores.
    """
    scores = SubScores(match=match, trend=trend, market=market, innovation=innovation, harmony=harmony)
    typer.echo(f"{weighted_score(scores):.2f}")


if __name__ == "__main__":
    app()
