"""
Terminal rendering of the wizard views.

Each function receives the session (and a rich console) explicitly and only
reads from it.
"""

from rich.console import Console
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from colorinsight.models.session import WizardSession, WizardState
from colorinsight.scoring import rank_schemes
from colorinsight.utils.constants import SCORE_LABELS, SCORE_WEIGHTS
from colorinsight.wizard import STEPS, step_index


def render_steps(console: Console, session: WizardSession):
    active = step_index(session.state)
    parts = []
    for index, (label, _) in enumerate(STEPS):
        if index < active:
            parts.append(f"[green]✓ {label}[/green]")
        elif index == active:
            parts.append(f"[bold blue]{label}[/bold blue]")
        else:
            parts.append(f"[dim]{label}[/dim]")
    console.print("  ›  ".join(parts))


def render_error(console: Console, session: WizardSession):
    if session.error:
        console.print(Panel(session.error, title="Error", border_style="red"))


def render_landing(console: Console, session: WizardSession):
    console.print(Panel(
        "Upload a client positioning report and get a scored, market-aware color strategy.",
        title="ColorInsight AI",
        border_style="blue",
    ))


def render_upload(console: Console, session: WizardSession):
    console.print("[bold]Upload Client Positioning Report[/bold]  (PDF only)")
    render_error(console, session)


def render_loading(console: Console, session: WizardSession):
    console.print(f"[blue]…[/blue] {session.loading_message}")


def render_requirements(console: Console, session: WizardSession):
    table = Table(title=f"Extracted Requirements | Client: {session.customer_name}")
    table.add_column("#", style="dim")
    table.add_column("Requirement")
    table.add_column("Summary (EN)")
    table.add_column("Page", justify="right")
    for req in session.requirements:
        page = str(req.source_page) if req.source_page is not None else ""
        table.add_row(req.id, req.text, req.summary_en or "", page)
    console.print(table)
    render_error(console, session)


def render_search_results(console: Console, session: WizardSession):
    result = session.search_result
    if result is None:
        return
    table = Table(title="Market Research")
    table.add_column("Trends")
    table.add_column("Competitors")
    rows = max(len(result.trends), len(result.competitors))
    for i in range(rows):
        trend = result.trends[i].display() if i < len(result.trends) else ""
        competitor = result.competitors[i].display() if i < len(result.competitors) else ""
        table.add_row(trend, competitor)
    console.print(table)
    if result.keywords:
        console.print(f"[bold]Keywords:[/bold] {', '.join(result.keywords)}")
    console.print(Panel(result.market_insight.display("\n\n"), title="Market Insight"))
    for source in result.sources:
        console.print(f"  [link={source.url}]{source.title}[/link] [dim]{source.url}[/dim]")
    render_error(console, session)


def _swatch(hex_code: str) -> Text:
    return Text("      ", style=f"on {hex_code}") + Text(f" {hex_code}")


def render_comparison(console: Console, session: WizardSession):
    table = Table(title="Multi-Dimensional Analysis")
    table.add_column("Scheme")
    for metric in SCORE_WEIGHTS:
        table.add_column(f"{metric.title()}", justify="right")
    table.add_column("Weighted", justify="right", style="bold")
    table.add_column("Palette")
    for scheme in rank_schemes(session.schemes):
        is_best = scheme is session.best_scheme
        name = Text(scheme.name.primary, style="bold orange3" if is_best else "")
        if is_best:
            name.append(" ★ Recommended")
        palette = Text(" ").join(_swatch(hex_code) for _, hex_code in scheme.palette.items())
        table.add_row(
            name,
            *(f"{getattr(scheme.scores, metric):g}" for metric in SCORE_WEIGHTS),
            f"{scheme.weighted_score:.2f}",
            palette,
        )
    console.print(table)


def render_result(console: Console, session: WizardSession):
    scheme = session.best_scheme
    if scheme is None:
        return

    console.print(Panel(
        Text.assemble(
            (scheme.name.display() + "\n", "bold"),
            scheme.description.display("\n"),
        ),
        title=f"Optimal Color Strategy | Score {scheme.weighted_score:.2f}",
        border_style="green",
    ))
    console.print(Text("  ").join(Text(f"{label}: ") + _swatch(hex_code) for label, hex_code in scheme.palette.items()))

    scores = Table(title="Performance Analysis")
    scores.add_column("Metric")
    scores.add_column("Weight", justify="right")
    scores.add_column("Score", justify="right")
    for metric, weight in SCORE_WEIGHTS.items():
        scores.add_row(SCORE_LABELS[metric], f"{round(weight * 100)}%", f"{getattr(scheme.scores, metric):g}")
    console.print(scores)

    console.print(Panel(scheme.usage_advice.display("\n"), title="Usage Strategy"))
    if scheme.swot:
        for item in scheme.swot.strengths:
            console.print(f"[green]+[/green] {item.display()}")
        for item in scheme.swot.weaknesses:
            console.print(f"[red]-[/red] {item.display()}")
    if scheme.sources:
        console.print(f"[dim]Sources: {'; '.join(scheme.sources)}[/dim]")

    if session.is_generating_image:
        console.print("[blue]Generating preview image...[/blue]")
    elif session.preview_error:
        console.print(f"[yellow]Preview image unavailable: {session.preview_error}[/yellow]")
    render_error(console, session)


VIEWS = {
    WizardState.LANDING: render_landing,
    WizardState.UPLOAD: render_upload,
    WizardState.ANALYZING_DOC: render_loading,
    WizardState.CONFIRM_REQUIREMENTS: render_requirements,
    WizardState.SEARCHING: render_loading,
    WizardState.VIEW_SEARCH_RESULTS: render_search_results,
    WizardState.COMPARING: render_comparison,
    WizardState.RESULT: render_result,
}


def render(console: Console, session: WizardSession):
    """Render the view for the session's current state."""
    render_steps(console, session)
    VIEWS[session.state](console, session)
