"""
cs2brief CLI - Command Line Interface for pre-match briefings

Provides commands for:
- Building a briefing for two rosters
- Inspecting a single player's normalized profile
- Writing a default configuration file
- Serving the HTTP API
"""

import asyncio
import json
import logging
from pathlib import Path
from typing import Optional

import typer
from rich.console import Console
from rich.panel import Panel
from rich.table import Table

from cs2brief import __version__
from cs2brief.core.config import Cs2BriefConfig, load_config, save_config, setup_logging
from cs2brief.core.errors import FetchError, ParseError
from cs2brief.scouting.briefing import BriefingContext, BriefingService
from cs2brief.scouting.models import BriefingError, PreMatchBriefing, TeamResult

app = typer.Typer(
    name="cs2brief",
    help="CS2 pre-match briefings from Tracker.gg player statistics",
    add_completion=False,
)
console = Console()
logger = logging.getLogger(__name__)

LEVEL_STYLES = {"high": "bold red", "medium": "yellow", "low": "green"}

_state = {"verbose": False}


def version_callback(value: bool) -> None:
    """Show version and exit."""
    if value:
        console.print(f"[bold blue]cs2brief[/bold blue] v{__version__}")
        raise typer.Exit()


@app.callback()
def main_callback(
    version: bool = typer.Option(
        None,
        "--version",
        "-v",
        callback=version_callback,
        is_eager=True,
        help="Show version and exit",
    ),
    verbose: bool = typer.Option(False, "--verbose", "-V", help="Enable verbose output"),
) -> None:
    """cs2brief - CS2 Pre-match Briefings"""
    _state["verbose"] = verbose


def _load(config_file: Optional[Path]) -> Cs2BriefConfig:
    config = load_config(config_file)
    if _state["verbose"]:
        config.logging.level = "DEBUG"
    setup_logging(config.logging)
    return config


def _team_table(title: str, analysis: TeamResult) -> Table:
    table = Table(title=title, show_header=False)
    table.add_column("Property", style="cyan")
    table.add_column("Value", style="green")

    data = analysis.to_dict()
    if not analysis.has_data:
        table.add_row("Status", f"[yellow]{data['error']}[/yellow]")
        return table

    table.add_row("Players", str(data["player_count"]))
    table.add_row("Average K/D", f"{data['average_kd']:.2f}")
    table.add_row("Average Win Rate", f"{data['average_win_rate']:.1f}%")
    table.add_row("Average Rating", str(data["average_rating"]))
    table.add_row("Top Player", f"{data['top_player']['handle']} ({data['top_player']['kd']:.2f})")
    table.add_row(
        "Weakest Player",
        f"{data['weakest_player']['handle']} ({data['weakest_player']['kd']:.2f}, "
        f"{data['weakest_player']['vulnerability']})",
    )
    table.add_row("Style", data["team_style"])
    table.add_row("Predicted Strategy", data["predicted_strategy"])
    return table


def _print_briefing(briefing: PreMatchBriefing) -> None:
    console.print(
        f"\n[bold blue]Pre-match Briefing[/bold blue] - {briefing.map_name or 'unknown map'} "
        f"(confidence {briefing.confidence}%)\n"
    )
    if briefing.synthetic_profiles:
        console.print(
            f"[yellow]{briefing.synthetic_profiles} profile(s) use synthetic data[/yellow]\n"
        )

    console.print(_team_table("Your Team", briefing.team_analysis))
    console.print(_team_table("Enemy Team", briefing.enemy_analysis))

    if briefing.threats:
        threats = Table(title="Threats")
        threats.add_column("Severity")
        threats.add_column("Type", style="cyan")
        threats.add_column("Player")
        threats.add_column("Counter")
        for threat in briefing.threats:
            style = LEVEL_STYLES[threat.severity.value]
            threats.add_row(
                f"[{style}]{threat.severity.value}[/{style}]",
                threat.type,
                threat.player,
                threat.counter_strategy,
            )
        console.print(threats)

    for opportunity in briefing.opportunities:
        targets = f" ({', '.join(opportunity.targets)})" if opportunity.targets else ""
        console.print(
            f"[green]Opportunity:[/green] {opportunity.type}{targets} - {opportunity.exploitation}"
        )

    for rec in briefing.recommendations:
        style = LEVEL_STYLES[rec.priority.value]
        body = rec.description + "\n" + "\n".join(f"  - {a}" for a in rec.actions)
        console.print(
            Panel(body, title=f"[{style}]{rec.priority.value.upper()}[/{style}] {rec.title}")
        )


@app.command()
def briefing(
    team: list[str] = typer.Option([], "--team", "-t", help="Player id on your team (repeatable)"),
    enemy: list[str] = typer.Option(
        ..., "--enemy", "-e", help="Player id on the enemy team (repeatable)"
    ),
    map_name: str = typer.Option("", "--map", "-m", help="Map id, e.g. de_mirage"),
    as_json: bool = typer.Option(False, "--json", help="Print the briefing as JSON"),
    config_file: Optional[Path] = typer.Option(
        None, "--config", "-c", help="Path to a config file (.yaml, .toml, .json)"
    ),
) -> None:
    """
    Build a pre-match briefing for two rosters.

    Players whose data cannot be fetched are replaced by clearly labeled
    synthetic profiles; the briefing reports how many.
    """
    config = _load(config_file)
    service = BriefingService(BriefingContext.from_config(config))
    result = asyncio.run(service.build_briefing(team, enemy, map_name))

    if as_json:
        typer.echo(json.dumps(result.to_dict(), indent=2))
    elif isinstance(result, BriefingError):
        console.print(f"[red]Error:[/red] {result.message}")
        console.print(f"[cyan]Fallback:[/cyan] {result.fallback_strategy}")
    else:
        _print_briefing(result)

    if isinstance(result, BriefingError):
        raise typer.Exit(1)


@app.command()
def profile(
    player_id: str = typer.Argument(..., help="Player id (Steam64 id for the steam platform)"),
    config_file: Optional[Path] = typer.Option(
        None, "--config", "-c", help="Path to a config file (.yaml, .toml, .json)"
    ),
) -> None:
    """
    Fetch and print one player's normalized profile as JSON.
    """
    config = _load(config_file)
    service = BriefingService(BriefingContext.from_config(config))

    try:
        player = asyncio.run(service.get_profile(player_id))
    except (FetchError, ParseError) as e:
        console.print(f"[red]Error:[/red] {e}")
        raise typer.Exit(1)

    typer.echo(json.dumps(player.to_dict(), indent=2))


@app.command("init-config")
def init_config(
    path: Path = typer.Argument(Path("cs2brief.yaml"), help="Where to write the config file"),
    force: bool = typer.Option(False, "--force", "-f", help="Overwrite an existing file"),
) -> None:
    """
    Write a configuration file populated with defaults.
    """
    if path.exists() and not force:
        console.print(f"[red]Error:[/red] {path} already exists (use --force to overwrite)")
        raise typer.Exit(1)

    try:
        save_config(Cs2BriefConfig(), path)
    except ValueError as e:
        console.print(f"[red]Error:[/red] {e}")
        raise typer.Exit(1)

    console.print(f"[green]Wrote default config to[/green] {path}")


@app.command()
def serve(
    host: str = typer.Option("127.0.0.1", "--host", help="Host to bind to"),
    port: int = typer.Option(8000, "--port", "-p", help="Port to bind to"),
    reload: bool = typer.Option(False, "--reload", help="Enable auto-reload for development"),
) -> None:
    """
    Start the HTTP API server.
    """
    import uvicorn

    console.print(f"[bold blue]cs2brief[/bold blue] API on http://{host}:{port}")
    uvicorn.run("cs2brief.api:app", host=host, port=port, reload=reload)


def main() -> None:
    """Main entry point."""
    app()


if __name__ == "__main__":
    main()
