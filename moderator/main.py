"""Main entry point for the moderator CLI."""

import argparse
import sys
from datetime import datetime
from typing import Optional, Sequence

from dotenv import load_dotenv
from pydantic import TypeAdapter
from rich.console import Console
from rich.markup import escape
from rich.panel import Panel
from rich.table import Table

from .communication.markdown_logger import MarkdownLogger
from .config import DEFAULT_ROSTER_PATH, GameSettings, load_config, load_roster
from .engine.game import Game
from .engine.models import Player, Verdict


console = Console()

WINNER_STYLES = {
    "good": ("THE TOWN WINS!", "green"),
    "evil": ("THE MAFIA WINS!", "red"),
    "solo": ("SOLO VICTORY!", "magenta"),
    "custom": ("CUSTOM VICTORY!", "yellow"),
    "draw": ("DRAW - NOBODY SURVIVED", "white"),
}


def parse_args(argv: Optional[Sequence[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        prog="moderator",
        description="Evaluate a Mafia roster and report whether the game is over.",
    )
    parser.add_argument(
        "roster",
        nargs="?",
        default=DEFAULT_ROSTER_PATH,
        help=f"Roster YAML file (default: {DEFAULT_ROSTER_PATH})",
    )
    parser.add_argument(
        "--no-log",
        action="store_true",
        help="Do not write a markdown game log",
    )
    parser.add_argument(
        "--at",
        default=None,
        help="Evaluate effects as of this ISO timestamp instead of now",
    )
    return parser.parse_args(argv)


def parse_timestamp(value: Optional[str]) -> Optional[datetime]:
    """Parse an ISO timestamp (``Z`` suffix allowed)."""
    if value is None:
        return None
    return TypeAdapter(datetime).validate_python(value)


def display_welcome():
    """Display welcome message."""
    console.print(Panel.fit(
        "[bold red]MAFIA MODERATOR[/bold red]\n"
        "[dim]Victory check[/dim]",
        border_style="red",
    ))
    console.print()


def display_players(players: Sequence[Player]):
    """Display the roster."""
    table = Table(title="Players", show_header=True, header_style="bold magenta")
    table.add_column("Name", style="cyan")
    table.add_column("Role", style="red")
    table.add_column("Teams", style="blue")
    table.add_column("Status", style="green")

    for player in players:
        status = "[green]Alive[/green]" if player.alive else "[red]Dead[/red]"
        effects = ", ".join(e.type for e in player.effects)
        if effects:
            status = f"{status} [dim]({effects})[/dim]"
        table.add_row(
            player.display_name,
            player.role or "?",
            ", ".join(player.affiliations) or "-",
            status,
        )

    console.print(table)
    console.print()


def display_verdict(game: Game, verdict: Optional[Verdict]):
    """Display the outcome of the victory check."""
    if verdict is None:
        console.print(Panel(
            "[bold yellow]No winner yet.[/bold yellow]\n"
            "The game continues.",
            border_style="yellow",
        ))
        return

    title, color = WINNER_STYLES.get(verdict.winner, (verdict.winner.upper(), "white"))
    winner_ids = {str(pid) for pid in verdict.players}
    names = [p.display_name for p in game.players if str(p.id) in winner_ids]
    lines = [f"[bold {color}]{title}[/bold {color}]"]
    if names:
        lines.append(f"Winners: {', '.join(names)}")
    if verdict.teams:
        lines.append(f"Teams: {', '.join(verdict.teams)}")
    console.print(Panel("\n".join(lines), border_style=color))


def main(argv: Optional[Sequence[str]] = None) -> int:
    """Main entry point."""
    load_dotenv()
    args = parse_args(argv)

    display_welcome()

    # Load configuration
    console.print(f"[dim]Loading roster from: {args.roster}[/dim]")
    try:
        config_data = load_config(args.roster)
        settings = GameSettings.from_config(config_data)
        players = load_roster(config_data)
        now = parse_timestamp(args.at)
    except (FileNotFoundError, ValueError) as e:
        console.print(f"[red]Error: {escape(str(e))}[/red]")
        return 1

    logger = MarkdownLogger(base_dir=settings.log_dir)
    if settings.write_log and not args.no_log:
        logger.start_game(settings.game_id)
        logger.log_setup(players)

    game = Game(players, logger=logger, phase=settings.phase_state)
    display_players(game.players)

    verdict = game.check_victory(now=now)
    display_verdict(game, verdict)

    # Log location
    if logger.game_dir:
        console.print(f"[dim]Game log saved to: {logger.game_dir}[/dim]")

    return 0


def run():
    """Entry point for the CLI."""
    sys.exit(main())


if __name__ == "__main__":
    run()
