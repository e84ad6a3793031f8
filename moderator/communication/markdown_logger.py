"""Markdown logger for moderator game records."""

from datetime import datetime
from pathlib import Path
from typing import TYPE_CHECKING, Mapping, Optional, Sequence

if TYPE_CHECKING:
    from ..engine.models import Player, Verdict


WINNER_TITLES = {
    "draw": "DRAW",
    "solo": "SOLO WIN",
    "custom": "CUSTOM WIN",
    "good": "GOOD TEAM",
    "evil": "EVIL TEAM",
}


class MarkdownLogger:
    """Writes game events and victory checks to markdown files.

    Until ``start_game`` is called there is no game directory and every
    ``log_*`` call does nothing.
    """

    def __init__(self, base_dir: str = "games"):
        """Initialize the logger.

        Args:
            base_dir: Base directory for game logs.
        """
        self.base_dir = Path(base_dir)
        self.game_dir: Optional[Path] = None
        self.game_id: Optional[str] = None

    @property
    def game_file(self) -> Optional[Path]:
        if self.game_dir is None:
            return None
        return self.game_dir / "game_state.md"

    def start_game(self, game_id: Optional[str] = None) -> Path:
        """Start logging a new game.

        Args:
            game_id: Optional game identifier. If not provided, uses timestamp.

        Returns:
            Path to the game directory.
        """
        if game_id is None:
            timestamp = datetime.now().strftime("%Y-%m-%d_%H%M%S")
            game_id = f"game_{timestamp}"

        self.game_id = str(game_id)
        self.game_dir = self.base_dir / self.game_id
        self.game_dir.mkdir(parents=True, exist_ok=True)

        with open(self.game_file, "w") as f:
            f.write(f"# Mafia Game - {self.game_id}\n\n")
            f.write(f"Started: {datetime.now().strftime('%Y-%m-%d %H:%M:%S')}\n\n")
            f.write("---\n\n")

        return self.game_dir

    def log_setup(self, players: Sequence["Player"]) -> None:
        """Log the roster the game starts from."""
        if self.game_file is None:
            return
        with open(self.game_file, "a") as f:
            f.write("## Players\n\n")
            f.write("| Player | Role | Teams | Alive |\n")
            f.write("|--------|------|-------|-------|\n")
            for p in players:
                teams = ", ".join(p.affiliations) or "-"
                alive = "Yes" if p.alive else "No"
                f.write(f"| {p.display_name} | {p.role or 'Unknown'} | {teams} | {alive} |\n")
            f.write("\n---\n\n")

    def log_phase_start(self, phase: str) -> None:
        """Log the start of a game phase.

        Args:
            phase: Phase name (e.g., "night_1", "day_1").
        """
        if self.game_file is None:
            return
        with open(self.game_file, "a") as f:
            f.write(f"## {phase.replace('_', ' ').title()}\n\n")

    def log_death(
        self,
        player_name: str,
        cause: str,
        phase: str,
        role_revealed: Optional[str] = None,
    ) -> None:
        """Log a player death.

        Args:
            player_name: Who died.
            cause: How they died.
            phase: When they died.
            role_revealed: Their role (revealed on death).
        """
        if self.game_file is None:
            return
        with open(self.game_file, "a") as f:
            f.write("### Death\n\n")
            f.write(f"**{player_name}** died ({cause}) during {phase.replace('_', ' ')}.\n")
            if role_revealed:
                f.write(f"*They were a {role_revealed}.*\n")
            f.write("\n")

    def log_effect(
        self,
        player_name: str,
        effect_type: str,
        phase: str,
        expires_at: Optional[datetime] = None,
    ) -> None:
        """Log an effect applied to a player."""
        if self.game_file is None:
            return
        with open(self.game_file, "a") as f:
            f.write(f"- {phase.replace('_', ' ')}: **{player_name}** is now *{effect_type}*")
            if expires_at is not None:
                f.write(f" until {expires_at.isoformat()}")
            f.write("\n\n")

    def log_evaluation(
        self,
        phase: str,
        counts: Mapping[str, int],
        verdict: Optional["Verdict"],
    ) -> None:
        """Log one victory check.

        Args:
            phase: Phase the check ran in.
            counts: Alive counts per team.
            verdict: Outcome, or None if the game continues.
        """
        if self.game_file is None:
            return
        summary = ", ".join(f"{team}={n}" for team, n in counts.items())
        with open(self.game_file, "a") as f:
            f.write(f"### Victory Check ({phase.replace('_', ' ')})\n\n")
            f.write(f"Alive counts: {summary}\n\n")
            if verdict is None:
                f.write("*Game continues*\n\n")
            else:
                f.write(f"**Victory: {verdict.winner}**\n\n")

    def log_game_end(self, verdict: "Verdict", all_players: Sequence["Player"]) -> None:
        """Log the game ending.

        Args:
            verdict: The final verdict.
            all_players: All players with roles revealed.
        """
        if self.game_file is None:
            return
        winner_ids = {str(pid) for pid in verdict.players}
        with open(self.game_file, "a") as f:
            f.write("---\n\n")
            f.write("# GAME OVER\n\n")
            f.write(f"## Winner: {WINNER_TITLES.get(verdict.winner, verdict.winner.upper())}\n\n")
            if verdict.teams:
                f.write(f"Teams: {', '.join(verdict.teams)}\n\n")

            f.write("## Winners\n\n")
            winners = [p for p in all_players if str(p.id) in winner_ids]
            if winners:
                for p in winners:
                    f.write(f"- {p.display_name} ({p.role or 'Unknown'})\n")
            else:
                f.write("*Nobody*\n")

            f.write("\n## All Players\n\n")
            f.write("| Player | Role | Teams | Survived | Won |\n")
            f.write("|--------|------|-------|----------|-----|\n")
            for p in all_players:
                survived = "Yes" if p.alive else "No"
                won = "Yes" if str(p.id) in winner_ids else "No"
                teams = ", ".join(p.affiliations) or "-"
                f.write(f"| {p.display_name} | {p.role or 'Unknown'} | {teams} | {survived} | {won} |\n")

            f.write(f"\n\nEnded: {datetime.now().strftime('%Y-%m-%d %H:%M:%S')}\n")
