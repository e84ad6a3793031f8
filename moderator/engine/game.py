"""Moderator game session."""

from datetime import datetime
from typing import Any, Iterable, Optional

from ..communication.markdown_logger import MarkdownLogger
from .models import Effect, Player, Verdict
from .phases import GamePhase, PhaseState
from .victory import describe_counts, evaluate_victory


class Game:
    """The moderator's view of a running game.

    The session never executes role abilities or resolves votes. It records
    their results (deaths, effects) and asks the victory evaluator whether
    the game is over. Player snapshots are replaced, never mutated, so a
    roster handed to the evaluator stays stable.
    """

    def __init__(
        self,
        players: Iterable[Player],
        logger: Optional[MarkdownLogger] = None,
        phase: Optional[PhaseState] = None,
    ):
        """Initialize the game.

        Args:
            players: Starting roster in seating order.
            logger: Optional markdown logger.
            phase: Phase the game is in. Defaults to setup.
        """
        self.players: list[Player] = list(players)
        self.logger = logger or MarkdownLogger()
        self.phase = phase or PhaseState(phase=GamePhase.SETUP)
        self.winner: Optional[Verdict] = None

    @property
    def alive_players(self) -> list[Player]:
        """Get all alive players."""
        return [p for p in self.players if p.alive]

    @property
    def is_over(self) -> bool:
        return self.winner is not None

    def get_player(self, player_id: Any) -> Player:
        """Find a player by id (compared as text)."""
        key = str(player_id)
        for player in self.players:
            if str(player.id) == key:
                return player
        raise ValueError(f"Unknown player: {player_id}")

    def _replace(self, updated: Player) -> None:
        key = str(updated.id)
        self.players = [updated if str(p.id) == key else p for p in self.players]

    def _ensure_running(self) -> None:
        if self.is_over:
            raise ValueError(f"Game is already over ({self.winner.winner} won)")

    def set_phase(self, phase: GamePhase, round_number: Optional[int] = None) -> PhaseState:
        """Record the phase the scheduler moved the game to."""
        self._ensure_running()
        if round_number is None:
            round_number = self.phase.round_number
        self.phase = PhaseState(phase=phase, round_number=round_number)
        self.logger.log_phase_start(self.phase.phase_name)
        return self.phase

    def kill(self, player_id: Any, cause: str = "unknown causes") -> Player:
        """Record a death.

        Args:
            player_id: Who died.
            cause: How they died, for the log.

        Returns:
            The updated player snapshot.
        """
        self._ensure_running()
        player = self.get_player(player_id)
        if not player.alive:
            return player

        updated = player.model_copy(update={"alive": False})
        self._replace(updated)
        self.logger.log_death(player.display_name, cause, self.phase.phase_name, player.role)
        return updated

    def add_effect(
        self,
        player_id: Any,
        effect_type: str,
        expires_at: Optional[datetime] = None,
    ) -> Player:
        """Record an effect produced by a role ability."""
        self._ensure_running()
        player = self.get_player(player_id)
        effect = Effect(type=effect_type, expires_at=expires_at)

        updated = player.model_copy(update={"effects": (*player.effects, effect)})
        self._replace(updated)
        self.logger.log_effect(
            player.display_name, effect_type, self.phase.phase_name, effect.expires_at
        )
        return updated

    def check_victory(self, now: Optional[datetime] = None) -> Optional[Verdict]:
        """Check if game has ended, and end it if so.

        Args:
            now: Evaluation time for effect expiry. Defaults to now.

        Returns:
            The verdict, or None if the game continues. Once the game is over
            the stored verdict is returned without re-evaluating.
        """
        if self.winner is not None:
            return self.winner

        verdict = evaluate_victory(self.players, now=now)
        self.logger.log_evaluation(
            self.phase.phase_name, describe_counts(self.players), verdict
        )

        if verdict is not None:
            self.winner = verdict
            self.phase = PhaseState(
                phase=GamePhase.GAME_OVER,
                round_number=self.phase.round_number,
            )
            self.logger.log_game_end(verdict, self.players)

        return verdict
