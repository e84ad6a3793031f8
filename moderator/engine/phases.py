"""Game phase definitions."""

from enum import Enum, auto
from dataclasses import dataclass


class GamePhase(Enum):
    """Phases of the mafia game."""
    SETUP = auto()      # Lobby, role assignment
    NIGHT = auto()      # Roles act
    DAY = auto()        # Discussion and vote
    GAME_OVER = auto()  # A verdict was reached

    @classmethod
    def from_name(cls, name: str) -> "GamePhase":
        """Look up a phase by its config name (``night``, ``day``, ...)."""
        key = name.strip().upper().replace("-", "_").replace(" ", "_")
        if key == "END":
            key = "GAME_OVER"
        if key not in cls.__members__:
            raise ValueError(
                f"Unknown phase: {name}. Available: {[p.name.lower() for p in cls]}"
            )
        return cls[key]


@dataclass
class PhaseState:
    """Where the game currently is."""
    phase: GamePhase
    round_number: int = 0  # Day/Night number (1, 2, 3...)

    @property
    def phase_name(self) -> str:
        """Get a human-readable phase name with round number."""
        if self.phase == GamePhase.NIGHT:
            return f"night_{self.round_number}"
        elif self.phase == GamePhase.DAY:
            return f"day_{self.round_number}"
        return self.phase.name.lower()
