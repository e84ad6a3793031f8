"""Roster and game configuration loading."""

import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Optional

import yaml

from .engine.models import Player
from .engine.phases import GamePhase, PhaseState
from .engine.roles import get_role


DEFAULT_ROSTER_PATH = "config/roster.yaml"

_VICTORY_KEYS = ("victoryConditions", "victory_conditions")


@dataclass
class GameSettings:
    """Settings for a moderated game."""
    game_id: Optional[str] = None
    phase: GamePhase = GamePhase.SETUP
    round_number: int = 0
    log_dir: str = field(default_factory=lambda: os.getenv("MODERATOR_LOG_DIR", "games"))
    write_log: bool = True

    @property
    def phase_state(self) -> PhaseState:
        return PhaseState(phase=self.phase, round_number=self.round_number)

    @classmethod
    def from_config(cls, config_data: dict) -> "GameSettings":
        """Read the ``game`` section of a roster file."""
        game = config_data.get("game") or {}
        if not isinstance(game, dict):
            raise ValueError("'game' section must be a mapping")

        settings = cls()
        if game.get("id") is not None:
            settings.game_id = str(game["id"])
        if game.get("phase"):
            settings.phase = GamePhase.from_name(str(game["phase"]))
        if game.get("round") is not None:
            settings.round_number = int(game["round"])
        if game.get("log_dir"):
            settings.log_dir = str(game["log_dir"])
        if "write_log" in game:
            settings.write_log = bool(game["write_log"])
        return settings


def load_config(config_path: str = DEFAULT_ROSTER_PATH) -> dict:
    """Load a roster file from YAML."""
    path = Path(config_path)
    if not path.exists():
        raise FileNotFoundError(f"Config file not found: {config_path}")

    with open(path) as f:
        try:
            data = yaml.safe_load(f)
        except yaml.YAMLError as e:
            raise ValueError(f"Invalid YAML in {config_path}: {e}") from e

    if not isinstance(data, dict):
        raise ValueError(f"Config file must contain a mapping: {config_path}")
    return data


def player_from_record(record: Any) -> Player:
    """Build a player snapshot from one roster entry.

    Fields given explicitly win over the defaults of the player's role.
    """
    if not isinstance(record, dict):
        raise ValueError(f"Player entry must be a mapping, got: {record!r}")

    record = dict(record)
    role_name = record.get("role")
    if role_name:
        role = get_role(role_name)
        if record.get("affiliations") is None:
            record["affiliations"] = role.default_affiliations
        if not any(record.get(key) is not None for key in _VICTORY_KEYS):
            record["victoryConditions"] = role.default_victory

    return Player.model_validate(record)


def load_roster(config_data: dict) -> list[Player]:
    """Build the player list from loaded config data."""
    records = config_data.get("players") or []
    if not isinstance(records, list):
        raise ValueError("'players' must be a list")
    return [player_from_record(record) for record in records]
