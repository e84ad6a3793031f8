"""Game engine - victory evaluation, role definitions and the moderator session."""

from .models import Effect, Player, Verdict, VictoryConditions
from .roles import Role, ROLES, build_player, get_role
from .rules import RuleContext, evaluate_rule
from .teams import group_by_affiliation, has_active_effect, live_team_counts
from .victory import evaluate_victory
from .phases import GamePhase, PhaseState
from .game import Game

__all__ = [
    "Effect",
    "Player",
    "Verdict",
    "VictoryConditions",
    "Role",
    "ROLES",
    "build_player",
    "get_role",
    "RuleContext",
    "evaluate_rule",
    "group_by_affiliation",
    "has_active_effect",
    "live_team_counts",
    "evaluate_victory",
    "GamePhase",
    "PhaseState",
    "Game",
]
