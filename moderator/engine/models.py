"""Player snapshots, win-condition rules and verdicts.

These are the read-only records handed to the victory evaluator. They accept
both the camelCase keys used by role configuration (``victoryConditions``,
``canWinWithTeams``, ``expiresAt``...) and their snake_case counterparts.
"""

from datetime import datetime, timezone
from typing import Annotated, Any, Literal, Optional, Union

from pydantic import (
    BaseModel,
    BeforeValidator,
    ConfigDict,
    Discriminator,
    Field,
    Tag,
    field_validator,
)
from pydantic.alias_generators import to_camel


GOOD = "good"
EVIL = "evil"
NEUTRAL = "neutral"
SOLO = "solo"

WinnerKind = Literal["draw", "solo", "custom", "good", "evil"]


def _none_as_empty(value: Any) -> Any:
    return () if value is None else value


def _none_as_empty_dict(value: Any) -> Any:
    return {} if value is None else value


def _team_tag(value: Any) -> Any:
    # Non-string team tags match no live team, so they read as count 0
    return value if isinstance(value, str) else None


TagList = Annotated[tuple[str, ...], BeforeValidator(_none_as_empty)]
TeamTag = Annotated[Optional[str], BeforeValidator(_team_tag)]


class SnapshotModel(BaseModel):
    """Base for the frozen records the engine reads."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        frozen=True,
    )


class Effect(SnapshotModel):
    """A timed status attached to a player."""
    type: str
    expires_at: Optional[datetime] = None  # None = never expires

    @field_validator("expires_at")
    @classmethod
    def _assume_utc(cls, value: Optional[datetime]) -> Optional[datetime]:
        if value is not None and value.tzinfo is None:
            return value.replace(tzinfo=timezone.utc)
        return value


# --- Custom rules ---

class EliminateRule(SnapshotModel):
    """Satisfied when nobody on ``target_team`` is alive."""
    type: Literal["eliminate"] = "eliminate"
    target_team: TeamTag = None


class ParityRule(SnapshotModel):
    """Compares the alive count of ``team`` with that of ``against``."""
    type: Literal["parity"] = "parity"
    team: TeamTag = None
    against: Annotated[str, BeforeValidator(lambda v: v if isinstance(v, str) else GOOD)] = GOOD
    comparator: Annotated[str, BeforeValidator(lambda v: ">=" if v is None else str(v))] = ">="


class AliveExactlyRule(SnapshotModel):
    type: Literal["aliveExactly"] = "aliveExactly"
    team: TeamTag = None
    count: Optional[int] = None


class AliveAtMostRule(SnapshotModel):
    type: Literal["aliveAtMost"] = "aliveAtMost"
    team: TeamTag = None
    count: Optional[int] = None


class AliveAtLeastRule(SnapshotModel):
    type: Literal["aliveAtLeast"] = "aliveAtLeast"
    team: TeamTag = None
    count: Optional[int] = None


class AllOthersHaveEffectRule(SnapshotModel):
    """Every other alive player has (or with ``negate``, lacks) an active effect."""
    type: Literal["allOthersHaveEffect"] = "allOthersHaveEffect"
    effect: Optional[str] = None
    negate: bool = False


class AllOthersVisitedRule(SnapshotModel):
    """Every other alive player appears in the owner's ``visitedPlayers`` list."""
    type: Literal["allOthersVisited"] = "allOthersVisited"


class UnknownRule(SnapshotModel):
    """A rule kind this engine does not know. Never satisfied."""
    model_config = ConfigDict(extra="allow", frozen=True)

    type: Any = None


RULE_KINDS = (
    "eliminate",
    "parity",
    "aliveExactly",
    "aliveAtMost",
    "aliveAtLeast",
    "allOthersHaveEffect",
    "allOthersVisited",
)


def _rule_kind(value: Any) -> str:
    if isinstance(value, dict):
        kind = value.get("type")
    else:
        kind = getattr(value, "type", None)
    if isinstance(kind, str) and kind in RULE_KINDS:
        return kind
    return "unknown"


CustomRule = Annotated[
    Union[
        Annotated[EliminateRule, Tag("eliminate")],
        Annotated[ParityRule, Tag("parity")],
        Annotated[AliveExactlyRule, Tag("aliveExactly")],
        Annotated[AliveAtMostRule, Tag("aliveAtMost")],
        Annotated[AliveAtLeastRule, Tag("aliveAtLeast")],
        Annotated[AllOthersHaveEffectRule, Tag("allOthersHaveEffect")],
        Annotated[AllOthersVisitedRule, Tag("allOthersVisited")],
        Annotated[UnknownRule, Tag("unknown")],
    ],
    Discriminator(_rule_kind),
]


# --- Players and verdicts ---

class VictoryConditions(SnapshotModel):
    """How a player can win."""
    can_win_with_teams: TagList = ()
    solo_win: Annotated[bool, BeforeValidator(lambda v: False if v is None else v)] = False
    custom_rules: Annotated[
        tuple[CustomRule, ...], BeforeValidator(_none_as_empty)
    ] = ()


class Player(SnapshotModel):
    """Read-only view of a player at one evaluation point."""

    id: Any
    name: Optional[str] = None
    role: Optional[str] = None
    alive: bool = True
    affiliations: TagList = ()
    effects: Annotated[tuple[Effect, ...], BeforeValidator(_none_as_empty)] = ()
    victory_conditions: Annotated[
        VictoryConditions, BeforeValidator(_none_as_empty_dict)
    ] = Field(default_factory=VictoryConditions)
    role_data: Annotated[dict[str, Any], BeforeValidator(_none_as_empty_dict)] = Field(
        default_factory=dict
    )

    @property
    def display_name(self) -> str:
        return self.name or str(self.id)


class Verdict(SnapshotModel):
    """Outcome of a finished game."""

    winner: WinnerKind
    players: list[Any] = Field(default_factory=list)
    teams: list[str] = Field(default_factory=list)
