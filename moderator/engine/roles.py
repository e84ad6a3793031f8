"""Role definitions for the Mafia game."""

from dataclasses import dataclass, field
from typing import Any, Iterable, Optional

from .models import (
    EVIL,
    GOOD,
    NEUTRAL,
    SOLO,
    AliveExactlyRule,
    AllOthersHaveEffectRule,
    Effect,
    Player,
    VictoryConditions,
)


@dataclass(frozen=True)
class Role:
    """A role in the Mafia game."""

    name: str
    team: str
    action_type: Optional[str] = None
    night_priority: Optional[int] = None
    description: str = ""
    default_affiliations: tuple[str, ...] = ()
    default_victory: VictoryConditions = field(default_factory=VictoryConditions)

    def __str__(self) -> str:
        return self.name


TOWN_VICTORY = VictoryConditions(can_win_with_teams=[GOOD])
MAFIA_VICTORY = VictoryConditions(can_win_with_teams=[EVIL])


# All available roles
ROLES = {
    # Town
    "Doctor": Role(
        name="Doctor",
        team=GOOD,
        action_type="protect",
        night_priority=9,
        description="Protects one player each night from death.",
        default_affiliations=(GOOD,),
        default_victory=TOWN_VICTORY,
    ),
    "Jailer": Role(
        name="Jailer",
        team=GOOD,
        action_type="block",
        night_priority=2,
        description="Locks a player each night; the target cannot act.",
        default_affiliations=(GOOD,),
        default_victory=TOWN_VICTORY,
    ),
    "Investigator": Role(
        name="Investigator",
        team=GOOD,
        action_type="investigate",
        night_priority=5,
        description="Learns two possible roles of a living target each night, one of them correct.",
        default_affiliations=(GOOD,),
        default_victory=TOWN_VICTORY,
    ),
    "Coroner": Role(
        name="Coroner",
        team=GOOD,
        action_type="autopsy",
        night_priority=6,
        description="Examines a dead player to learn their exact role, unless it was cleaned.",
        default_affiliations=(GOOD,),
        default_victory=TOWN_VICTORY,
    ),
    "Lookout": Role(
        name="Lookout",
        team=GOOD,
        action_type="watch",
        night_priority=4,
        description="Watches a house and sees who visited the target.",
        default_affiliations=(GOOD,),
        default_victory=TOWN_VICTORY,
    ),
    "Guardian": Role(
        name="Guardian",
        team=GOOD,
        action_type="guard",
        night_priority=3,
        description="Guards a player; visitors are revealed and their action fails.",
        default_affiliations=(GOOD,),
        default_victory=TOWN_VICTORY,
    ),
    "Tracker": Role(
        name="Tracker",
        team=GOOD,
        action_type="track",
        night_priority=4,
        description="Follows the target and learns whom they visited.",
        default_affiliations=(GOOD,),
        default_victory=TOWN_VICTORY,
    ),
    "Hunter": Role(
        name="Hunter",
        team=GOOD,
        action_type="hunter_kill",
        night_priority=7,
        description="Can kill at night. Dies of guilt after killing an innocent.",
        default_affiliations=(GOOD,),
        default_victory=TOWN_VICTORY,
    ),
    "Citizen": Role(
        name="Citizen",
        team=GOOD,
        action_type=None,
        night_priority=0,
        description="No special ability. Use your vote wisely.",
        default_affiliations=(GOOD,),
        default_victory=TOWN_VICTORY,
    ),

    # Mafia
    "Cleaner": Role(
        name="Cleaner",
        team=EVIL,
        action_type="kill_or_clean",
        night_priority=7,
        description="Kills, or marks a player so their role stays hidden (3 uses per game).",
        default_affiliations=(EVIL,),
        default_victory=MAFIA_VICTORY,
    ),
    "Accuser": Role(
        name="Accuser",
        team=EVIL,
        action_type="kill_or_frame",
        night_priority=7,
        description="Kills, or frames a player to look evil to investigators (3 uses per game).",
        default_affiliations=(EVIL,),
        default_victory=MAFIA_VICTORY,
    ),
    "Consigliere": Role(
        name="Consigliere",
        team=EVIL,
        action_type="kill_or_investigate",
        night_priority=5,
        description="Kills, or learns a living player's exact role (3 uses per game).",
        default_affiliations=(EVIL,),
        default_victory=MAFIA_VICTORY,
    ),
    "Poisoner": Role(
        name="Poisoner",
        team=EVIL,
        action_type="poison",
        night_priority=7,
        description="Poisons a player who dies the next day unless healed. One strong poison per game.",
        default_affiliations=(EVIL,),
        default_victory=MAFIA_VICTORY,
    ),

    # Neutral
    "SerialKiller": Role(
        name="SerialKiller",
        team=NEUTRAL,
        action_type="kill",
        night_priority=0,
        description="Kills every night and aims to be the last one alive.",
        default_affiliations=(NEUTRAL, SOLO),
        default_victory=VictoryConditions(
            solo_win=True,
            custom_rules=[
                AliveExactlyRule(team=NEUTRAL, count=1),
                AliveExactlyRule(team=GOOD, count=0),
                AliveExactlyRule(team=EVIL, count=0),
            ],
        ),
    ),
    "Infected": Role(
        name="Infected",
        team=NEUTRAL,
        action_type="infect",
        night_priority=6,
        description="Infects a visited player each night; wins once everyone else is infected.",
        default_affiliations=(NEUTRAL,),
        default_victory=VictoryConditions(
            custom_rules=[AllOthersHaveEffectRule(effect="infected", negate=False)],
        ),
    ),
    "Jester": Role(
        name="Jester",
        team=NEUTRAL,
        action_type=None,
        night_priority=None,
        description="Wants to be executed by the town vote.",
        default_affiliations=(NEUTRAL, SOLO),
        default_victory=VictoryConditions(solo_win=True),
    ),
    "Witch": Role(
        name="Witch",
        team=NEUTRAL,
        action_type="control",
        night_priority=-1,
        description="Forces a player to use their ability on a chosen target. Wins with whoever survives.",
        default_affiliations=(NEUTRAL,),
        default_victory=VictoryConditions(can_win_with_teams=[GOOD, EVIL]),
    ),
}


def get_role(name: str) -> Role:
    """Get a role by name."""
    if name not in ROLES:
        raise ValueError(f"Unknown role: {name}. Available: {list(ROLES.keys())}")
    return ROLES[name]


def get_roles_by_team(team: str) -> list[Role]:
    """Get all roles whose home team is ``team``."""
    return [role for role in ROLES.values() if role.team == team]


def build_player(
    player_id: Any,
    role_name: str,
    name: Optional[str] = None,
    alive: bool = True,
    effects: Optional[Iterable[Effect]] = None,
) -> Player:
    """Create a player snapshot carrying a role's default win conditions."""
    role = get_role(role_name)
    return Player(
        id=player_id,
        name=name,
        role=role.name,
        alive=alive,
        affiliations=role.default_affiliations,
        effects=tuple(effects or ()),
        victory_conditions=role.default_victory,
    )
