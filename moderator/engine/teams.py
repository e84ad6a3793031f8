"""Team aggregation and effect queries over a roster snapshot.

Every view here is recomputed from the full player list on each call; dead
players are ignored throughout.
"""

from collections import Counter
from datetime import datetime, timezone
from typing import Optional, Sequence

from .models import Player


def as_utc(moment: Optional[datetime]) -> datetime:
    """Normalize an evaluation time; ``None`` means now."""
    if moment is None:
        return datetime.now(timezone.utc)
    if moment.tzinfo is None:
        return moment.replace(tzinfo=timezone.utc)
    return moment


def alive_players(players: Sequence[Player]) -> list[Player]:
    """Get all alive players, in input order."""
    return [p for p in players if p.alive]


def live_team_counts(players: Sequence[Player]) -> Counter:
    """Count alive players per team tag.

    A player carrying N tags contributes to N counts. Missing teams read as 0.
    """
    counts: Counter = Counter()
    for player in players:
        if not player.alive:
            continue
        for team in player.affiliations:
            counts[team] += 1
    return counts


def group_by_affiliation(players: Sequence[Player]) -> dict[str, list[Player]]:
    """Group alive players by team tag, keeping input order within each team."""
    groups: dict[str, list[Player]] = {}
    for player in players:
        if not player.alive:
            continue
        for team in player.affiliations:
            groups.setdefault(team, []).append(player)
    return groups


def has_active_effect(
    player: Player,
    effect_type: Optional[str],
    now: Optional[datetime] = None,
) -> bool:
    """Check whether the player carries an unexpired effect of this type.

    Args:
        player: Player to inspect.
        effect_type: Effect type to look for.
        now: Evaluation time. Callers evaluating a whole roster capture it
            once and pass it down so every check sees the same instant.

    Returns:
        True if an effect of that type has no expiry or expires after ``now``.
    """
    now = as_utc(now)
    return any(
        effect.type == effect_type
        and (effect.expires_at is None or effect.expires_at > now)
        for effect in player.effects
    )
