"""Victory evaluation.

Decides, from a roster snapshot, whether the game is over and who won.
Checks run in strict priority order and the first one that produces a
verdict wins:

1. Nobody alive: draw.
2. Solo: a solo-win player is the last one standing.
3. Custom rules: a player's own rule list is fully satisfied (infected-style
   wins). Custom wins preempt coalition wins.
4. Good: no evil left and someone good or neutral still alive.
5. Evil: no good left, or evil at parity or in the majority.

A coalition check that credits no surviving player is not a verdict; the
game goes on. The evaluator is a pure function of its input.
"""

from datetime import datetime
from typing import Optional, Sequence

from .models import EVIL, GOOD, NEUTRAL, Player, Verdict
from .rules import RuleContext, rules_satisfied
from .teams import alive_players, as_utc, live_team_counts


def _custom_win(player: Player, context: RuleContext) -> bool:
    rules = player.victory_conditions.custom_rules
    if not rules:
        return False
    return rules_satisfied(
        rules,
        RuleContext(
            counts=context.counts,
            players=context.players,
            self_player=player,
            now=context.now,
        ),
    )


def _coalition(alive: Sequence[Player], team: str) -> list[Player]:
    """Alive players credited with a win by ``team``."""
    return [p for p in alive if team in p.victory_conditions.can_win_with_teams]


def describe_counts(players: Sequence[Player]) -> dict[str, int]:
    """Alive counts used by the coalition checks."""
    counts = live_team_counts(players)
    return {team: counts.get(team, 0) for team in (GOOD, EVIL, NEUTRAL)}


def evaluate_victory(
    players: Sequence[Player],
    now: Optional[datetime] = None,
) -> Optional[Verdict]:
    """Check whether the game has ended.

    Args:
        players: Full roster, dead players included, in seating order.
        now: Evaluation time for effect expiry. Defaults to the current time,
            captured once for the whole call.

    Returns:
        The verdict, or None if the game continues.
    """
    now = as_utc(now)
    alive = alive_players(players)

    if not alive:
        return Verdict(winner="draw", players=[], teams=[])

    counts = live_team_counts(players)
    context = RuleContext(counts=counts, players=players, now=now)

    # Solo: last player standing only
    for player in alive:
        if not player.victory_conditions.solo_win:
            continue
        others = [p for p in alive if str(p.id) != str(player.id)]
        if not others:
            return Verdict(
                winner="solo",
                players=[player.id],
                teams=list(player.affiliations),
            )

    # Custom rules
    for player in alive:
        if _custom_win(player, context):
            winners = [p for p in alive if _custom_win(p, context)]
            return Verdict(
                winner="custom",
                players=[p.id for p in winners],
                teams=list(player.affiliations),
            )

    good_alive = counts.get(GOOD, 0)
    evil_alive = counts.get(EVIL, 0)
    neutral_alive = counts.get(NEUTRAL, 0)

    if evil_alive == 0 and (good_alive > 0 or neutral_alive > 0):
        winners = _coalition(alive, GOOD)
        if winners:
            return Verdict(winner="good", players=[p.id for p in winners], teams=[GOOD])

    if good_alive == 0 or evil_alive >= good_alive:
        winners = _coalition(alive, EVIL)
        if winners:
            return Verdict(winner="evil", players=[p.id for p in winners], teams=[EVIL])

    return None
