"""Evaluation of per-player custom win rules."""

import operator
from dataclasses import dataclass
from datetime import datetime
from typing import Any, Iterable, Mapping, Optional, Sequence

from pydantic import BaseModel, TypeAdapter, ValidationError

from .models import (
    AliveAtLeastRule,
    AliveAtMostRule,
    AliveExactlyRule,
    AllOthersHaveEffectRule,
    AllOthersVisitedRule,
    CustomRule,
    EliminateRule,
    ParityRule,
    Player,
)
from .teams import alive_players, as_utc, has_active_effect


_RULE_ADAPTER = TypeAdapter(CustomRule)

_PARITY_COMPARATORS = {
    ">=": operator.ge,
    ">": operator.gt,
    "===": operator.eq,
}

_COUNT_CHECKS = {
    AliveExactlyRule: operator.eq,
    AliveAtMostRule: operator.le,
    AliveAtLeastRule: operator.ge,
}


@dataclass(frozen=True)
class RuleContext:
    """What a rule may look at while being evaluated."""
    counts: Mapping[str, int]
    players: Sequence[Player] = ()
    self_player: Optional[Player] = None  # owner of the rule being checked
    now: Optional[datetime] = None


def parse_rule(rule: Any) -> BaseModel:
    """Turn a raw rule mapping into its rule model.

    Unrecognized kinds become ``UnknownRule`` rather than failing.
    """
    if isinstance(rule, BaseModel):
        return rule
    return _RULE_ADAPTER.validate_python(rule)


def evaluate_rule(rule: Any, context: RuleContext) -> bool:
    """Evaluate one custom rule against the current roster.

    Args:
        rule: A rule model, or a raw mapping as found in role configuration.
        context: Team counts, the roster, the rule's owner and the
            evaluation time.

    Returns:
        Whether the rule holds. Unknown or unparseable rules are False.
    """
    try:
        rule = parse_rule(rule)
    except ValidationError:
        return False

    counts = context.counts

    if isinstance(rule, EliminateRule):
        return counts.get(rule.target_team, 0) == 0

    if isinstance(rule, ParityRule):
        compare = _PARITY_COMPARATORS.get(rule.comparator)
        if compare is None:
            return False
        return compare(counts.get(rule.team, 0), counts.get(rule.against, 0))

    check = _COUNT_CHECKS.get(type(rule))
    if check is not None:
        if rule.count is None:
            return False
        return check(counts.get(rule.team, 0), rule.count)

    if isinstance(rule, AllOthersHaveEffectRule):
        return _all_others_have_effect(rule, context)

    if isinstance(rule, AllOthersVisitedRule):
        return _all_others_visited(context)

    return False


def _others(context: RuleContext) -> list[Player]:
    alive = alive_players(context.players)
    if context.self_player is None:
        return alive
    self_id = str(context.self_player.id)
    return [p for p in alive if str(p.id) != self_id]


def _all_others_have_effect(rule: AllOthersHaveEffectRule, context: RuleContext) -> bool:
    now = as_utc(context.now)
    for player in _others(context):
        has = has_active_effect(player, rule.effect, now)
        if has == rule.negate:
            return False
    return True


def _all_others_visited(context: RuleContext) -> bool:
    owner = context.self_player
    if owner is None:
        return False
    visited = owner.role_data.get("visitedPlayers") or owner.role_data.get("visited_players") or []
    visited_ids = {str(v) for v in visited if v is not None}
    return all(str(p.id) in visited_ids for p in _others(context))


def rules_satisfied(rules: Iterable[Any], context: RuleContext) -> bool:
    """Check a player's rule list as a conjunction.

    Every rule is evaluated, even after one fails. An empty list is never
    satisfied.
    """
    results = [evaluate_rule(rule, context) for rule in rules]
    return bool(results) and all(results)
