from datetime import datetime, timedelta, timezone

import pytest

from moderator.engine.models import (
    AliveExactlyRule,
    Effect,
    EliminateRule,
    Player,
    UnknownRule,
    VictoryConditions,
)
from moderator.engine.rules import RuleContext, evaluate_rule, parse_rule, rules_satisfied


NOW = datetime(2030, 6, 1, 12, 0, tzinfo=timezone.utc)


def _infected(pid: str, alive: bool = True) -> Player:
    return Player(
        id=pid,
        alive=alive,
        affiliations=["good"],
        effects=[Effect(type="infected", expires_at=NOW + timedelta(minutes=5))],
    )


def _healthy(pid: str, alive: bool = True) -> Player:
    return Player(id=pid, alive=alive, affiliations=["good"])


def test_eliminate_rule():
    rule = {"type": "eliminate", "targetTeam": "evil"}

    assert evaluate_rule(rule, RuleContext(counts={"evil": 0, "good": 3}))
    assert not evaluate_rule(rule, RuleContext(counts={"evil": 1, "good": 3}))
    assert evaluate_rule(rule, RuleContext(counts={"good": 3}))


def test_parity_rule_comparators():
    context = RuleContext(counts={"evil": 2, "good": 2})

    assert evaluate_rule({"type": "parity", "team": "evil", "against": "good", "comparator": ">="}, context)
    assert not evaluate_rule({"type": "parity", "team": "evil", "against": "good", "comparator": ">"}, context)
    assert evaluate_rule({"type": "parity", "team": "evil", "against": "good", "comparator": "==="}, context)

    bigger = RuleContext(counts={"evil": 3, "good": 2})
    assert evaluate_rule({"type": "parity", "team": "evil", "against": "good", "comparator": ">"}, bigger)
    assert not evaluate_rule({"type": "parity", "team": "evil", "against": "good", "comparator": "==="}, bigger)


def test_parity_rule_defaults_to_at_least_good():
    rule = parse_rule({"type": "parity", "team": "evil"})

    assert rule.against == "good"
    assert rule.comparator == ">="
    assert evaluate_rule(rule, RuleContext(counts={"evil": 1, "good": 1}))
    assert not evaluate_rule(rule, RuleContext(counts={"evil": 1, "good": 2}))


def test_parity_rule_unknown_comparator_fails_closed():
    rule = {"type": "parity", "team": "evil", "comparator": "<"}

    assert not evaluate_rule(rule, RuleContext(counts={"evil": 0, "good": 5}))


def test_alive_count_rules():
    context = RuleContext(counts={"neutral": 1})

    assert evaluate_rule({"type": "aliveExactly", "team": "neutral", "count": 1}, context)
    assert not evaluate_rule({"type": "aliveExactly", "team": "neutral", "count": 2}, context)
    assert evaluate_rule({"type": "aliveAtMost", "team": "neutral", "count": 1}, context)
    assert not evaluate_rule({"type": "aliveAtMost", "team": "neutral", "count": 0}, context)
    assert evaluate_rule({"type": "aliveAtLeast", "team": "neutral", "count": 1}, context)
    assert not evaluate_rule({"type": "aliveAtLeast", "team": "neutral", "count": 2}, context)


def test_missing_team_counts_as_zero():
    context = RuleContext(counts={"good": 4})

    assert evaluate_rule({"type": "aliveExactly", "count": 0}, context)
    assert evaluate_rule({"type": "eliminate"}, context)
    assert not evaluate_rule({"type": "aliveAtLeast", "count": 1}, context)


def test_non_string_team_tag_counts_as_zero():
    context = RuleContext(counts={"good": 2, "evil": 1})

    assert evaluate_rule({"type": "eliminate", "targetTeam": 5}, context)
    assert evaluate_rule({"type": "aliveExactly", "team": ["evil"], "count": 0}, context)
    rule = parse_rule({"type": "parity", "team": "evil", "against": 7, "comparator": 3})
    assert rule.against == "good"
    assert not evaluate_rule(rule, context)


def test_player_with_non_string_team_tag_still_loads():
    player = Player(
        id="1",
        victory_conditions={"customRules": [{"type": "eliminate", "targetTeam": 5}]},
    )

    [rule] = player.victory_conditions.custom_rules
    assert isinstance(rule, EliminateRule)
    assert rule.target_team is None
    assert evaluate_rule(rule, RuleContext(counts={"good": 1}))


def test_missing_or_malformed_count_fails_closed():
    context = RuleContext(counts={"good": 0})

    assert not evaluate_rule({"type": "aliveAtMost", "team": "good"}, context)
    assert not evaluate_rule({"type": "aliveExactly", "team": "good", "count": "several"}, context)


def test_unknown_rule_kind_is_never_satisfied():
    rule = parse_rule({"type": "moonPhase", "phase": "full"})

    assert isinstance(rule, UnknownRule)
    assert not evaluate_rule(rule, RuleContext(counts={}))
    assert not evaluate_rule({"kind": "eliminate"}, RuleContext(counts={}))


def test_all_others_have_effect_skips_self_and_dead():
    me = _healthy("1")
    players = [me, _infected("2"), _infected("3"), _healthy("4", alive=False)]
    rule = {"type": "allOthersHaveEffect", "effect": "infected", "negate": False}

    context = RuleContext(counts={}, players=players, self_player=me, now=NOW)

    assert evaluate_rule(rule, context)


def test_all_others_have_effect_fails_on_one_healthy_player():
    me = _healthy("1")
    players = [me, _infected("2"), _healthy("3")]
    rule = {"type": "allOthersHaveEffect", "effect": "infected"}

    assert not evaluate_rule(rule, RuleContext(counts={}, players=players, self_player=me, now=NOW))


def test_all_others_have_effect_ignores_expired_effects():
    me = _healthy("1")
    players = [me, _infected("2")]
    rule = {"type": "allOthersHaveEffect", "effect": "infected"}
    later = NOW + timedelta(hours=1)

    assert not evaluate_rule(rule, RuleContext(counts={}, players=players, self_player=me, now=later))


def test_all_others_have_effect_negated():
    me = _infected("1")
    players = [me, _healthy("2"), _healthy("3")]
    rule = {"type": "allOthersHaveEffect", "effect": "infected", "negate": True}

    assert evaluate_rule(rule, RuleContext(counts={}, players=players, self_player=me, now=NOW))

    players.append(_infected("4"))
    assert not evaluate_rule(rule, RuleContext(counts={}, players=players, self_player=me, now=NOW))


def test_all_others_have_effect_without_self_checks_everyone():
    players = [_healthy("1"), _infected("2")]
    rule = {"type": "allOthersHaveEffect", "effect": "infected"}

    assert not evaluate_rule(rule, RuleContext(counts={}, players=players, now=NOW))
    assert evaluate_rule(rule, RuleContext(counts={}, players=players[1:], now=NOW))


def test_all_others_visited():
    me = Player(id="1", role_data={"visitedPlayers": ["2", 3]})
    players = [me, _healthy("2"), _healthy(3), _healthy("4", alive=False)]
    rule = {"type": "allOthersVisited"}

    assert evaluate_rule(rule, RuleContext(counts={}, players=players, self_player=me))

    players.append(_healthy("5"))
    assert not evaluate_rule(rule, RuleContext(counts={}, players=players, self_player=me))
    assert not evaluate_rule(rule, RuleContext(counts={}, players=players))


def test_rules_satisfied_is_a_conjunction():
    context = RuleContext(counts={"neutral": 1, "good": 0})
    rules = [
        AliveExactlyRule(team="neutral", count=1),
        AliveExactlyRule(team="good", count=0),
    ]

    assert rules_satisfied(rules, context)
    assert not rules_satisfied(rules + [EliminateRule(target_team="neutral")], context)


def test_rules_satisfied_empty_list_is_not_a_win():
    assert not rules_satisfied([], RuleContext(counts={}))


@pytest.mark.parametrize("key", ["customRules", "custom_rules"])
def test_victory_conditions_parse_rules_by_kind(key):
    conditions = VictoryConditions.model_validate({
        key: [
            {"type": "aliveExactly", "team": "neutral", "count": 1},
            {"type": "somethingNew"},
        ],
    })

    assert isinstance(conditions.custom_rules[0], AliveExactlyRule)
    assert isinstance(conditions.custom_rules[1], UnknownRule)
    assert conditions.can_win_with_teams == ()
    assert conditions.solo_win is False
