"""Tests for composite scoring and ranking."""

import math
from dataclasses import fields, replace

import pytest

from whattoeat.domain.recipes import Difficulty, RecipeCandidate, UserProfile
from whattoeat.services.ranking import (
    DEFAULT_WEIGHTS,
    INVENTORY_RECOMMEND_WEIGHTS,
    RankingOptions,
    RecipeRanker,
    SubScores,
    difficulty_fit,
    total_score,
)
from tests.conftest import NOW, recipe_row


def _candidate(recipe_id: str, ingredients: list[object], **kwargs) -> RecipeCandidate:
    row = recipe_row(recipe_id, recipe_id, ingredients, **kwargs)
    return RecipeCandidate.from_mapping(row)


def test_total_score_all_perfect() -> None:
    scores = {
        "matchScore": 100,
        "preferenceScore": 100,
        "nutritionScore": 100,
        "popularityScore": 100,
        "difficultyScore": 100,
    }

    assert total_score(scores) == 100


def test_total_score_defaults_missing_and_invalid_values_to_zero() -> None:
    assert total_score({}) == 0
    assert total_score({"match_score": math.nan, "preferenceScore": True}) == 0
    assert total_score({"match_score": 100}) == 30


def test_total_score_with_inventory_weights() -> None:
    scores = SubScores(match_score=100, popularity_score=1000)

    assert total_score(scores, INVENTORY_RECOMMEND_WEIGHTS) == 35


def test_difficulty_fit() -> None:
    assert difficulty_fit(Difficulty.EASY, Difficulty.EASY) == 100
    assert difficulty_fit("中等", "简单") == 70
    assert difficulty_fit("困难", "简单") == 40
    assert difficulty_fit("大厨", "简单") == 70
    assert difficulty_fit("简单", None) == 100
    assert difficulty_fit(["简单"], "简单") == 70


def test_score_populates_breakdown() -> None:
    ranker = RecipeRanker()
    candidate = _candidate("r1", ["鸡蛋 200g"], tags={"quick": True}, like_count=10)
    profile = UserProfile(preferences=("快手",))

    ranked = ranker.score(["鸡蛋"], profile, candidate, NOW)

    assert ranked.scores.match == 100
    assert ranked.scores.preference == 100
    assert ranked.scores.popularity == 20
    assert ranked.scores.difficulty == 100
    assert ranked.nutrition.calories == 310
    # 30 + 25 + 0.2 * 15.5 + 0.15 * 20 + 10
    assert ranked.scores.total == 71


def test_rank_orders_by_total_descending() -> None:
    ranker = RecipeRanker()
    candidates = [
        _candidate("partial", ["鸡蛋 2个", "牛肉 200g"]),
        _candidate("full", ["鸡蛋 2个", "西红柿 1个"]),
    ]

    ranked = ranker.rank(["鸡蛋", "西红柿"], UserProfile(), candidates, NOW)

    assert [item.candidate.id for item in ranked] == ["full", "partial"]
    assert ranked[0].scores.total >= ranked[1].scores.total


def test_rank_keeps_input_order_for_ties() -> None:
    ranker = RecipeRanker()
    candidates = [_candidate(recipe_id, ["青菜"]) for recipe_id in ("a", "b", "c")]

    ranked = ranker.rank(["青菜"], UserProfile(), candidates, NOW)

    assert [item.candidate.id for item in ranked] == ["a", "b", "c"]


def test_rank_total_is_monotonic_in_match() -> None:
    ranker = RecipeRanker()
    candidate = _candidate("r1", ["鸡蛋 2个", "西红柿 1个"])
    profile = UserProfile()

    fewer = ranker.score(["鸡蛋"], profile, candidate, NOW)
    more = ranker.score(["鸡蛋", "西红柿"], profile, candidate, NOW)

    assert more.scores.match > fewer.scores.match
    assert more.scores.total >= fewer.scores.total


def test_rank_limit_truncates() -> None:
    ranker = RecipeRanker()
    candidates = [_candidate(recipe_id, ["青菜"]) for recipe_id in ("a", "b", "c")]

    assert len(ranker.rank(["青菜"], UserProfile(), candidates, NOW, limit=2)) == 2
    assert ranker.rank(["青菜"], UserProfile(), candidates, NOW, limit=0) == []
    assert ranker.rank(["青菜"], UserProfile(), candidates, NOW, limit=-1) == []


def test_rank_is_idempotent() -> None:
    ranker = RecipeRanker()
    candidates = [
        _candidate("a", ["鸡蛋 2个"], like_count=3),
        _candidate("b", ["牛肉 300g"], like_count=9),
    ]

    first = ranker.rank(["鸡蛋"], UserProfile(), candidates, NOW)
    second = ranker.rank(["鸡蛋"], UserProfile(), candidates, NOW)

    assert first == second


def test_rank_accepts_mappings_and_skips_malformed_candidates() -> None:
    ranker = RecipeRanker()
    candidates = [
        recipe_row("row", "row", ["青菜"]),
        42,
        None,
    ]

    ranked = ranker.rank(
        ["青菜"], UserProfile(), candidates, NOW  # type: ignore[arg-type]
    )

    assert [item.candidate.id for item in ranked] == ["row"]


def test_rank_empty_candidates() -> None:
    assert RecipeRanker().rank(["青菜"], UserProfile(), [], NOW) == []


def test_rank_can_saturate_popularity() -> None:
    ranker = RecipeRanker(RankingOptions(popularity_half_point=20))
    candidate = _candidate("r1", ["青菜"], like_count=10)

    ranked = ranker.score(["青菜"], UserProfile(), candidate, NOW)

    assert ranked.scores.popularity == 50


@pytest.mark.parametrize(
    "weights",
    [DEFAULT_WEIGHTS, INVENTORY_RECOMMEND_WEIGHTS],
    ids=["default", "inventory"],
)
@pytest.mark.parametrize("name", [field.name for field in fields(SubScores)])
def test_total_score_never_decreases_when_one_sub_score_rises(weights, name) -> None:
    base = SubScores(
        match_score=40,
        preference_score=50,
        nutrition_score=60,
        popularity_score=70,
        difficulty_score=80,
    )

    totals = [
        total_score(replace(base, **{name: value}), weights)
        for value in (0, 10, 25, 50, 75, 100, 250, 1000)
    ]

    assert totals == sorted(totals)
