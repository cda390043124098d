"""Tests for ingredient matching."""

from whattoeat.services.matching import ExactMatcher, match_score, normalize_food


def test_match_score_all_matched() -> None:
    result = match_score(["鸡蛋", "西红柿"], ["鸡蛋 2个", "西红柿 1个"])

    assert result.matched == ["鸡蛋", "西红柿"]
    assert result.missing == []
    assert result.match_ratio == 1.0
    assert result.score == 100


def test_match_score_penalises_missing_key_ingredient() -> None:
    result = match_score(["西红柿"], ["鸡肉 200g", "西红柿 1个"])

    assert result.missing == ["鸡肉"]
    assert result.match_ratio == 0.5
    assert result.score == 35


def test_match_score_without_key_ingredient_missing() -> None:
    result = match_score(["西红柿"], ["青菜", "西红柿 1个"])

    assert result.score == 50


def test_match_score_empty_user_foods() -> None:
    result = match_score([], ["鸡蛋 2个", "葱"])

    assert result.score == 0
    assert result.matched == []
    assert result.missing == ["鸡蛋 2个", "葱"]
    assert result.match_ratio == 0


def test_match_score_empty_ingredients() -> None:
    result = match_score(["鸡蛋"], [])

    assert result.score == 100
    assert result.matched == []
    assert result.missing == []
    assert result.match_ratio == 1


def test_match_score_tolerates_non_list_inputs() -> None:
    assert match_score(None, ["鸡蛋"]).score == 0
    assert match_score(["鸡蛋"], None).score == 100


def test_substring_matching_is_bidirectional() -> None:
    assert match_score(["土鸡蛋"], ["鸡蛋"]).score == 100
    assert match_score(["鸡蛋"], ["土鸡蛋 3个"]).score == 100


def test_exact_matcher_rejects_partial_names() -> None:
    result = match_score(["豆"], ["豆腐 1块"], matcher=ExactMatcher())

    assert result.matched == []
    assert result.missing == ["豆腐"]
    assert result.score == 0


def test_normalize_food_strips_quantities_and_punctuation() -> None:
    assert normalize_food("鸡蛋，2个") == "鸡蛋"
    assert normalize_food(" 西红柿、") == "西红柿"
