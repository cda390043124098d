"""Vector similarity between user profiles."""

import math
from collections.abc import Mapping, Sequence

# Feature name and its camelCase spelling.
USER_FEATURES = (
    ("preferences", "preferences"),
    ("dietary_restrictions", "dietaryRestrictions"),
    ("average_calories", "averageCalories"),
    ("food_categories", "foodCategories"),
    ("cooking_difficulty", "cookingDifficulty"),
)

# Numeric features are divided by this before comparison.
NUMERIC_SCALE = 3000


def cosine_similarity(vector_a: Sequence[float], vector_b: Sequence[float]) -> float:
    """Return the cosine of the angle between two vectors (0 when undefined)."""
    if len(vector_a) != len(vector_b):
        return 0.0
    dot = sum(a * b for a, b in zip(vector_a, vector_b, strict=True))
    norm_a = sum(a * a for a in vector_a)
    norm_b = sum(b * b for b in vector_b)
    if norm_a == 0 or norm_b == 0:
        return 0.0
    return dot / (math.sqrt(norm_a) * math.sqrt(norm_b))


def user_similarity(
    user_a: Mapping[str, object], user_b: Mapping[str, object]
) -> float:
    """Compare two user profiles feature by feature.

    List features contribute their overlap ratio against a reference of 1;
    numeric features are scaled down and compared directly. Anything else
    contributes 0 on both sides. Keys may be snake_case or camelCase.
    """
    vector_a: list[float] = []
    vector_b: list[float] = []
    for keys in USER_FEATURES:
        value_a = _feature(user_a, keys)
        value_b = _feature(user_b, keys)
        if isinstance(value_a, list | tuple) and isinstance(value_b, list | tuple):
            vector_a.append(_overlap(value_a, value_b))
            vector_b.append(1.0)
        else:
            vector_a.append(_scaled(value_a))
            vector_b.append(_scaled(value_b))
    return cosine_similarity(vector_a, vector_b)


def _feature(user: Mapping[str, object], keys: tuple[str, str]) -> object:
    for key in keys:
        value = user.get(key)
        if value is not None:
            return value
    return None


def _overlap(values_a: Sequence[object], values_b: Sequence[object]) -> float:
    # Equality-based so unhashable items (e.g. dict categories) still compare.
    shared = sum(1 for item in values_a if item in values_b)
    union: list[object] = []
    for item in [*values_a, *values_b]:
        if item not in union:
            union.append(item)
    return shared / len(union) if union else 0.0


def _scaled(value: object) -> float:
    if isinstance(value, int | float) and not isinstance(value, bool):
        return value / NUMERIC_SCALE if math.isfinite(value) else 0.0
    return 0.0
