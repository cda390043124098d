"""Nutrition domain models."""

from collections.abc import Mapping
from dataclasses import dataclass, field


@dataclass(frozen=True)
class FoodNutrition:
    """Macronutrient content of a food or a whole recipe."""

    calories: float = 0
    protein: float = 0
    fat: float = 0
    carbs: float = 0
    fiber: float = 0

    @classmethod
    def zero(cls) -> "FoodNutrition":
        """Return an all-zero nutrition record."""
        return cls()

    def plus(self, other: "FoodNutrition") -> "FoodNutrition":
        """Return the field-wise sum with another record."""
        return FoodNutrition(
            calories=self.calories + other.calories,
            protein=self.protein + other.protein,
            fat=self.fat + other.fat,
            carbs=self.carbs + other.carbs,
            fiber=self.fiber + other.fiber,
        )

    def as_dict(self) -> dict[str, float]:
        return {
            "calories": self.calories,
            "protein": self.protein,
            "fat": self.fat,
            "carbs": self.carbs,
            "fiber": self.fiber,
        }


@dataclass(frozen=True)
class IngredientEntry:
    """A recipe ingredient line, optionally with a structured amount."""

    name: str
    amount: float | None = None

    @classmethod
    def parse(cls, raw: object) -> "IngredientEntry | None":
        """Build an entry from a string, a mapping or an entry; None if unusable."""
        if isinstance(raw, IngredientEntry):
            return raw
        if isinstance(raw, str):
            return cls(name=raw)
        if isinstance(raw, Mapping):
            name = raw.get("name")
            if not isinstance(name, str):
                return None
            return cls(name=name, amount=_positive_number(raw.get("amount")))
        return None

    @property
    def label(self) -> str:
        """Text used when comparing against a user's foods."""
        return self.name


@dataclass(frozen=True)
class NutrientStatus:
    """Intake of one nutrient against its target."""

    value: float
    target: float
    status: str


@dataclass(frozen=True)
class NutritionScore:
    """Balanced-nutrition score with its components."""

    total_score: int
    calories_score: int
    protein_score: int
    fat_score: int
    carbs_score: int
    ratio_score: int
    ratios: dict[str, float] = field(default_factory=dict)


@dataclass(frozen=True)
class IntakeAnalysis:
    """Aggregated intake over a set of meals."""

    total: FoodNutrition
    score: NutritionScore
    analysis: dict[str, NutrientStatus]


def _positive_number(value: object) -> float | None:
    if isinstance(value, bool):
        return None
    if isinstance(value, int | float) and value > 0:
        return float(value)
    return None
