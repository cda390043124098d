"""Models for AI-generated recipes."""

from pydantic import BaseModel, Field


class GeneratedRecipe(BaseModel):
    """Structured recipe returned by the generator."""

    name: str
    difficulty: str = "简单"
    time: str = "30分钟"
    calories: int | None = Field(default=None, ge=0)
    ingredients: list[str] = Field(default_factory=list)
    steps: list[str] = Field(default_factory=list)
    tags: dict[str, bool] = Field(default_factory=dict)
