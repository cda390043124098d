"""Request models for the HTTP API."""

from typing import Literal

from pydantic import BaseModel, Field


class RecipeGenerateRequest(BaseModel):
    """Body of a recipe generation or recommendation request."""

    user_id: str = Field(min_length=1)
    foods: list[str] | None = None
    preference: str | None = None
    mode: Literal["generate", "recommend"] = "generate"
    limit: int = Field(default=10, ge=1, le=50)
