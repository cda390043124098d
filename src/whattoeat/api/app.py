"""FastAPI application factory."""

import logging
import time
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from dataclasses import asdict
from datetime import UTC, datetime

from fastapi import FastAPI, Request

from whattoeat.api.models import RecipeGenerateRequest
from whattoeat.app_logging import configure_logging
from whattoeat.containers import AppContainer
from whattoeat.domain.recipes import RankedRecipe
from whattoeat.services.generation import GenerationResult

RECIPE_GENERATE = "recipe-generate"

ERR_OK = 0
ERR_FAILED = -1
ERR_RATE_LIMITED = -2


def create_app(container: AppContainer) -> FastAPI:
    """Create a FastAPI app configured with dependencies."""
    configure_logging(container.settings.debug)
    logger = logging.getLogger(__name__)

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        yield
        await app.state.container.close_resources()

    app = FastAPI(lifespan=lifespan)
    app.state.container = container

    @app.get("/health")
    async def health() -> dict[str, str]:
        """Simple health check endpoint."""
        return {"status": "ok"}

    @app.post("/recipe-generate")
    async def recipe_generate(
        body: RecipeGenerateRequest, request: Request
    ) -> dict[str, object]:
        """Generate a recipe or recommend existing ones for the user's foods."""
        state_container: AppContainer = request.app.state.container
        started = time.perf_counter()
        try:
            decision = state_container.rate_limiter.check(RECIPE_GENERATE, body.user_id)
            if not decision.allowed:
                return _envelope(
                    ERR_RATE_LIMITED,
                    decision.message or "请求过于频繁",
                    {"resetTime": decision.reset_at.isoformat()},
                )

            service = state_container.recommendation_service
            profile = service.get_profile(body.user_id)
            foods = body.foods or service.get_user_foods(body.user_id)
            if not foods:
                return _envelope(ERR_FAILED, "请先添加菜品到库存", None)

            logger.info(
                "recipe-generate start: user=%s mode=%s foods=%s",
                body.user_id,
                body.mode,
                len(foods),
            )
            if body.mode == "recommend":
                recipes = service.recommend(
                    body.user_id,
                    datetime.now(tz=UTC),
                    foods=foods,
                    limit=body.limit,
                    profile=profile,
                )
                data: object = {
                    "recipes": [_format_ranked(recipe) for recipe in recipes],
                    "count": len(recipes),
                }
            else:
                result = await state_container.generation_service.generate(
                    foods, profile, body.preference
                )
                data = _format_generated(result)
            return _envelope(ERR_OK, "success", data)
        except Exception as exc:
            logger.exception("recipe-generate failed: user=%s", body.user_id)
            return _envelope(ERR_FAILED, str(exc) or "处理失败", None)
        finally:
            logger.info(
                "recipe-generate finished in %.0fms",
                (time.perf_counter() - started) * 1000,
            )

    return app


def _envelope(code: int, message: str, data: object) -> dict[str, object]:
    return {"errCode": code, "errMsg": message, "data": data}


def _format_ranked(recipe: RankedRecipe) -> dict[str, object]:
    return {
        **recipe.candidate.raw,
        "scores": asdict(recipe.scores),
        "matchInfo": {
            "matched": recipe.match.matched,
            "missing": recipe.match.missing,
            "matchRatio": recipe.match.match_ratio,
        },
        "nutrition": recipe.nutrition.as_dict(),
    }


def _format_generated(result: GenerationResult) -> dict[str, object]:
    return {
        **result.recipe.model_dump(),
        "nutrition": result.nutrition.as_dict(),
        "nutritionScore": asdict(result.nutrition_score),
        "matchInfo": {
            "score": result.match.score,
            "matched": result.match.matched,
            "missing": result.match.missing,
            "matchRatio": result.match.match_ratio,
        },
        "preferenceScore": result.preference_score,
        "fallback": result.fallback,
    }
