"""Health check API endpoints for the AI provider layer."""
from functools import lru_cache

from fastapi import APIRouter, Depends

from learning_ai.services.learning_ai_service import LearningAiService, build_learning_ai_service

router = APIRouter(tags=["health"])


@lru_cache(maxsize=1)
def get_learning_ai_service() -> LearningAiService:
    """Service built from settings once per process."""
    return build_learning_ai_service()


@router.get("/health/ai")
def ai_provider_health(service: LearningAiService = Depends(get_learning_ai_service)):
    """Which provider would serve AI calls right now (nothing is invoked)."""
    return service.provider_state().model_dump(mode="json", by_alias=True)
