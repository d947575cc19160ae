"""Multi-provider AI layer: remote LLM adapters, a local NLP fallback and the orchestrator over them."""
from learning_ai.config import AiProviderConfig, Settings, get_settings
from learning_ai.models.outcome import InvocationOutcome, ProviderState, ThirdPartyProvider, ThirdPartyStatus
from learning_ai.services.learning_ai_service import LearningAiService, build_learning_ai_service

__all__ = [
    "AiProviderConfig",
    "InvocationOutcome",
    "LearningAiService",
    "ProviderState",
    "Settings",
    "ThirdPartyProvider",
    "ThirdPartyStatus",
    "build_learning_ai_service",
    "get_settings",
]
