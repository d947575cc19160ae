from learning_ai.api.health import get_learning_ai_service, router

__all__ = ["get_learning_ai_service", "router"]
