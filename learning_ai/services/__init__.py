from learning_ai.services.learning_ai_service import LearningAiService, TierResult, build_learning_ai_service

__all__ = ["LearningAiService", "TierResult", "build_learning_ai_service"]
