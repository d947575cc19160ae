from learning_ai.models.contracts import (
    AnswerStat,
    ConceptTags,
    Difficulty,
    EvaluationContext,
    Flashcard,
    LessonAnalysis,
    MisconceptionAnalysis,
    OnboardingTip,
    QuestionRef,
    QuizContext,
    QuizEvaluation,
    QuizQuestion,
    StudyMaterials,
    WeakTopicSummary,
)
from learning_ai.models.outcome import (
    InvocationOutcome,
    ProviderAttempt,
    ProviderState,
    ThirdPartyProvider,
    ThirdPartyStatus,
)

__all__ = [
    "AnswerStat",
    "ConceptTags",
    "Difficulty",
    "EvaluationContext",
    "Flashcard",
    "InvocationOutcome",
    "LessonAnalysis",
    "MisconceptionAnalysis",
    "OnboardingTip",
    "ProviderAttempt",
    "ProviderState",
    "QuestionRef",
    "QuizContext",
    "QuizEvaluation",
    "QuizQuestion",
    "StudyMaterials",
    "ThirdPartyProvider",
    "ThirdPartyStatus",
    "WeakTopicSummary",
]
