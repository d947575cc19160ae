"""
Provider capability

Every provider (remote LLM-backed or local heuristic) implements the same
eight operations with identical input/output contracts; only the strategy
differs. LearningAiService selects among providers by configuration.
"""

from abc import ABC, abstractmethod
from typing import ClassVar, List, Optional, Sequence

from learning_ai.models.contracts import (
    AnswerStat,
    ConceptTags,
    EvaluationContext,
    LessonAnalysis,
    MisconceptionAnalysis,
    OnboardingTip,
    QuizContext,
    QuizEvaluation,
    QuizQuestion,
    StudyMaterials,
    WeakTopicSummary,
)
from learning_ai.models.outcome import ThirdPartyProvider


class AiProvider(ABC):
    """Abstract base class for all AI providers."""

    provider_type: ClassVar[ThirdPartyProvider]

    @property
    def label(self) -> str:
        return self.provider_type.label

    @abstractmethod
    def has_provider(self) -> bool:
        """True when the provider can be called right now."""
        ...

    @abstractmethod
    def analyze_lesson(self, text: str) -> LessonAnalysis:
        ...

    @abstractmethod
    def generate_materials(self, text: str, weak_topics: Optional[Sequence[str]] = None) -> StudyMaterials:
        ...

    @abstractmethod
    def generate_quiz_questions(
        self,
        text: str,
        count: int = 8,
        context: Optional[QuizContext] = None,
    ) -> List[QuizQuestion]:
        ...

    @abstractmethod
    def evaluate_quiz_submission(
        self,
        answer_stats: Sequence[AnswerStat],
        context: Optional[EvaluationContext] = None,
    ) -> QuizEvaluation:
        ...

    @abstractmethod
    def summarize_weak_topics(self, weak_topics: Sequence[str], score: float, lesson_title: str) -> WeakTopicSummary:
        ...

    @abstractmethod
    def generate_onboarding_tip(self, role: str, name: str, grade: Optional[str] = None) -> OnboardingTip:
        ...

    @abstractmethod
    def tag_question_concept(self, question_text: str, lesson_context: str, subject: str = "") -> ConceptTags:
        ...

    @abstractmethod
    def analyze_misconception(
        self,
        question_text: str,
        correct_answer: str,
        student_answer: str,
    ) -> MisconceptionAnalysis:
        ...
