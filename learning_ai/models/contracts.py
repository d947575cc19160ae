"""Operation contract models shared by every provider.

Fields are snake_case in Python and camelCase on the wire (keyConcepts,
correctAnswer, ...); dump with ``by_alias=True`` to get the wire shape.
"""
from enum import Enum
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field, model_validator
from pydantic.alias_generators import to_camel

from learning_ai.utils.constants import MAX_QUESTION_TAGS, MAX_QUIZ_OPTIONS, MIN_QUIZ_OPTIONS
from learning_ai.utils.normalization import normalize_string_list


class ContractModel(BaseModel):
    """Base for contract shapes: camelCase aliases, population by field name."""
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class Difficulty(str, Enum):
    EASY = "EASY"
    MEDIUM = "MEDIUM"
    HARD = "HARD"


# Operation outputs

class LessonAnalysis(ContractModel):
    """analyzeLesson result."""
    topics: List[str] = Field(default_factory=list)
    key_concepts: List[str] = Field(default_factory=list)
    difficulty: Difficulty = Difficulty.MEDIUM
    estimated_study_minutes: int = Field(default=30, ge=15)
    learning_objectives: List[str] = Field(default_factory=list)


class Flashcard(ContractModel):
    front: str
    back: str


class StudyMaterials(ContractModel):
    """generateMaterials result."""
    summary: str = ""
    flashcards: List[Flashcard] = Field(default_factory=list)
    explanations: List[str] = Field(default_factory=list)
    examples: List[str] = Field(default_factory=list)


class QuizQuestion(ContractModel):
    """One multiple-choice question; the correct answer is always an option."""
    text: str
    options: List[str]
    correct_answer: str

    @model_validator(mode="after")
    def _check_options(self) -> "QuizQuestion":
        if not MIN_QUIZ_OPTIONS <= len(self.options) <= MAX_QUIZ_OPTIONS:
            raise ValueError(f"expected {MIN_QUIZ_OPTIONS}-{MAX_QUIZ_OPTIONS} options, got {len(self.options)}")
        if len(set(self.options)) != len(self.options):
            raise ValueError("options must be unique")
        if self.correct_answer not in self.options:
            raise ValueError("correct_answer must be one of the options")
        return self


class QuizEvaluation(ContractModel):
    """evaluateQuizSubmission result."""
    score: float = Field(..., ge=0.0, le=100.0)
    weak_topics: List[str] = Field(default_factory=list)
    explanation: str = ""


class WeakTopicSummary(ContractModel):
    summary: str


class OnboardingTip(ContractModel):
    tip: str


class ConceptTags(ContractModel):
    """tagQuestionConcept result."""
    tags: List[str] = Field(default_factory=list, max_length=MAX_QUESTION_TAGS)
    hint: str


class MisconceptionAnalysis(ContractModel):
    label: str
    confidence: float = Field(..., ge=0.0, le=1.0)


# Operation inputs

class QuizContext(ContractModel):
    """Lesson metadata that steers quiz generation."""
    title: str = ""
    subject: str = ""
    difficulty: str = ""
    topics: List[str] = Field(default_factory=list)
    key_concepts: List[str] = Field(default_factory=list)
    weak_topics: List[str] = Field(default_factory=list)


class QuestionRef(ContractModel):
    """
    The question an answer refers to.

    ``third_party_meta`` is the integration metadata stored with the question
    by earlier AI calls (``{"integrations": {KEY: {"payload": {"tags": [...]}}}}``).
    """
    text: str = ""
    correct_answer: str = ""
    options: List[str] = Field(default_factory=list)
    tags: List[str] = Field(default_factory=list)
    third_party_meta: Optional[Dict[str, Any]] = None

    def concept_tags(self) -> List[str]:
        """Explicit tags, else the first tag list found in stored integration metadata."""
        explicit = normalize_string_list(self.tags)
        if explicit:
            return explicit[:MAX_QUESTION_TAGS]

        integrations = (self.third_party_meta or {}).get("integrations")
        if isinstance(integrations, dict):
            integrations = list(integrations.values())
        if not isinstance(integrations, list):
            return []

        for integration in integrations:
            if not isinstance(integration, dict):
                continue
            payload = integration.get("payload")
            if not isinstance(payload, dict):
                continue
            tags = normalize_string_list(payload.get("tags"))
            if tags:
                return tags[:MAX_QUESTION_TAGS]
        return []


class AnswerStat(ContractModel):
    """One answered question of a quiz submission."""
    question_ref: Optional[QuestionRef] = None
    student_answer: str = ""
    is_correct: bool = False
    response_time_ms: int = 0


class EvaluationContext(ContractModel):
    lesson_title: str = ""
    lesson_subject: str = ""
