"""
Chat-completion provider adapter

Shared implementation of the remote providers. Each operation renders a
prompt asking for strict JSON, sends it to an OpenAI-compatible
chat-completions endpoint with a JSON-only system message, decodes the reply
(with one repair prompt when decoding fails) and normalises it into the
contract models.

Handles:
- Missing credential -> ProviderUnavailableError (never builds a client)
- Transport/API failure -> ProviderRequestError with the cause chained
- Undecodable output -> MalformedOutputError
- Degenerate output -> EmptyResultError
Subclasses only pin endpoint, model and prompt budgets.
"""

import json
import logging
import time
from typing import Any, ClassVar, Dict, List, Optional, Sequence

from openai import OpenAI, OpenAIError

from learning_ai.exceptions import (
    EmptyResultError,
    MalformedOutputError,
    ProviderRequestError,
    ProviderUnavailableError,
)
from learning_ai.models.contracts import (
    AnswerStat,
    ConceptTags,
    Difficulty,
    EvaluationContext,
    Flashcard,
    LessonAnalysis,
    MisconceptionAnalysis,
    OnboardingTip,
    QuizContext,
    QuizEvaluation,
    QuizQuestion,
    StudyMaterials,
    WeakTopicSummary,
)
from learning_ai.prompts.templates import (
    ANALYZE_LESSON_TEMPLATE,
    EVALUATE_SUBMISSION_TEMPLATE,
    GENERATE_MATERIALS_TEMPLATE,
    GENERATE_QUIZ_TEMPLATE,
    MISCONCEPTION_TEMPLATE,
    ONBOARDING_TIP_TEMPLATE,
    REPAIR_JSON_TEMPLATE,
    SUMMARIZE_WEAK_TOPICS_TEMPLATE,
    TAG_QUESTION_TEMPLATE,
    PromptTemplate,
)
from learning_ai.providers.base import AiProvider
from learning_ai.utils.constants import (
    CHAT_TEMPERATURE,
    DEFAULT_TAG_HINT,
    JSON_SYSTEM_PROMPT,
    MAX_HINT_ITEMS,
    MAX_METADATA_KEY_CONCEPTS,
    MAX_PROMPT_TEXT_CHARS,
    MAX_QUESTION_TAGS,
    OPERATION_TIMEOUTS,
    REMOTE_DEFAULT_STUDY_MINUTES,
    REMOTE_MIN_STUDY_MINUTES,
    REPAIR_SYSTEM_PROMPT,
)
from learning_ai.utils.json_extract import JsonPayload, decode_json_or_raise, extract_json
from learning_ai.utils.normalization import (
    clamp,
    normalize_quiz_questions,
    normalize_string_list,
    to_float,
    to_int,
    to_text,
)
from learning_ai.utils.text_utils import limit_text, prepare_lesson_context

logger = logging.getLogger(__name__)


def format_hint_list(items: Sequence[str]) -> str:
    """First twelve hints joined by '; ', or 'None'."""
    items = list(items)
    if not items:
        return "None"
    return "; ".join(items[:MAX_HINT_ITEMS])


def build_quiz_metadata(context: QuizContext) -> str:
    """Render lesson metadata lines for the quiz prompt."""
    parts = []
    if context.title.strip():
        parts.append(f"Title: {context.title.strip()}")
    if context.subject.strip():
        parts.append(f"Subject: {context.subject.strip()}")
    if context.difficulty.strip():
        parts.append(f"Difficulty: {context.difficulty.strip()}")

    key_concepts = normalize_string_list(context.key_concepts)
    if key_concepts:
        parts.append(f"Key concepts: {'; '.join(key_concepts[:MAX_METADATA_KEY_CONCEPTS])}")

    return "\n".join(parts) if parts else "No metadata provided"


def _has_expected_shape(payload: Optional[JsonPayload], expect_object: bool) -> bool:
    if payload is None:
        return False
    return isinstance(payload, dict) or not expect_object


def _message_content(response: Any) -> str:
    """Pull the first choice's message content out of a completion envelope."""
    choices = getattr(response, "choices", None) or []
    if not choices:
        return ""
    message = getattr(choices[0], "message", None)
    content = getattr(message, "content", None)
    return content if isinstance(content, str) else ""


class ChatCompletionProvider(AiProvider):
    """Base adapter for OpenAI-compatible chat-completion providers."""

    base_url: ClassVar[Optional[str]] = None
    default_model: ClassVar[str]
    max_timeout: ClassVar[Optional[int]] = None
    lesson_prompt_chars: ClassVar[int] = MAX_PROMPT_TEXT_CHARS
    quiz_prompt_chars: ClassVar[int] = MAX_PROMPT_TEXT_CHARS
    tag_context_chars: ClassVar[int]

    def __init__(
        self,
        client: Optional[OpenAI] = None,
        api_key: str = "",
        model: str = "",
        *,
        repair_invalid_json: bool = True,
    ):
        self.api_key = (api_key or "").strip()
        self.model = (model or "").strip() or self.default_model
        self.repair_invalid_json = repair_invalid_json

        self._client = client

    @property
    def client(self) -> OpenAI:
        """Injected client, or one built on first use from the credential."""
        if self._client is None:
            if not self.has_provider():
                raise ProviderUnavailableError(self.label)
            # No SDK-level retries: the repair prompt is the only retry
            self._client = OpenAI(api_key=self.api_key, base_url=self.base_url, max_retries=0)
        return self._client

    def has_provider(self) -> bool:
        return self.api_key != ""

    # ─── Operations ───────────────────────────────────────────────────

    def analyze_lesson(self, text: str) -> LessonAnalysis:
        prompt = ANALYZE_LESSON_TEMPLATE.render(
            lesson=prepare_lesson_context(text, max_chars=self.lesson_prompt_chars)
        )
        data = self._request_object(ANALYZE_LESSON_TEMPLATE, prompt, "analyze_lesson")

        difficulty = to_text(data.get("difficulty")).upper()
        if difficulty not in Difficulty.__members__:
            difficulty = Difficulty.MEDIUM.value

        minutes = to_int(data.get("estimatedStudyMinutes"), REMOTE_DEFAULT_STUDY_MINUTES)
        return LessonAnalysis(
            topics=normalize_string_list(data.get("topics")),
            key_concepts=normalize_string_list(data.get("keyConcepts")),
            difficulty=Difficulty(difficulty),
            estimated_study_minutes=max(REMOTE_MIN_STUDY_MINUTES, minutes),
            learning_objectives=normalize_string_list(data.get("learningObjectives")),
        )

    def generate_materials(self, text: str, weak_topics: Optional[Sequence[str]] = None) -> StudyMaterials:
        weak = normalize_string_list(list(weak_topics or []))
        topic_hint = (
            f"Focus strongly on these weak topics: {', '.join(weak)}"
            if weak
            else "Generate general lesson learning materials."
        )
        prompt = GENERATE_MATERIALS_TEMPLATE.render(
            topic_hint=topic_hint,
            lesson=prepare_lesson_context(text, max_chars=self.lesson_prompt_chars),
        )
        data = self._request_object(GENERATE_MATERIALS_TEMPLATE, prompt, "generate_materials")

        flashcards = []
        raw_cards = data.get("flashcards")
        for card in raw_cards if isinstance(raw_cards, list) else []:
            if not isinstance(card, dict):
                continue
            front = to_text(card.get("front"))
            back = to_text(card.get("back"))
            if front and back:
                flashcards.append(Flashcard(front=front, back=back))

        return StudyMaterials(
            summary=to_text(data.get("summary")),
            flashcards=flashcards,
            explanations=normalize_string_list(data.get("explanations")),
            examples=normalize_string_list(data.get("examples")),
        )

    def generate_quiz_questions(
        self,
        text: str,
        count: int = 8,
        context: Optional[QuizContext] = None,
    ) -> List[QuizQuestion]:
        context = context or QuizContext()
        prompt = GENERATE_QUIZ_TEMPLATE.render(
            count=count,
            metadata=build_quiz_metadata(context),
            priority_topics=format_hint_list(normalize_string_list(context.topics)),
            weak_topics=format_hint_list(normalize_string_list(context.weak_topics)),
            lesson=prepare_lesson_context(text, max_chars=self.quiz_prompt_chars),
        )
        data = self._request_json(GENERATE_QUIZ_TEMPLATE, prompt, "generate_quiz_questions")

        if isinstance(data, dict) and isinstance(data.get("questions"), list):
            data = data["questions"]
        if not isinstance(data, list):
            raise MalformedOutputError(self.label, f"{self.label} quiz payload was not a list.")

        questions = normalize_quiz_questions(data, limit=max(1, count))
        if not questions:
            raise EmptyResultError(self.label, f"{self.label} returned no valid questions.")

        return [QuizQuestion.model_validate(row) for row in questions]

    def evaluate_quiz_submission(
        self,
        answer_stats: Sequence[AnswerStat],
        context: Optional[EvaluationContext] = None,
    ) -> QuizEvaluation:
        context = context or EvaluationContext()
        serialized = [
            {
                "question": stat.question_ref.text,
                "correctAnswer": stat.question_ref.correct_answer,
                "studentAnswer": stat.student_answer,
                "isCorrect": stat.is_correct,
                "responseTimeMs": max(0, stat.response_time_ms),
            }
            for stat in answer_stats
            if stat.question_ref is not None
        ]
        if not serialized:
            raise EmptyResultError(self.label, "No answer rows to evaluate.")

        prompt = EVALUATE_SUBMISSION_TEMPLATE.render(
            lesson_title=context.lesson_title or "Lesson",
            lesson_subject=context.lesson_subject or "General",
            answers=json.dumps(serialized, ensure_ascii=False),
        )
        data = self._request_object(EVALUATE_SUBMISSION_TEMPLATE, prompt, "evaluate_quiz_submission")

        score = round(to_float(data.get("score")), 2)
        return QuizEvaluation(
            score=clamp(score, 0.0, 100.0),
            weak_topics=normalize_string_list(data.get("weakTopics")),
            explanation=to_text(data.get("explanation")),
        )

    def summarize_weak_topics(self, weak_topics: Sequence[str], score: float, lesson_title: str) -> WeakTopicSummary:
        prompt = SUMMARIZE_WEAK_TOPICS_TEMPLATE.render(
            lesson_title=lesson_title,
            score=round(score, 2),
            weak_topics=format_hint_list(normalize_string_list(list(weak_topics))),
        )
        data = self._request_object(SUMMARIZE_WEAK_TOPICS_TEMPLATE, prompt, "summarize_weak_topics")

        summary = to_text(data.get("summary"))
        if not summary:
            raise EmptyResultError(self.label, f"{self.label} did not return a remediation summary.")
        return WeakTopicSummary(summary=summary)

    def generate_onboarding_tip(self, role: str, name: str, grade: Optional[str] = None) -> OnboardingTip:
        prompt = ONBOARDING_TIP_TEMPLATE.render(
            role=role,
            name=name,
            grade_clause=f" in grade {grade}" if grade else "",
        )
        data = self._request_object(ONBOARDING_TIP_TEMPLATE, prompt, "generate_onboarding_tip")

        tip = to_text(data.get("tip"))
        if not tip:
            raise EmptyResultError(self.label, f"{self.label} did not return onboarding tip.")
        return OnboardingTip(tip=tip)

    def tag_question_concept(self, question_text: str, lesson_context: str, subject: str = "") -> ConceptTags:
        prompt = TAG_QUESTION_TEMPLATE.render(
            subject=subject,
            lesson_context=limit_text(lesson_context, self.tag_context_chars),
            question=question_text,
        )
        data = self._request_object(TAG_QUESTION_TEMPLATE, prompt, "tag_question_concept")

        tags = normalize_string_list(data.get("tags"))[:MAX_QUESTION_TAGS]
        hint = to_text(data.get("difficultyHint"))
        if not tags and not hint:
            raise EmptyResultError(self.label, f"{self.label} did not return question tagging.")
        return ConceptTags(tags=tags, hint=hint or DEFAULT_TAG_HINT)

    def analyze_misconception(
        self,
        question_text: str,
        correct_answer: str,
        student_answer: str,
    ) -> MisconceptionAnalysis:
        prompt = MISCONCEPTION_TEMPLATE.render(
            question=question_text,
            correct_answer=correct_answer,
            student_answer=student_answer,
        )
        data = self._request_object(MISCONCEPTION_TEMPLATE, prompt, "analyze_misconception")

        label = to_text(data.get("label"))
        if not label:
            raise EmptyResultError(self.label, f"{self.label} did not return misconception label.")
        return MisconceptionAnalysis(
            label=label,
            confidence=clamp(to_float(data.get("confidence")), 0.0, 1.0),
        )

    # ─── Transport ────────────────────────────────────────────────────

    def _timeout_for(self, operation: str) -> int:
        timeout = OPERATION_TIMEOUTS.get(operation, OPERATION_TIMEOUTS["analyze_lesson"])
        if self.max_timeout is not None:
            timeout = min(timeout, self.max_timeout)
        return timeout

    def _request_raw(self, prompt: str, system: str, operation: str) -> str:
        response = self.client.chat.completions.create(
            model=self.model,
            messages=[
                {"role": "system", "content": system},
                {"role": "user", "content": prompt},
            ],
            temperature=CHAT_TEMPERATURE,
            timeout=self._timeout_for(operation),
        )
        return _message_content(response)

    def _request_json(
        self,
        template: PromptTemplate,
        prompt: str,
        operation: str,
        expect_object: bool = False,
    ) -> JsonPayload:
        """
        Send a prompt and decode the JSON reply.

        One repair prompt is sent when the reply holds no JSON, or holds an
        array while `expect_object` asks for an object.
        """
        if not self.has_provider():
            raise ProviderUnavailableError(self.label)

        start_time = time.time()
        logger.info(json.dumps({
            "step": "AI_PROVIDER_CALL",
            "provider": self.provider_type.value,
            "operation": operation,
            "status": "starting",
            "model": self.model,
        }))

        repaired = False
        try:
            content = self._request_raw(prompt, JSON_SYSTEM_PROMPT, operation)

            if self.repair_invalid_json and not _has_expected_shape(extract_json(content), expect_object):
                logger.info(json.dumps({
                    "step": "AI_PROVIDER_CALL",
                    "provider": self.provider_type.value,
                    "operation": operation,
                    "status": "repairing",
                    "output": {"response_length": len(content)},
                }))
                repair_prompt = REPAIR_JSON_TEMPLATE.render(
                    expected_shape=template.expected_shape,
                    broken_output=content,
                )
                content = self._request_raw(repair_prompt, REPAIR_SYSTEM_PROMPT, operation)
                repaired = True
        except OpenAIError as e:
            self._log_failure(operation, start_time, str(e))
            raise ProviderRequestError(self.label, e) from e

        try:
            decoded = decode_json_or_raise(content, provider=self.label, after_repair=repaired)
            if expect_object and not isinstance(decoded, dict):
                raise MalformedOutputError(
                    self.label,
                    f"{self.label} returned a JSON array where an object was expected.",
                    raw_output=content,
                )
        except MalformedOutputError:
            self._log_failure(operation, start_time, "invalid JSON")
            raise

        logger.info(json.dumps({
            "step": "AI_PROVIDER_CALL",
            "provider": self.provider_type.value,
            "operation": operation,
            "status": "complete",
            "duration_ms": int((time.time() - start_time) * 1000),
        }))
        return decoded

    def _request_object(self, template: PromptTemplate, prompt: str, operation: str) -> Dict[str, Any]:
        return self._request_json(template, prompt, operation, expect_object=True)

    def _log_failure(self, operation: str, start_time: float, error: str) -> None:
        logger.info(json.dumps({
            "step": "AI_PROVIDER_CALL",
            "provider": self.provider_type.value,
            "operation": operation,
            "status": "failed",
            "error": error,
            "duration_ms": int((time.time() - start_time) * 1000),
        }))
