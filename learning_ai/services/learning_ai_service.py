"""
Learning AI Service

Single entry point for every AI operation. Each call resolves the configured
provider and walks the cascade:

    primary (if available) -> Groq (openai + groq_local only) -> Local NLP

and returns the result wrapped in an InvocationOutcome saying which provider
produced it and why. Outside strict mode a call always returns data, because
the local provider is the terminal tier. In strict mode a missing primary
credential raises StrictModeError and a failing remote tier re-raises its own
error unchanged.
"""

import json
import logging
import time
from dataclasses import dataclass
from typing import Any, Callable, Generic, List, Mapping, Optional, Sequence, TypeVar, Union

from learning_ai.config import AiProviderConfig, Settings, get_settings
from learning_ai.exceptions import StrictModeError
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
from learning_ai.models.outcome import (
    InvocationOutcome,
    ProviderAttempt,
    ProviderState,
    ThirdPartyProvider,
    ThirdPartyStatus,
)
from learning_ai.providers.base import AiProvider
from learning_ai.providers.groq_provider import GroqProvider
from learning_ai.providers.local_nlp import LocalNlpProvider
from learning_ai.providers.openai_provider import OpenAiProvider
from learning_ai.utils.constants import POLICY_GROQ_LOCAL, PROVIDER_GROQ, PROVIDER_LOCAL, PROVIDER_OPENAI

logger = logging.getLogger(__name__)

T = TypeVar("T")


@dataclass(frozen=True)
class TierResult(Generic[T]):
    """Outcome of one provider tier: data on success, the captured error otherwise."""

    provider: ThirdPartyProvider
    latency_ms: int
    data: Optional[T] = None
    error: Optional[Exception] = None

    @property
    def ok(self) -> bool:
        return self.error is None

    def attempt(self) -> ProviderAttempt:
        return ProviderAttempt(
            provider=self.provider,
            status=ThirdPartyStatus.SUCCESS if self.ok else ThirdPartyStatus.FAILED,
            latency_ms=self.latency_ms,
            error=None if self.ok else str(self.error),
        )


def _ucfirst(text: str) -> str:
    return text[:1].upper() + text[1:]


def _elapsed_ms(start: float) -> int:
    return int((time.perf_counter() - start) * 1000)


class LearningAiService:
    """Provider orchestrator with fallback cascade and provenance tracking."""

    def __init__(
        self,
        openai_provider: OpenAiProvider,
        groq_provider: GroqProvider,
        local_provider: LocalNlpProvider,
        config: Optional[AiProviderConfig] = None,
    ):
        self.openai_provider = openai_provider
        self.groq_provider = groq_provider
        self.local_provider = local_provider
        self.config = config or AiProviderConfig()

    # ─── Provider selection ───────────────────────────────────────────

    def _primary_provider(self) -> AiProvider:
        configured = self.config.configured_provider
        if configured == PROVIDER_OPENAI:
            return self.openai_provider
        if configured == PROVIDER_GROQ:
            return self.groq_provider
        return self.local_provider

    def _secondary_provider(self) -> Optional[AiProvider]:
        if (
            self.config.configured_provider == PROVIDER_OPENAI
            and self.config.fallback_policy == POLICY_GROQ_LOCAL
        ):
            return self.groq_provider
        return None

    def has_primary_provider(self) -> bool:
        """Whether the configured provider can be called right now."""
        return self._primary_provider().has_provider()

    def provider_state(self) -> ProviderState:
        """Report which provider would serve a call right now, without calling it."""
        primary_available = self.has_primary_provider()
        return ProviderState(
            configured=self.config.configured_provider,
            active=self._resolve_active_provider(primary_available),
            primary_available=primary_available,
            fallback_policy=self.config.fallback_policy,
        )

    def _resolve_active_provider(self, primary_available: bool) -> ThirdPartyProvider:
        if self.config.configured_provider == PROVIDER_LOCAL:
            return ThirdPartyProvider.LOCAL_NLP
        if primary_available:
            return self._primary_provider().provider_type

        secondary = self._secondary_provider()
        if secondary is not None and secondary.has_provider():
            return secondary.provider_type
        return ThirdPartyProvider.LOCAL_NLP

    # ─── Operations ───────────────────────────────────────────────────

    def analyze_lesson(self, text: str) -> InvocationOutcome[LessonAnalysis]:
        return self._invoke("lesson analysis", lambda p: p.analyze_lesson(text))

    def generate_materials(
        self,
        text: str,
        weak_topics: Optional[Sequence[str]] = None,
    ) -> InvocationOutcome[StudyMaterials]:
        weak_topics = list(weak_topics or [])
        return self._invoke("material generation", lambda p: p.generate_materials(text, weak_topics))

    def generate_quiz_questions(
        self,
        text: str,
        count: int = 8,
        context: Union[QuizContext, Mapping[str, Any], None] = None,
    ) -> InvocationOutcome[List[QuizQuestion]]:
        quiz_context = context if isinstance(context, QuizContext) else QuizContext.model_validate(context or {})
        return self._invoke(
            "quiz generation",
            lambda p: p.generate_quiz_questions(text, count, quiz_context),
        )

    def evaluate_quiz_submission(
        self,
        answer_stats: Sequence[Union[AnswerStat, Mapping[str, Any]]],
        context: Union[EvaluationContext, Mapping[str, Any], None] = None,
    ) -> InvocationOutcome[QuizEvaluation]:
        stats = [
            stat if isinstance(stat, AnswerStat) else AnswerStat.model_validate(stat)
            for stat in answer_stats
        ]
        evaluation_context = (
            context if isinstance(context, EvaluationContext) else EvaluationContext.model_validate(context or {})
        )
        return self._invoke(
            "quiz evaluation",
            lambda p: p.evaluate_quiz_submission(stats, evaluation_context),
        )

    def summarize_weak_topics(
        self,
        weak_topics: Sequence[str],
        score: float,
        lesson_title: str,
    ) -> InvocationOutcome[WeakTopicSummary]:
        weak_topics = list(weak_topics)
        return self._invoke(
            "weak-topic summary",
            lambda p: p.summarize_weak_topics(weak_topics, score, lesson_title),
        )

    def generate_onboarding_tip(
        self,
        role: str,
        name: str,
        grade: Optional[str] = None,
    ) -> InvocationOutcome[OnboardingTip]:
        return self._invoke("onboarding tip", lambda p: p.generate_onboarding_tip(role, name, grade))

    def tag_question_concept(
        self,
        question_text: str,
        lesson_context: str,
        subject: str = "",
    ) -> InvocationOutcome[ConceptTags]:
        return self._invoke(
            "question concept tagging",
            lambda p: p.tag_question_concept(question_text, lesson_context, subject),
        )

    def analyze_misconception(
        self,
        question_text: str,
        correct_answer: str,
        student_answer: str,
    ) -> InvocationOutcome[MisconceptionAnalysis]:
        return self._invoke(
            "misconception analysis",
            lambda p: p.analyze_misconception(question_text, correct_answer, student_answer),
        )

    # ─── Cascade ──────────────────────────────────────────────────────

    def _run_tier(self, provider: AiProvider, call: Callable[[AiProvider], T]) -> TierResult[T]:
        start = time.perf_counter()
        try:
            data = call(provider)
        except Exception as e:
            return TierResult(provider=provider.provider_type, latency_ms=_elapsed_ms(start), error=e)
        return TierResult(provider=provider.provider_type, latency_ms=_elapsed_ms(start), data=data)

    def _invoke(self, feature: str, call: Callable[[AiProvider], T]) -> InvocationOutcome[T]:
        configured = self.config.configured_provider
        strict = self.config.strict_mode
        attempts: List[ProviderAttempt] = []
        reasons: List[str] = []

        if configured != PROVIDER_LOCAL:
            primary = self._primary_provider()

            if primary.has_provider():
                result = self._run_tier(primary, call)
                attempts.append(result.attempt())
                if result.ok:
                    return self._outcome(
                        feature,
                        result,
                        status=ThirdPartyStatus.SUCCESS,
                        message=f"{_ucfirst(feature)} generated by {primary.label}.",
                        attempts=attempts,
                    )
                self._log_tier_failure(feature, result)
                if strict:
                    raise result.error
                reasons.append(str(result.error))
            else:
                reason = f"{_ucfirst(configured)} key is missing."
                if strict:
                    raise StrictModeError(reason)
                attempts.append(ProviderAttempt(
                    provider=primary.provider_type,
                    status=ThirdPartyStatus.SKIPPED,
                    error=reason,
                ))
                reasons.append(reason)

            secondary = self._secondary_provider()
            if secondary is not None and secondary.has_provider():
                result = self._run_tier(secondary, call)
                attempts.append(result.attempt())
                if result.ok:
                    return self._outcome(
                        feature,
                        result,
                        status=ThirdPartyStatus.FALLBACK,
                        message=(
                            f"{_ucfirst(configured)} unavailable ({' '.join(reasons)}). "
                            f"{secondary.label} fallback used for {feature}."
                        ),
                        attempts=attempts,
                    )
                self._log_tier_failure(feature, result)
                if strict:
                    raise result.error
                reasons.append(str(result.error))
            elif secondary is not None:
                attempts.append(ProviderAttempt(
                    provider=secondary.provider_type,
                    status=ThirdPartyStatus.SKIPPED,
                    error=f"{secondary.label} key is missing.",
                ))

        start = time.perf_counter()
        data = call(self.local_provider)
        local = TierResult(provider=ThirdPartyProvider.LOCAL_NLP, latency_ms=_elapsed_ms(start), data=data)
        attempts.append(local.attempt())

        if configured == PROVIDER_LOCAL:
            return self._outcome(
                feature,
                local,
                status=ThirdPartyStatus.SUCCESS,
                message=f"Local NLP provider handled {feature}.",
                attempts=attempts,
            )
        return self._outcome(
            feature,
            local,
            status=ThirdPartyStatus.FALLBACK,
            message=(
                f"{_ucfirst(configured)} unavailable ({' '.join(reasons) or 'unknown error'}). "
                f"Local NLP fallback used for {feature}."
            ),
            attempts=attempts,
        )

    def _outcome(
        self,
        feature: str,
        result: TierResult[T],
        status: ThirdPartyStatus,
        message: str,
        attempts: List[ProviderAttempt],
    ) -> InvocationOutcome[T]:
        fallback_used = status == ThirdPartyStatus.FALLBACK
        logger.info(json.dumps({
            "step": "AI_INVOKE",
            "feature": feature,
            "configured": self.config.configured_provider,
            "provider": result.provider.value,
            "status": status.value,
            "fallback_used": fallback_used,
            "latency_ms": result.latency_ms,
        }))
        return InvocationOutcome(
            data=result.data,
            provider=result.provider,
            status=status,
            fallback_used=fallback_used,
            message=message,
            latency_ms=result.latency_ms,
            attempts=attempts,
        )

    @staticmethod
    def _log_tier_failure(feature: str, result: TierResult) -> None:
        logger.warning(f"{result.provider.label} failed during {feature}: {result.error}")


def build_learning_ai_service(settings: Optional[Settings] = None) -> LearningAiService:
    """
    Wire the three providers and the provider configuration from settings.

    Args:
        settings: Settings to use (defaults to the global instance)

    Returns:
        LearningAiService ready for use
    """
    settings = settings or get_settings()
    return LearningAiService(
        openai_provider=OpenAiProvider(api_key=settings.openai_api_key, model=settings.openai_model),
        groq_provider=GroqProvider(api_key=settings.groq_api_key, model=settings.groq_model),
        local_provider=LocalNlpProvider(),
        config=settings.provider_config(),
    )
