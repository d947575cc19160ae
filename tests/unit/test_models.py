"""
Unit tests for learning_ai/models

Contract validation, wire (camelCase) names, question tag lookup and the
integration metadata record.
"""

import pytest
from pydantic import ValidationError

from learning_ai.models.contracts import (
    AnswerStat,
    ConceptTags,
    LessonAnalysis,
    MisconceptionAnalysis,
    QuestionRef,
    QuizEvaluation,
    QuizQuestion,
)
from learning_ai.models.outcome import InvocationOutcome, ThirdPartyProvider, ThirdPartyStatus


# ---------------------------------------------------------------------------
# Contracts
# ---------------------------------------------------------------------------

class TestQuizQuestion:

    def test_valid(self):
        question = QuizQuestion(text="Q?", options=["A", "B"], correct_answer="A")
        assert question.model_dump(by_alias=True) == {"text": "Q?", "options": ["A", "B"], "correctAnswer": "A"}

    def test_accepts_wire_names(self):
        question = QuizQuestion.model_validate({"text": "Q?", "options": ["A", "B"], "correctAnswer": "B"})
        assert question.correct_answer == "B"

    @pytest.mark.parametrize("options,correct", [
        (["A"], "A"),
        (["A", "B", "C", "D", "E"], "A"),
        (["A", "A"], "A"),
        (["A", "B"], "C"),
    ])
    def test_invalid(self, options, correct):
        with pytest.raises(ValidationError):
            QuizQuestion(text="Q?", options=options, correct_answer=correct)


class TestContractBounds:

    def test_study_minutes_floor(self):
        with pytest.raises(ValidationError):
            LessonAnalysis(estimated_study_minutes=10)

    def test_score_range(self):
        with pytest.raises(ValidationError):
            QuizEvaluation(score=100.5)

    def test_confidence_range(self):
        with pytest.raises(ValidationError):
            MisconceptionAnalysis(label="x", confidence=1.5)

    def test_at_most_three_tags(self):
        with pytest.raises(ValidationError):
            ConceptTags(tags=["a", "b", "c", "d"], hint="h")

    def test_lesson_analysis_wire_names(self):
        dumped = LessonAnalysis(topics=["A"]).model_dump(mode="json", by_alias=True)
        assert dumped == {
            "topics": ["A"],
            "keyConcepts": [],
            "difficulty": "MEDIUM",
            "estimatedStudyMinutes": 30,
            "learningObjectives": [],
        }


class TestQuestionRef:

    def test_explicit_tags_win(self):
        ref = QuestionRef(
            tags=["ratios", "ratios", "rates"],
            third_party_meta={"integrations": {"OPENAI": {"payload": {"tags": ["other"]}}}},
        )
        assert ref.concept_tags() == ["ratios", "rates"]

    def test_tags_from_integration_mapping(self):
        ref = QuestionRef(third_party_meta={"integrations": {
            "OPENAI": {"status": "FAILED", "payload": {}},
            "LOCAL_NLP": {"status": "SUCCESS", "payload": {"tags": ["fractions", "halves"]}},
        }})
        assert ref.concept_tags() == ["fractions", "halves"]

    def test_tags_from_integration_list(self):
        ref = QuestionRef(third_party_meta={"integrations": [{"payload": {"tags": ["angles"]}}]})
        assert ref.concept_tags() == ["angles"]

    @pytest.mark.parametrize("meta", [None, {}, {"integrations": "bad"}, {"integrations": [{"payload": "x"}]}])
    def test_no_tags(self, meta):
        assert QuestionRef(text="Q", third_party_meta=meta).concept_tags() == []

    def test_answer_stat_from_wire_dict(self):
        stat = AnswerStat.model_validate({
            "questionRef": {"text": "Q", "correctAnswer": "A", "thirdPartyMeta": {"integrations": {}}},
            "studentAnswer": "B",
            "isCorrect": False,
            "responseTimeMs": 900,
        })
        assert stat.question_ref.correct_answer == "A"
        assert stat.response_time_ms == 900


# ---------------------------------------------------------------------------
# Outcome
# ---------------------------------------------------------------------------

class TestInvocationOutcome:

    def test_provider_labels(self):
        assert ThirdPartyProvider.OPENAI.label == "OpenAI"
        assert ThirdPartyProvider.GROQ_FREE.label == "Groq"
        assert ThirdPartyProvider.LOCAL_NLP.label == "Local NLP"

    def test_integration_meta_defaults(self):
        outcome = InvocationOutcome(
            data={"tip": "x"},
            provider=ThirdPartyProvider.GROQ_FREE,
            status=ThirdPartyStatus.FALLBACK,
            fallback_used=True,
            message="fallback",
            latency_ms=120,
        )

        record = outcome.integration_meta()["GROQ_FREE"]

        assert record["status"] == "FALLBACK"
        assert record["externalId"] is None
        assert record["latencyMs"] == 120
        assert record["payload"] == {}
        assert record["checkedAt"].endswith("+00:00")
