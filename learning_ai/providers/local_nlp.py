"""
Local NLP Provider

Dependency-free provider that produces every contract shape from
sentence/keyword heuristics. No network calls: it is always available and
serves as the terminal fallback of LearningAiService, or as the configured
provider when AI_PROVIDER=local. Output is deterministic for a given input.
"""

import logging
from typing import Dict, List, Optional, Sequence

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
from learning_ai.models.outcome import ThirdPartyProvider
from learning_ai.providers.base import AiProvider
from learning_ai.utils.constants import (
    GENERAL_WEAK_TOPIC,
    HARD_TEXT_CHARS,
    MAX_QUESTION_TAGS,
    MAX_STUDY_MINUTES,
    MAX_SUMMARY_TOPICS,
    MAX_WEAK_TOPICS,
    MEDIUM_TEXT_CHARS,
    MIN_STUDY_MINUTES,
    MIN_STUDY_TEXT_CHARS,
    QUESTION_SNIPPET_CHARS,
    SLOW_ANSWER_MS,
    SLOW_ANSWER_WEIGHT,
    STUDY_CHARS_PER_MINUTE,
    WRONG_ANSWER_WEIGHT,
)
from learning_ai.utils.normalization import normalize_quiz_questions, normalize_string_list
from learning_ai.utils.text_utils import (
    estimate_study_minutes,
    extract_keywords,
    sentence_chunks,
    unique_in_order,
)

logger = logging.getLogger(__name__)

DEFAULT_TOPICS = ["Core Lesson Topic"]
DEFAULT_KEY_CONCEPTS = ["Definition", "Application", "Practice"]
LEARNING_OBJECTIVES = [
    "Understand the main lesson concepts",
    "Apply concepts to practical examples",
    "Answer comprehension questions confidently",
]
DEFAULT_SUMMARY = "This lesson introduces core concepts and practical understanding goals."
FLASHCARD_BACK = "Review the definition and one practical example for: {topic}"
TAG_HINT = "Review the concept definition before selecting the best option."
DEFAULT_TAG = "core-concept"

QUESTION_TEMPLATES = [
    'According to {title}, what best explains "{focus}" in relation to {keyword}?',
    'In {title}, which statement is most accurate about "{focus}"?',
    'When applying {title} concepts, how should "{focus}" be interpreted?',
    'Within {title}, which option correctly describes "{focus}"?',
]

TEACHER_TIP = "Create one group, monitor weak-topic trends weekly, and post lesson-specific feedback."
STUDENT_TIP = "Upload one lesson, review generated materials, then complete the quiz and fix weak topics."
STUDENT_GRADE_TIP = (
    "Grade {grade} plan: upload one lesson, review summary + flashcards, then take the adaptive quiz."
)


class LocalNlpProvider(AiProvider):
    """Heuristic provider; never raises for well-typed input."""

    provider_type = ThirdPartyProvider.LOCAL_NLP

    def has_provider(self) -> bool:
        return True

    def analyze_lesson(self, text: str) -> LessonAnalysis:
        text = text or ""
        topics = sentence_chunks(text)[:6]
        keywords = extract_keywords(text, 12)
        key_concepts = unique_in_order(topics + keywords)[:8]

        if len(text) > HARD_TEXT_CHARS:
            difficulty = Difficulty.HARD
        elif len(text) > MEDIUM_TEXT_CHARS:
            difficulty = Difficulty.MEDIUM
        else:
            difficulty = Difficulty.EASY

        return LessonAnalysis(
            topics=topics or list(DEFAULT_TOPICS),
            key_concepts=key_concepts or list(DEFAULT_KEY_CONCEPTS),
            difficulty=difficulty,
            estimated_study_minutes=estimate_study_minutes(
                len(text),
                minimum=MIN_STUDY_MINUTES,
                maximum=MAX_STUDY_MINUTES,
                chars_per_minute=STUDY_CHARS_PER_MINUTE,
                min_chars=MIN_STUDY_TEXT_CHARS,
            ),
            learning_objectives=list(LEARNING_OBJECTIVES),
        )

    def generate_materials(self, text: str, weak_topics: Optional[Sequence[str]] = None) -> StudyMaterials:
        weak = normalize_string_list(list(weak_topics or []))
        sentences = sentence_chunks(text)
        summary = " ".join(sentences[:5]) or DEFAULT_SUMMARY

        seeds = weak[:5] if weak else extract_keywords(text, 10)[:5]
        if not seeds:
            seeds = sentences[:4]

        if weak:
            priority = f"Prioritize weak topics first: {', '.join(weak[:4])}."
        else:
            priority = "Start with the lesson objectives and map each objective to one concept."

        return StudyMaterials(
            summary=summary,
            flashcards=[Flashcard(front=seed, back=FLASHCARD_BACK.format(topic=seed)) for seed in seeds],
            explanations=[
                "Break the lesson into smaller ideas and connect each idea with one real-life use.",
                "Compare similar concepts and identify the differences clearly.",
                priority,
            ],
            examples=[
                "Solve a simple case using the lesson rule step by step.",
                "Explain the concept to another student using your own words.",
            ],
        )

    def generate_quiz_questions(
        self,
        text: str,
        count: int = 8,
        context: Optional[QuizContext] = None,
    ) -> List[QuizQuestion]:
        context = context or QuizContext()
        sentences = sentence_chunks(text)
        keywords = extract_keywords(text, 24)

        focus_pool = unique_in_order(
            normalize_string_list(context.weak_topics)
            + normalize_string_list(context.topics)
            + normalize_string_list(context.key_concepts)
            + keywords
            + sentences[:20]
        )
        if not focus_pool:
            focus_pool = [context.title.strip() or "Core lesson concept"]

        title = context.title.strip() or "this lesson"
        subject = context.subject.strip() or "the subject"
        target = max(1, count)
        pool_size = len(focus_pool)

        rows = []
        for i in range(target):
            focus = focus_pool[i % pool_size]
            following = focus_pool[(i + 1) % pool_size]
            alternate = focus_pool[(i + 2) % pool_size]
            keyword = keywords[i % len(keywords)] if keywords else subject

            correct = f'It links "{focus[:48]}" to {keyword[:32]} outcomes in {subject}.'
            rows.append({
                "text": QUESTION_TEMPLATES[i % len(QUESTION_TEMPLATES)].format(
                    title=title, focus=focus[:65], keyword=keyword[:40]
                ),
                "options": [
                    correct,
                    f'It ignores "{focus[:30]}" and only repeats "{following[:30]}".',
                    f'It replaces "{focus[:30]}" with an unrelated idea: "{alternate[:30]}".',
                    f"It is unrelated to {subject} lesson content.",
                ],
                "correctAnswer": correct,
            })

        questions = normalize_quiz_questions(rows, limit=target)
        logger.debug(f"Local quiz generation produced {len(questions)}/{target} unique questions")
        return [QuizQuestion.model_validate(row) for row in questions]

    def evaluate_quiz_submission(
        self,
        answer_stats: Sequence[AnswerStat],
        context: Optional[EvaluationContext] = None,
    ) -> QuizEvaluation:
        context = context or EvaluationContext()
        total = len(answer_stats)
        correct = 0
        weights: Dict[str, int] = {}

        for stat in answer_stats:
            response_time_ms = max(0, stat.response_time_ms)
            if stat.is_correct:
                correct += 1
                if response_time_ms < SLOW_ANSWER_MS:
                    continue

            weight = SLOW_ANSWER_WEIGHT if stat.is_correct else WRONG_ANSWER_WEIGHT
            for topic in self._topics_from_question(stat.question_ref):
                weights[topic] = weights.get(topic, 0) + weight

        score = round(correct / total * 100, 2) if total else 0.0
        ranked = sorted(weights.items(), key=lambda item: item[1], reverse=True)
        weak_topics = [topic for topic, _ in ranked[:MAX_WEAK_TOPICS]]
        if not weak_topics and score < 100.0:
            weak_topics = [GENERAL_WEAK_TOPIC]

        summary = self.summarize_weak_topics(weak_topics, score, context.lesson_title)
        return QuizEvaluation(score=score, weak_topics=weak_topics, explanation=summary.summary)

    def summarize_weak_topics(self, weak_topics: Sequence[str], score: float, lesson_title: str) -> WeakTopicSummary:
        title = (lesson_title or "").strip() or "this lesson"
        topics = list(weak_topics)
        focus = ", ".join(topics[:MAX_SUMMARY_TOPICS]) if topics else "core concepts and short-form revision"
        return WeakTopicSummary(
            summary=f"For {title} (score {score:.2f}%), focus next on {focus}, then retake an adaptive quiz."
        )

    def generate_onboarding_tip(self, role: str, name: str, grade: Optional[str] = None) -> OnboardingTip:
        role = (role or "").strip().lower()
        tip = TEACHER_TIP if role == "teacher" else STUDENT_TIP

        if role == "student" and grade is not None and grade.strip():
            tip = STUDENT_GRADE_TIP.format(grade=grade.strip())

        return OnboardingTip(tip=tip)

    def tag_question_concept(self, question_text: str, lesson_context: str, subject: str = "") -> ConceptTags:
        combined = f"{question_text} {lesson_context} {subject}"
        tags = extract_keywords(combined, 5)[:MAX_QUESTION_TAGS]
        return ConceptTags(tags=tags or [DEFAULT_TAG], hint=TAG_HINT)

    def analyze_misconception(
        self,
        question_text: str,
        correct_answer: str,
        student_answer: str,
    ) -> MisconceptionAnalysis:
        normalized_correct = (correct_answer or "").strip().lower()
        normalized_student = (student_answer or "").strip().lower()

        if not normalized_student:
            label, confidence = "No answer selected", 0.9
        elif normalized_student == normalized_correct:
            label, confidence = "Correct understanding", 0.99
        elif normalized_student in normalized_correct or normalized_correct in normalized_student:
            label, confidence = "Partially correct but incomplete reasoning", 0.6
        elif question_text and student_answer:
            label, confidence = "Confused related concepts", 0.5
        else:
            label, confidence = "Needs concept reinforcement", 0.35

        return MisconceptionAnalysis(label=label, confidence=confidence)

    @staticmethod
    def _topics_from_question(question: Optional[QuestionRef]) -> List[str]:
        if question is None:
            return [GENERAL_WEAK_TOPIC]

        tags = question.concept_tags()
        if tags:
            return tags

        snippet = (question.text or "")[:QUESTION_SNIPPET_CHARS].strip()
        return [snippet or GENERAL_WEAK_TOPIC]
