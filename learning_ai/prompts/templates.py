"""
Prompt Template System

Templates for the remote providers. Every prompt asks for strict JSON of a
documented shape; the shape example doubles as the hint for the repair pass.
"""

from typing import Any, Optional
from string import Formatter

from learning_ai.exceptions import PromptTemplateError


class PromptTemplate:
    """
    A provider prompt paired with the JSON shape its reply must take.

    `expected_shape` is a compact example of a valid reply. When a reply does
    not decode (or decodes to the wrong shape) the adapter quotes it in
    REPAIR_JSON_TEMPLATE. Braces of the JSON examples inside `template` are
    doubled so str.format leaves them alone.
    """

    def __init__(
        self,
        template: str,
        name: Optional[str] = None,
        expected_shape: str = "{}",
    ):
        self.template = template.strip()
        self.name = name or "unnamed"
        self.expected_shape = expected_shape
        self.required_vars = self._extract_variables()

    def _extract_variables(self) -> set[str]:
        return {
            field_name.split(".")[0].split("[")[0]
            for _, field_name, _, _ in Formatter().parse(self.template)
            if field_name and field_name[0] not in ".["
        }

    def render(self, **kwargs: Any) -> str:
        """Fill every placeholder; lesson text is passed in already truncated."""
        missing = self.required_vars - set(kwargs.keys())
        if missing:
            raise PromptTemplateError(template_name=self.name, missing_vars=list(missing))
        try:
            return self.template.format(**kwargs)
        except KeyError as e:
            raise PromptTemplateError(template_name=self.name, missing_vars=[str(e)]) from e

    def __repr__(self) -> str:
        return f"PromptTemplate(name='{self.name}', vars={self.required_vars})"


# Lesson Analysis Template

ANALYZE_LESSON_TEMPLATE = PromptTemplate(
    """Analyze this school lesson and return strict JSON:
{{
  "topics": ["..."],
  "keyConcepts": ["..."],
  "difficulty": "EASY|MEDIUM|HARD",
  "estimatedStudyMinutes": number,
  "learningObjectives": ["..."]
}}
Lesson:
{lesson}""",
    name="analyze_lesson",
    expected_shape=(
        '{"topics":["..."],"keyConcepts":["..."],"difficulty":"EASY|MEDIUM|HARD",'
        '"estimatedStudyMinutes":30,"learningObjectives":["..."]}'
    ),
)


# Study Materials Template

GENERATE_MATERIALS_TEMPLATE = PromptTemplate(
    """{topic_hint}
Return strict JSON:
{{
  "summary": "...",
  "flashcards": [{{"front":"...","back":"..."}}],
  "explanations": ["..."],
  "examples": ["..."]
}}
Lesson:
{lesson}""",
    name="generate_materials",
    expected_shape='{"summary":"...","flashcards":[{"front":"...","back":"..."}],"explanations":["..."],"examples":["..."]}',
)


# Quiz Generation Template

GENERATE_QUIZ_TEMPLATE = PromptTemplate(
    """Generate {count} multiple-choice questions for this exact uploaded lesson.
Use lesson metadata and excerpt together.
Rules:
- Questions must test understanding of concrete lesson concepts.
- Every question must be tied to a specific lesson topic.
- Include 4 options and 1 correct answer present in options.
Return strict JSON array:
[{{"text":"...","options":["A","B","C","D"],"correctAnswer":"..."}}]
Lesson metadata:
{metadata}
Priority topics:
{priority_topics}
Weak topics to reinforce:
{weak_topics}
Lesson:
{lesson}""",
    name="generate_quiz_questions",
    expected_shape='[{"text":"...","options":["A","B","C","D"],"correctAnswer":"..."}]',
)


# Quiz Evaluation Template

EVALUATE_SUBMISSION_TEMPLATE = PromptTemplate(
    """Evaluate this quiz submission for lesson '{lesson_title}' ({lesson_subject}). Return strict JSON: {{"score": number, "weakTopics": ["..."], "explanation": "..."}}. Data: {answers}""",
    name="evaluate_quiz_submission",
    expected_shape='{"score":78.5,"weakTopics":["topic"],"explanation":"..."}',
)


# Remediation Template

SUMMARIZE_WEAK_TOPICS_TEMPLATE = PromptTemplate(
    """Write a concise remediation narrative for the student.
Return strict JSON:
{{"summary":"..."}}
Lesson: {lesson_title}
Score: {score}
Weak topics: {weak_topics}""",
    name="summarize_weak_topics",
    expected_shape='{"summary":"..."}',
)


# Onboarding Template

ONBOARDING_TIP_TEMPLATE = PromptTemplate(
    """Create one short onboarding tip for a {role} user named {name}{grade_clause}. Return JSON: {{"tip":"..."}}.""",
    name="generate_onboarding_tip",
    expected_shape='{"tip":"..."}',
)


# Concept Tagging Template

TAG_QUESTION_TEMPLATE = PromptTemplate(
    """Tag this MCQ question with 1-3 lesson concept tags and one short difficulty hint.
Return JSON:
{{
  "tags": ["..."],
  "difficultyHint": "..."
}}
Subject: {subject}
Lesson context: {lesson_context}
Question: {question}""",
    name="tag_question_concept",
    expected_shape='{"tags":["..."],"difficultyHint":"..."}',
)


# Misconception Template

MISCONCEPTION_TEMPLATE = PromptTemplate(
    """Identify likely misconception from this wrong answer.
Return JSON:
{{
  "label": "...",
  "confidence": 0.0
}}
Question: {question}
Correct answer: {correct_answer}
Student answer: {student_answer}""",
    name="analyze_misconception",
    expected_shape='{"label":"...","confidence":0.0}',
)


# JSON Repair Template

REPAIR_JSON_TEMPLATE = PromptTemplate(
    """Repair the following output into valid JSON only.
Expected shape example:
{expected_shape}
Broken output:
{broken_output}""",
    name="repair_json",
)
