"""Learning AI constants - all magic numbers centralized."""

# Provider configuration
PROVIDER_OPENAI = "openai"
PROVIDER_GROQ = "groq"
PROVIDER_LOCAL = "local"
KNOWN_PROVIDERS = (PROVIDER_OPENAI, PROVIDER_GROQ, PROVIDER_LOCAL)

POLICY_GROQ_LOCAL = "groq_local"
POLICY_LOCAL_ONLY = "local_only"
KNOWN_FALLBACK_POLICIES = (POLICY_GROQ_LOCAL, POLICY_LOCAL_ONLY)

# Remote endpoints and models
DEFAULT_OPENAI_MODEL = "gpt-4o-mini"
DEFAULT_GROQ_MODEL = "llama-3.1-8b-instant"
GROQ_BASE_URL = "https://api.groq.com/openai/v1"
CHAT_TEMPERATURE = 0.2
JSON_SYSTEM_PROMPT = "You are an educational AI. Return only valid JSON."
REPAIR_SYSTEM_PROMPT = "You only repair JSON and return valid JSON."

# Per-operation request timeouts (seconds)
OPERATION_TIMEOUTS = {
    "analyze_lesson": 35,
    "generate_materials": 35,
    "generate_quiz_questions": 35,
    "evaluate_quiz_submission": 25,
    "summarize_weak_topics": 15,
    "generate_onboarding_tip": 8,
    "tag_question_concept": 12,
    "analyze_misconception": 12,
}
GROQ_MAX_TIMEOUT = 30

# Prompt budgets (characters)
MAX_PROMPT_TEXT_CHARS = 15000
CHUNK_SIZE = 5000
CHUNK_FALLBACK_CHARS = 350
OPENAI_TAG_CONTEXT_CHARS = 900
GROQ_TAG_CONTEXT_CHARS = 700
MAX_HINT_ITEMS = 12
MAX_METADATA_KEY_CONCEPTS = 10

# Text heuristics
MIN_SENTENCE_CHARS = 12  # fragments must be longer than this
MAX_SENTENCE_CHARS = 120
QUESTION_SNIPPET_CHARS = 72
MAX_QUIZ_OPTIONS = 4
MIN_QUIZ_OPTIONS = 2

# Lesson analysis
HARD_TEXT_CHARS = 8000
MEDIUM_TEXT_CHARS = 3000
MIN_STUDY_MINUTES = 20
MAX_STUDY_MINUTES = 120
STUDY_CHARS_PER_MINUTE = 240
MIN_STUDY_TEXT_CHARS = 300
REMOTE_MIN_STUDY_MINUTES = 15
REMOTE_DEFAULT_STUDY_MINUTES = 30

# Quiz evaluation
SLOW_ANSWER_MS = 35000  # correct answers at or above this still count as weak signal
WRONG_ANSWER_WEIGHT = 2
SLOW_ANSWER_WEIGHT = 1
MAX_WEAK_TOPICS = 6
MAX_SUMMARY_TOPICS = 4
MAX_QUESTION_TAGS = 3

# Default/fallback values
GENERAL_WEAK_TOPIC = "General lesson understanding"
DEFAULT_TAG_HINT = "Review the concept and retry."
