"""
Groq provider

Groq exposes an OpenAI-compatible chat-completions endpoint, so this adapter
reuses the openai client against Groq's base URL. Requests are capped at 30s
and prompts are kept a little shorter than OpenAI's.
"""

from learning_ai.models.outcome import ThirdPartyProvider
from learning_ai.providers.chat_completion import ChatCompletionProvider
from learning_ai.utils.constants import (
    DEFAULT_GROQ_MODEL,
    GROQ_BASE_URL,
    GROQ_MAX_TIMEOUT,
    GROQ_TAG_CONTEXT_CHARS,
)


class GroqProvider(ChatCompletionProvider):
    """Groq (free tier) adapter, used as primary or as the remote fallback."""

    provider_type = ThirdPartyProvider.GROQ_FREE
    base_url = GROQ_BASE_URL
    default_model = DEFAULT_GROQ_MODEL
    max_timeout = GROQ_MAX_TIMEOUT
    lesson_prompt_chars = 14000
    quiz_prompt_chars = 12000
    tag_context_chars = GROQ_TAG_CONTEXT_CHARS
