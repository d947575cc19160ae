"""
OpenAI provider

Primary remote provider: OpenAI chat completions with the configured model
(default gpt-4o-mini).
"""

from learning_ai.models.outcome import ThirdPartyProvider
from learning_ai.providers.chat_completion import ChatCompletionProvider
from learning_ai.utils.constants import DEFAULT_OPENAI_MODEL, OPENAI_TAG_CONTEXT_CHARS


class OpenAiProvider(ChatCompletionProvider):
    """OpenAI chat-completions adapter."""

    provider_type = ThirdPartyProvider.OPENAI
    default_model = DEFAULT_OPENAI_MODEL
    tag_context_chars = OPENAI_TAG_CONTEXT_CHARS
