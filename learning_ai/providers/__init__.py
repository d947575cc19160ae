from learning_ai.providers.base import AiProvider
from learning_ai.providers.chat_completion import ChatCompletionProvider
from learning_ai.providers.groq_provider import GroqProvider
from learning_ai.providers.local_nlp import LocalNlpProvider
from learning_ai.providers.openai_provider import OpenAiProvider

__all__ = [
    "AiProvider",
    "ChatCompletionProvider",
    "GroqProvider",
    "LocalNlpProvider",
    "OpenAiProvider",
]
