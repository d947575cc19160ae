"""
Custom Exception Hierarchy for the Learning AI layer

Exception Hierarchy:
    LearningAiError (base)
    ├── PromptTemplateError
    ├── ProviderError
    │   ├── ProviderUnavailableError
    │   ├── ProviderRequestError
    │   ├── MalformedOutputError
    │   └── EmptyResultError
    └── StrictModeError

Adapters raise ProviderError subclasses and never swallow them. Only
LearningAiService converts them into a fallback, and only outside strict mode.
"""

from typing import Optional


class LearningAiError(Exception):
    """Base exception for all learning AI errors."""

    def __init__(self, message: str, details: Optional[dict] = None):
        super().__init__(message)
        self.message = message
        self.details = details or {}


class PromptTemplateError(LearningAiError):
    """Raised when prompt template rendering fails."""

    def __init__(self, template_name: str, missing_vars: list[str]):
        message = f"Prompt template '{template_name}' missing variables: {', '.join(sorted(missing_vars))}"
        super().__init__(message)
        self.template_name = template_name
        self.missing_vars = missing_vars


# Provider Errors

class ProviderError(LearningAiError):
    """Base exception for a failure inside one provider tier."""

    def __init__(self, provider: str, message: str, details: Optional[dict] = None):
        super().__init__(message, details)
        self.provider = provider


class ProviderUnavailableError(ProviderError):
    """Raised when a remote provider is called without a credential."""

    def __init__(self, provider: str):
        super().__init__(provider, f"{provider} key is missing.")


class ProviderRequestError(ProviderError):
    """Raised when the HTTP call to a provider fails (network, timeout, API error)."""

    def __init__(self, provider: str, original_error: Exception):
        super().__init__(provider, f"{provider} request failed: {original_error}")
        self.original_error = original_error


class MalformedOutputError(ProviderError):
    """Raised when model output could not be decoded into JSON."""

    def __init__(self, provider: str, message: str, raw_output: Optional[str] = None):
        super().__init__(provider, message, {"raw_output": (raw_output or "")[:500]})
        self.raw_output = raw_output


class EmptyResultError(ProviderError):
    """Raised when a decoded result is degenerate after normalisation."""
    pass


class StrictModeError(LearningAiError):
    """Raised in strict mode when the configured provider cannot be used at all."""

    def __init__(self, reason: str):
        super().__init__(f"AI strict mode enabled: {reason}")
        self.reason = reason
