"""Provenance records returned by LearningAiService."""
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Dict, Generic, List, Optional, TypeVar

from pydantic import Field

from learning_ai.models.contracts import ContractModel

DataT = TypeVar("DataT")


class ThirdPartyProvider(str, Enum):
    """Who produced a result."""
    OPENAI = "OPENAI"
    GROQ_FREE = "GROQ_FREE"
    LOCAL_NLP = "LOCAL_NLP"

    @property
    def label(self) -> str:
        return _PROVIDER_LABELS[self]


_PROVIDER_LABELS = {
    ThirdPartyProvider.OPENAI: "OpenAI",
    ThirdPartyProvider.GROQ_FREE: "Groq",
    ThirdPartyProvider.LOCAL_NLP: "Local NLP",
}


class ThirdPartyStatus(str, Enum):
    """Under which circumstance a provider produced (or did not produce) a result."""
    SUCCESS = "SUCCESS"
    FAILED = "FAILED"
    FALLBACK = "FALLBACK"
    SKIPPED = "SKIPPED"


class ProviderAttempt(ContractModel):
    """One tier of the cascade within a single invocation."""
    provider: ThirdPartyProvider
    status: ThirdPartyStatus
    latency_ms: int = 0
    error: Optional[str] = None


class InvocationOutcome(ContractModel, Generic[DataT]):
    """
    Audit record wrapping every orchestrator call.

    ``provider`` + ``status`` answer "who produced this, and under what
    circumstance"; ``attempts`` lists every tier that was tried or skipped.
    """
    data: DataT
    provider: ThirdPartyProvider
    status: ThirdPartyStatus
    fallback_used: bool = False
    message: str = ""
    latency_ms: int = 0
    attempts: List[ProviderAttempt] = Field(default_factory=list)

    def integration_meta(
        self,
        payload: Optional[Dict[str, Any]] = None,
        external_id: Optional[str] = None,
    ) -> Dict[str, Dict[str, Any]]:
        """Integration record for entity metadata, keyed by provider."""
        return {
            self.provider.value: {
                "status": self.status.value,
                "externalId": external_id,
                "checkedAt": datetime.now(timezone.utc).isoformat(),
                "latencyMs": self.latency_ms,
                "message": self.message,
                "payload": payload or {},
            }
        }


class ProviderState(ContractModel):
    """Diagnostic view of provider selection, without invoking anything."""
    configured: str
    active: ThirdPartyProvider
    primary_available: bool
    fallback_policy: str
