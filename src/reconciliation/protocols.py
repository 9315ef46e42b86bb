"""Protocol definitions for reconciliation participants.

The orchestrator only ever talks to this capability; how a prompt reaches a
model (HTTP inference service, browser session, a test double) is the
participant's business.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol, runtime_checkable

if TYPE_CHECKING:
    from src.reconciliation.models import ModelResponse, ParticipantName


@runtime_checkable
class ParticipantProtocol(Protocol):
    """Protocol for a model session that can answer a proposal prompt.

    Example:
        >>> class MyParticipant:
        ...     @property
        ...     def name(self) -> ParticipantName: ...
        ...     def is_ready(self) -> bool: ...
        ...     async def ask(self, prompt: str) -> ModelResponse: ...
        >>>
        >>> isinstance(MyParticipant(), ParticipantProtocol)
        True
    """

    @property
    def name(self) -> ParticipantName:
        """Registry key of this participant."""
        ...

    def is_ready(self) -> bool:
        """Whether the participant can accept a prompt right now."""
        ...

    async def ask(self, prompt: str) -> ModelResponse:
        """Submit a prompt and return the parsed proposal.

        Args:
            prompt: The full proposal prompt

        Returns:
            ModelResponse for this participant

        Raises:
            Exception: Any failure; the orchestrator treats it as no response
        """
        ...
