"""Fake participant for testing.

Test double that satisfies ParticipantProtocol. It allows:
- Tracking if ask() was called and with which prompt
- Configurable delays for concurrency and timeout tests
- Configurable failures, error responses and readiness
- Configurable proposal text and confidence
"""

from __future__ import annotations

import asyncio

from src.reconciliation.models import ModelResponse, ParticipantName
from src.reconciliation.parser import extract_code_segments


# =============================================================================
# Test Constants
# =============================================================================

_DEFAULT_PROPOSAL = "Use a helper.\n\n```python\ndef helper():\n    return 1\n```"
_DEFAULT_CONFIDENCE = 0.75


class FakeParticipant:
    """Test double for a reconciliation participant.

    Satisfies ParticipantProtocol via duck typing.
    """

    def __init__(
        self,
        name: ParticipantName,
        *,
        proposal: str = _DEFAULT_PROPOSAL,
        confidence: float = _DEFAULT_CONFIDENCE,
        delay: float = 0.0,
        should_fail: bool = False,
        ready: bool = True,
        error: str | None = None,
        reported_latency_ms: int = 0,
    ) -> None:
        self._name = name
        self._proposal = proposal
        self._confidence = confidence
        self._delay = delay
        self._should_fail = should_fail
        self._ready = ready
        self._error = error
        self._reported_latency_ms = reported_latency_ms

        # Tracking for test assertions
        self.ask_called = False
        self.last_prompt: str | None = None
        self.call_count = 0
        self.completed = False

    @property
    def name(self) -> ParticipantName:
        return self._name

    def is_ready(self) -> bool:
        return self._ready

    async def ask(self, prompt: str) -> ModelResponse:
        """Return the configured proposal after the configured delay.

        Raises:
            RuntimeError: If should_fail is True
        """
        self.ask_called = True
        self.last_prompt = prompt
        self.call_count += 1

        if self._delay > 0:
            await asyncio.sleep(self._delay)

        if self._should_fail:
            raise RuntimeError(f"Fake failure for {self._name.value}")

        self.completed = True
        return ModelResponse(
            participant=self._name,
            proposal_text=self._proposal,
            code_segments=tuple(extract_code_segments(self._proposal)),
            confidence=self._confidence,
            latency_ms=self._reported_latency_ms,
            error=self._error,
        )


def make_response(
    name: ParticipantName,
    proposal: str = _DEFAULT_PROPOSAL,
    confidence: float = _DEFAULT_CONFIDENCE,
) -> ModelResponse:
    """Build a response the way a participant would."""
    return ModelResponse(
        participant=name,
        proposal_text=proposal,
        code_segments=tuple(extract_code_segments(proposal)),
        confidence=confidence,
    )
