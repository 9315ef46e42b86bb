"""
Base Participant - Shared ask() flow for reconciliation participants.

Subclasses only implement ``generate()``, which turns a prompt into raw
model text. The base class owns readiness, retries, parsing the text into
code segments and the confidence heuristic.
"""

from __future__ import annotations

import asyncio
import logging
from abc import ABC, abstractmethod

from src.core.exceptions import ParticipantInferenceError, ParticipantNotReadyError
from src.reconciliation.models import ModelResponse, ParticipantName
from src.reconciliation.parser import extract_code_segments


logger = logging.getLogger(__name__)

BASE_CONFIDENCE = 0.7
CODE_CONFIDENCE_BONUS = 0.2


class BaseParticipant(ABC):
    """Abstract base class for reconciliation participants.

    Satisfies ``ParticipantProtocol``.

    Attributes:
        max_retries: Extra attempts after a failed generation
        retry_delay_seconds: Pause between attempts
    """

    def __init__(
        self,
        name: ParticipantName,
        max_retries: int = 2,
        retry_delay_seconds: float = 3.0,
    ) -> None:
        self._name = ParticipantName(name)
        self.max_retries = max_retries
        self.retry_delay_seconds = retry_delay_seconds
        self._ready = False

    @property
    def name(self) -> ParticipantName:
        """Registry key of this participant."""
        return self._name

    def is_ready(self) -> bool:
        """Whether start() succeeded and close() has not been called."""
        return self._ready

    async def start(self) -> bool:
        """Prepare the participant; returns the resulting readiness."""
        self._ready = True
        return self._ready

    async def close(self) -> None:
        """Release resources and stop accepting prompts."""
        self._ready = False

    @abstractmethod
    async def generate(self, prompt: str) -> str:
        """Send the prompt to the model and return its raw reply.

        Raises:
            Exception: Any transport or model failure; the attempt is retried
        """

    async def ask(self, prompt: str) -> ModelResponse:
        """Generate a proposal and parse it.

        Raises:
            ParticipantNotReadyError: If called before start()
            ParticipantInferenceError: If every attempt failed
        """
        if not self._ready:
            raise ParticipantNotReadyError(
                f"Participant {self._name.value} is not ready",
                participant=self._name.value,
            )

        attempts = self.max_retries + 1
        last_error: Exception | None = None
        for attempt in range(1, attempts + 1):
            try:
                text = await self.generate(prompt)
                return self._to_response(text)
            except Exception as e:
                last_error = e
                logger.warning(
                    "Participant %s attempt %d/%d failed: %s",
                    self._name.value,
                    attempt,
                    attempts,
                    e,
                )
                if attempt < attempts:
                    await asyncio.sleep(self.retry_delay_seconds)

        raise ParticipantInferenceError(
            f"Participant {self._name.value} failed after {attempts} attempts",
            participant=self._name.value,
            attempts=attempts,
            cause=last_error,
        )

    def _to_response(self, text: str) -> ModelResponse:
        segments = tuple(extract_code_segments(text))
        confidence = BASE_CONFIDENCE + (CODE_CONFIDENCE_BONUS if segments else 0.0)
        return ModelResponse(
            participant=self._name,
            proposal_text=text,
            code_segments=segments,
            confidence=confidence,
        )
