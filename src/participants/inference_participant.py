"""
Inference Participant - A participant backed by the inference service.

Every participant shares one ``InferenceServiceClient`` and addresses its
own model id. A failing model only fails its own participant; the
orchestrator carries on with the others.
"""

from __future__ import annotations

import logging

from src.clients.inference_service import InferenceServiceClient
from src.participants.base import BaseParticipant
from src.reconciliation.models import ParticipantName


logger = logging.getLogger(__name__)

SYSTEM_PROMPT = (
    "You are an expert software engineer. Answer with concise prose and put "
    "all code in fenced code blocks tagged with the language, and with "
    "':path' after the language when the block is a whole file."
)


class InferenceParticipant(BaseParticipant):
    """Participant that generates proposals through chat completions.

    Attributes:
        model: Model id sent with every completion request
        max_tokens: Completion token limit
        temperature: Sampling temperature
    """

    def __init__(
        self,
        name: ParticipantName,
        model: str,
        client: InferenceServiceClient,
        max_tokens: int = 4096,
        temperature: float = 0.7,
        max_retries: int = 2,
        retry_delay_seconds: float = 3.0,
    ) -> None:
        super().__init__(name, max_retries=max_retries, retry_delay_seconds=retry_delay_seconds)
        self.model = model
        self.max_tokens = max_tokens
        self.temperature = temperature
        self._client = client

    async def start(self) -> bool:
        """Mark ready only if the inference service is reachable."""
        self._ready = await self._client.health_check()
        if not self._ready:
            logger.warning(
                "Participant %s unavailable: inference service unhealthy",
                self.name.value,
            )
        return self._ready

    async def generate(self, prompt: str) -> str:
        return await self._client.complete(
            messages=[{"role": "user", "content": prompt}],
            model=self.model,
            system_prompt=SYSTEM_PROMPT,
            max_tokens=self.max_tokens,
            temperature=self.temperature,
        )
