"""Reconciliation orchestrator.

Owns the participant registry and runs one reconciliation:

1. Resolve the participants for the request
2. Dispatch the prompt to all of them at once, each racing its own timeout
3. Run the critique pass when more than one proposal arrived
4. Hand the proposals to the consensus engine

A participant that is not ready, raises or times out simply contributes no
proposal. Only an unresolvable participant set or a run that collects no
proposals fails the request.

Example:
    >>> orchestrator = ReconciliationOrchestrator()
    >>> orchestrator.register(my_participant)
    >>> result = await orchestrator.run(prompt, current_file="app.py")
"""

from __future__ import annotations

import asyncio
import logging
import time
from collections.abc import Iterable
from dataclasses import dataclass, field, replace

from src.core.exceptions import AllParticipantsFailedError, ParticipantConfigError
from src.reconciliation.consensus import ConsensusConfig, run_consensus
from src.reconciliation.critique import CritiqueConfig, apply_critique
from src.reconciliation.models import (
    ConsensusResult,
    ModelResponse,
    ParticipantName,
    TextRange,
)
from src.reconciliation.protocols import ParticipantProtocol


# =============================================================================
# Module Constants
# =============================================================================

_CONST_DEFAULT_TIMEOUT_SECONDS = 120.0
_CONST_DEFAULT_MIN_RESPONSES = 1

logger = logging.getLogger(__name__)


# =============================================================================
# OrchestratorConfig
# =============================================================================


@dataclass(frozen=True, slots=True)
class OrchestratorConfig:
    """Configuration for a reconciliation run.

    Attributes:
        participant_timeout_seconds: Per-participant proposal timeout
        enable_critique: Run the peer-agreement pass on multi-proposal runs
        min_responses: Fewest proposals a run accepts
        consensus: Consensus engine configuration
        critique: Critique pass configuration
    """

    participant_timeout_seconds: float = _CONST_DEFAULT_TIMEOUT_SECONDS
    enable_critique: bool = True
    min_responses: int = _CONST_DEFAULT_MIN_RESPONSES
    consensus: ConsensusConfig = field(default_factory=ConsensusConfig)
    critique: CritiqueConfig = field(default_factory=CritiqueConfig)

    def __post_init__(self) -> None:
        if self.participant_timeout_seconds <= 0:
            raise ValueError("participant_timeout_seconds must be positive")
        if self.min_responses < 1:
            raise ValueError("min_responses must be at least 1")


# =============================================================================
# ReconciliationOrchestrator
# =============================================================================


class ReconciliationOrchestrator:
    """Fans a prompt out to registered participants and reconciles the replies."""

    def __init__(
        self,
        participants: Iterable[ParticipantProtocol] = (),
        config: OrchestratorConfig | None = None,
    ) -> None:
        self._config = config or OrchestratorConfig()
        self._registry: dict[ParticipantName, ParticipantProtocol] = {}
        # Timed-out calls keep running; hold them so they are not collected.
        self._abandoned: set[asyncio.Task[ModelResponse]] = set()
        for participant in participants:
            self.register(participant)

    @property
    def config(self) -> OrchestratorConfig:
        """Run configuration."""
        return self._config

    @property
    def registered_names(self) -> list[ParticipantName]:
        """Registered participants in registration order."""
        return list(self._registry)

    def register(self, participant: ParticipantProtocol) -> None:
        """Register a participant, replacing any with the same name."""
        name = ParticipantName(participant.name)
        if name in self._registry:
            logger.info("Replacing registered participant %s", name.value)
        self._registry[name] = participant

    def unregister(self, name: ParticipantName | str) -> ParticipantProtocol | None:
        """Remove a participant; returns it, or None if it was not registered."""
        key = self._registered_key(name)
        return self._registry.pop(key) if key is not None else None

    def get(self, name: ParticipantName | str) -> ParticipantProtocol | None:
        """Look up a registered participant; None for unknown names."""
        key = self._registered_key(name)
        return self._registry[key] if key is not None else None

    def _registered_key(self, name: ParticipantName | str) -> ParticipantName | None:
        value = _name_value(name)
        for key in self._registry:
            if key.value == value:
                return key
        return None

    def resolve_participants(
        self,
        enabled_participants: Iterable[ParticipantName | str] | None = None,
    ) -> list[ParticipantName]:
        """Resolve which participants a run dispatches to.

        An empty or missing enabled list means every registered participant.
        Otherwise the enabled list is intersected with the registry, keeping
        the requested order.

        Raises:
            ParticipantConfigError: If nothing is registered or the
                intersection is empty
        """
        if not self._registry:
            raise ParticipantConfigError("No participants are registered")

        requested = [_name_value(name) for name in enabled_participants or ()]
        if not requested:
            return self.registered_names

        registered = {name.value: name for name in self._registry}
        resolved = [registered[value] for value in dict.fromkeys(requested) if value in registered]
        if not resolved:
            raise ParticipantConfigError(
                "None of the enabled participants are registered: " + ", ".join(requested),
                requested=requested,
            )
        return resolved

    async def run(
        self,
        prompt: str,
        enabled_participants: Iterable[ParticipantName | str] | None = None,
        current_file: str = "",
        selection_range: TextRange | None = None,
    ) -> ConsensusResult:
        """Run one reconciliation.

        Args:
            prompt: Proposal prompt sent to every participant
            enabled_participants: Participants to use; empty means all
            current_file: File the request was made from
            selection_range: Editor selection, if any

        Returns:
            ConsensusResult built from the collected proposals

        Raises:
            ParticipantConfigError: If no participant can be resolved
            AllParticipantsFailedError: If too few proposals arrive
        """
        resolved = self.resolve_participants(enabled_participants)
        logger.info(
            "Dispatching prompt (%d chars) to %s",
            len(prompt),
            ", ".join(name.value for name in resolved),
        )

        results = await asyncio.gather(
            *(self._dispatch(name, prompt) for name in resolved)
        )
        responses = [response for response in results if response is not None]

        if not responses:
            raise AllParticipantsFailedError(
                "All participants failed to respond",
                attempted=[name.value for name in resolved],
            )
        if len(responses) < self._config.min_responses:
            raise AllParticipantsFailedError(
                f"Only {len(responses)} of {len(resolved)} participants responded, "
                f"{self._config.min_responses} required",
                attempted=[name.value for name in resolved],
                received=len(responses),
            )

        if len(responses) > 1 and self._config.enable_critique:
            responses = apply_critique(responses, self._config.critique)

        return run_consensus(
            responses,
            current_file,
            selection_range,
            config=self._config.consensus,
        )

    async def aclose(self) -> None:
        """Cancel timed-out participant calls that are still running."""
        pending = list(self._abandoned)
        for task in pending:
            task.cancel()
        if pending:
            await asyncio.gather(*pending, return_exceptions=True)
        self._abandoned.clear()

    # -------------------------------------------------------------------------
    # Dispatch
    # -------------------------------------------------------------------------

    async def _dispatch(self, name: ParticipantName, prompt: str) -> ModelResponse | None:
        """Ask one participant; any failure becomes None."""
        participant = self._registry.get(name)
        if participant is None:
            logger.warning("Participant %s is not registered, skipping", name.value)
            return None
        try:
            ready = participant.is_ready()
        except Exception as e:
            logger.warning("Participant %s readiness check failed: %s", name.value, e)
            return None
        if not ready:
            logger.warning("Participant %s is not ready, skipping", name.value)
            return None

        timeout = self._config.participant_timeout_seconds
        started = time.monotonic()
        task = asyncio.ensure_future(participant.ask(prompt))
        try:
            done, _ = await asyncio.wait({task}, timeout=timeout)
        except asyncio.CancelledError:
            task.cancel()
            raise

        if task not in done:
            logger.warning("Participant %s timed out after %.1fs", name.value, timeout)
            self._abandon(name, task)
            return None

        if task.cancelled():
            logger.warning("Participant %s call was cancelled", name.value)
            return None
        try:
            response = task.result()
        except Exception as e:
            logger.warning("Participant %s failed: %s", name.value, e)
            return None

        if response.error:
            logger.warning("Participant %s returned an error: %s", name.value, response.error)
            return None

        latency_ms = int((time.monotonic() - started) * 1000)
        return replace(response, latency_ms=latency_ms)

    def _abandon(self, name: ParticipantName, task: asyncio.Task[ModelResponse]) -> None:
        self._abandoned.add(task)

        def _discard(finished: asyncio.Task[ModelResponse]) -> None:
            self._abandoned.discard(finished)
            if finished.cancelled():
                return
            error = finished.exception()
            if error is not None:
                logger.debug("Late failure from %s ignored: %s", name.value, error)
            else:
                logger.debug("Late response from %s discarded", name.value)

        task.add_done_callback(_discard)


def _name_value(name: ParticipantName | str) -> str:
    return name.value if isinstance(name, ParticipantName) else str(name).lower()
