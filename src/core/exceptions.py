"""Custom exceptions for the consensus bridge.

All exceptions are namespaced to avoid shadowing Python builtins and share
``ReconciliationError`` as a common base so callers at the transport
boundary can catch every pipeline failure with one clause.
"""


class ReconciliationError(Exception):
    """Base exception for all reconciliation errors."""

    def __init__(self, message: str, cause: Exception | None = None) -> None:
        """Initialize reconciliation error.

        Args:
            message: Error description
            cause: Original exception that caused this error
        """
        self.message = message
        self.cause = cause
        if cause:
            self.__cause__ = cause
        super().__init__(message)


class ParticipantConfigError(ReconciliationError):
    """Raised when a run has no participant to dispatch to.

    Covers an empty registry and an enabled list that names only
    unregistered participants.
    """

    def __init__(self, message: str, requested: list[str] | None = None) -> None:
        self.requested = requested or []
        super().__init__(message)


class AllParticipantsFailedError(ReconciliationError):
    """Raised when dispatch collects too few proposals to reconcile."""

    def __init__(
        self,
        message: str,
        attempted: list[str] | None = None,
        received: int = 0,
    ) -> None:
        """Initialize aggregate failure.

        Args:
            message: Error description
            attempted: Participants the run dispatched to
            received: Number of proposals that did arrive
        """
        self.attempted = attempted or []
        self.received = received
        super().__init__(message)


class ConsensusInputError(ReconciliationError):
    """Raised when the consensus engine is called without responses."""


class ParticipantError(ReconciliationError):
    """Base exception for participant failures."""

    def __init__(
        self,
        message: str,
        participant: str,
        cause: Exception | None = None,
    ) -> None:
        self.participant = participant
        super().__init__(message, cause)


class ParticipantNotReadyError(ParticipantError):
    """Raised when a participant is asked before it is ready."""


class ParticipantInferenceError(ParticipantError):
    """Raised when a participant cannot produce a proposal.

    Carries the number of attempts made before giving up.
    """

    def __init__(
        self,
        message: str,
        participant: str,
        attempts: int = 1,
        cause: Exception | None = None,
    ) -> None:
        self.attempts = attempts
        super().__init__(message, participant, cause)
