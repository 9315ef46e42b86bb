"""Core module - Configuration, logging, exceptions and shared constants.

Exports:
    - Settings, get_settings: Pydantic Settings configuration
    - configure_logging, get_logger: Structured logging (structlog)
    - API_PREFIX, BRIDGE_PREFIX, DEFAULT_TARGET_FILE, Timeouts: constants
    - Exception classes: ReconciliationError and subclasses
"""

from src.core.config import Settings, get_settings
from src.core.constants import (
    API_PREFIX,
    API_VERSION,
    BRIDGE_PREFIX,
    DEFAULT_TARGET_FILE,
    Timeouts,
)
from src.core.exceptions import (
    AllParticipantsFailedError,
    ConsensusInputError,
    ParticipantConfigError,
    ParticipantError,
    ParticipantInferenceError,
    ParticipantNotReadyError,
    ReconciliationError,
)
from src.core.logging import configure_logging, get_logger


__all__ = [
    # Constants
    "API_PREFIX",
    "API_VERSION",
    "BRIDGE_PREFIX",
    "DEFAULT_TARGET_FILE",
    "Timeouts",
    # Exceptions
    "AllParticipantsFailedError",
    "ConsensusInputError",
    "ParticipantConfigError",
    "ParticipantError",
    "ParticipantInferenceError",
    "ParticipantNotReadyError",
    "ReconciliationError",
    # Configuration
    "Settings",
    "get_settings",
    # Logging
    "configure_logging",
    "get_logger",
]
