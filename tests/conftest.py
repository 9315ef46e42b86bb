"""Test configuration and shared fixtures.

Pattern: Pytest fixtures, conftest.py
Anti-Pattern Avoided: Fixture reuse without explicit scope
"""

import pytest

from src.core.config import Settings
from src.reconciliation.models import ParticipantName
from src.reconciliation.orchestrator import OrchestratorConfig, ReconciliationOrchestrator
from tests.unit.reconciliation.fake_participant import FakeParticipant


# ============================================================================
# Configuration Fixtures
# ============================================================================

@pytest.fixture
def test_settings() -> Settings:
    """Create test settings with safe defaults."""
    return Settings(
        inference_base_url="http://localhost:8086",
        participant_timeout_seconds=5.0,
        participant_retry_delay_seconds=0.0,
        log_level="DEBUG",
    )


# ============================================================================
# Orchestrator Fixtures
# ============================================================================

@pytest.fixture
def fake_participants() -> list[FakeParticipant]:
    """Two ready participants with the default proposal."""
    return [
        FakeParticipant(ParticipantName.CHATGPT),
        FakeParticipant(ParticipantName.CLAUDE),
    ]


@pytest.fixture
def fake_orchestrator(fake_participants: list[FakeParticipant]) -> ReconciliationOrchestrator:
    """Orchestrator over the fake participants with a short timeout."""
    return ReconciliationOrchestrator(
        fake_participants,
        config=OrchestratorConfig(participant_timeout_seconds=1.0),
    )
