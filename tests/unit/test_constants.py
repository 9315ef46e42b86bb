"""Unit tests for service constants."""

from src.core.constants import API_PREFIX, BRIDGE_PREFIX, DEFAULT_TARGET_FILE, Timeouts


class TestConstants:
    """Route prefixes and defaults."""

    def test_bridge_prefix_is_versioned(self) -> None:
        assert API_PREFIX == "/v1"
        assert BRIDGE_PREFIX == "/v1/bridge"

    def test_default_target_file(self) -> None:
        assert DEFAULT_TARGET_FILE == "untitled"

    def test_inference_timeout_exceeds_proposal_timeout(self) -> None:
        assert Timeouts.INFERENCE_REQUEST > Timeouts.PARTICIPANT_PROPOSAL
