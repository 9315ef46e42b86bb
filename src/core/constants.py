"""Service constants shared by the API surface and the reconciliation core."""


API_VERSION = "v1"
API_PREFIX = f"/{API_VERSION}"
BRIDGE_PREFIX = f"{API_PREFIX}/bridge"

# File name used for edits when a request does not name its file.
DEFAULT_TARGET_FILE = "untitled"


class Timeouts:
    """Default timeout values in seconds."""

    PARTICIPANT_PROPOSAL = 120.0
    INFERENCE_REQUEST = 180.0
    HEALTH_CHECK = 5.0
