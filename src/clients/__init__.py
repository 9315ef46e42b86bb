"""Service Clients.

HTTP client for the OpenAI-compatible inference service.
"""

from src.clients.inference_service import (
    InferenceServiceClient,
    create_inference_client,
)


__all__ = [
    "InferenceServiceClient",
    "create_inference_client",
]
