"""Inference Service Client.

Async HTTP client for an OpenAI-compatible chat completions service. Each
participant addresses its own model id through a shared client instance.
"""

from __future__ import annotations

import logging

import httpx
from pydantic import BaseModel, Field

from src.core.config import Settings
from src.core.constants import Timeouts


logger = logging.getLogger(__name__)

_CHAT_COMPLETIONS_PATH = "/v1/chat/completions"
_MODELS_PATH = "/v1/models"
_HEALTH_PATH = "/health"


# =============================================================================
# Request/Response Models
# =============================================================================

class ChatMessage(BaseModel):
    """Chat message for the inference service."""

    role: str = Field(..., description="Message role: user, system, assistant")
    content: str = Field(..., description="Message content")


class ChatCompletionRequest(BaseModel):
    """OpenAI-compatible chat completion request."""

    model: str = Field(..., description="Model ID")
    messages: list[ChatMessage] = Field(..., description="Conversation messages")
    temperature: float = Field(default=0.7, ge=0.0, le=2.0)
    max_tokens: int = Field(default=4096, gt=0)
    stream: bool = Field(default=False)


class ChatCompletionChoice(BaseModel):
    """Choice in chat completion response."""

    index: int
    message: ChatMessage
    finish_reason: str | None = None


class Usage(BaseModel):
    """Token usage statistics."""

    prompt_tokens: int = 0
    completion_tokens: int = 0
    total_tokens: int = 0


class ChatCompletionResponse(BaseModel):
    """OpenAI-compatible chat completion response."""

    id: str
    object: str = "chat.completion"
    created: int
    model: str
    choices: list[ChatCompletionChoice]
    usage: Usage | None = None


# =============================================================================
# Inference Service Client
# =============================================================================

class InferenceServiceClient:
    """HTTP client for chat completions.

    Usage:
        client = InferenceServiceClient("http://localhost:8085")
        text = await client.complete(
            messages=[{"role": "user", "content": "Hello"}],
            model="qwen-coder",
        )

    Attributes:
        base_url: Base URL of the inference service
        timeout: Request timeout in seconds
    """

    def __init__(
        self,
        base_url: str = "http://localhost:8085",
        timeout: float = 180.0,
    ) -> None:
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self._client: httpx.AsyncClient | None = None

    def _get_client(self) -> httpx.AsyncClient:
        """Get or create HTTP client (lazy initialization)."""
        if self._client is None:
            self._client = httpx.AsyncClient(
                base_url=self.base_url,
                timeout=self.timeout,
            )
        return self._client

    async def close(self) -> None:
        """Release HTTP client resources."""
        if self._client is not None:
            await self._client.aclose()
            self._client = None

    async def health_check(self) -> bool:
        """Return True when the service answers its health endpoint."""
        try:
            response = await self._get_client().get(_HEALTH_PATH, timeout=Timeouts.HEALTH_CHECK)
        except httpx.HTTPError as e:
            logger.warning("Inference service health check failed: %s", e)
            return False
        return response.status_code == 200

    async def list_models(self) -> list[str]:
        """Ids of the models the service currently serves.

        Raises:
            httpx.HTTPStatusError: On HTTP errors
        """
        response = await self._get_client().get(_MODELS_PATH)
        response.raise_for_status()
        return [entry["id"] for entry in response.json().get("data", []) if "id" in entry]

    async def complete(
        self,
        messages: list[dict[str, str]],
        model: str,
        system_prompt: str | None = None,
        max_tokens: int = 4096,
        temperature: float = 0.7,
    ) -> str:
        """Generate chat completion.

        Args:
            messages: List of message dicts with 'role' and 'content'
            model: Model ID to address
            system_prompt: Optional system prompt to prepend
            max_tokens: Maximum tokens to generate (default: 4096)
            temperature: Sampling temperature (default: 0.7)

        Returns:
            Generated completion text

        Raises:
            httpx.HTTPStatusError: On HTTP errors
            ValueError: On a response without choices
        """
        chat_messages: list[ChatMessage] = []
        if system_prompt:
            chat_messages.append(ChatMessage(role="system", content=system_prompt))
        for msg in messages:
            chat_messages.append(ChatMessage(
                role=msg.get("role", "user"),
                content=msg.get("content", ""),
            ))

        request = ChatCompletionRequest(
            model=model,
            messages=chat_messages,
            temperature=temperature,
            max_tokens=max_tokens,
            stream=False,
        )

        logger.info(
            "Calling inference service: model=%s, messages=%d",
            model,
            len(chat_messages),
        )

        response = await self._get_client().post(
            _CHAT_COMPLETIONS_PATH,
            json=request.model_dump(),
        )
        response.raise_for_status()

        completion = ChatCompletionResponse.model_validate(response.json())
        if not completion.choices:
            raise ValueError("No completion choices returned")

        logger.info(
            "Inference complete: tokens=%s, model=%s",
            completion.usage.total_tokens if completion.usage else "unknown",
            completion.model,
        )
        return completion.choices[0].message.content


def create_inference_client(settings: Settings) -> InferenceServiceClient:
    """Create an inference client from application settings."""
    return InferenceServiceClient(
        base_url=settings.inference_base_url,
        timeout=settings.inference_timeout_seconds,
    )
