"""Health check API routes.

GET /health       - Service status with one dependency entry per participant
GET /health/ready - Ready when at least one participant can take prompts
GET /health/live  - Process liveness
"""

from __future__ import annotations

from datetime import UTC, datetime
from enum import Enum

from fastapi import APIRouter, Request
from pydantic import BaseModel, Field

from src.reconciliation.orchestrator import ReconciliationOrchestrator


# =============================================================================
# Router Configuration
# =============================================================================

router = APIRouter(
    prefix="/health",
    tags=["Health"],
)


# =============================================================================
# Enums and Constants
# =============================================================================

class HealthStatus(str, Enum):
    """Health status enum."""

    HEALTHY = "healthy"
    DEGRADED = "degraded"
    UNHEALTHY = "unhealthy"


class DependencyStatus(str, Enum):
    """Dependency status enum."""

    UP = "up"
    DOWN = "down"


SERVICE_NAME = "consensus-bridge"
SERVICE_VERSION = "0.1.0"


# =============================================================================
# Response Models
# =============================================================================

class DependencyHealth(BaseModel):
    """Health status for a single participant."""

    name: str = Field(..., description="Participant name")
    status: DependencyStatus = Field(..., description="Current status")
    message: str | None = Field(default=None, description="Optional status message")


class HealthResponse(BaseModel):
    """Response model for health check.

    Attributes:
        status: Overall service status
        service: Service name
        version: Service version
        timestamp: Check timestamp (ISO format)
        uptime_seconds: Service uptime in seconds
        dependencies: Readiness of every registered participant
    """

    status: HealthStatus = Field(default=HealthStatus.HEALTHY)
    service: str = Field(default=SERVICE_NAME)
    version: str = Field(default=SERVICE_VERSION)
    timestamp: str = Field(default_factory=lambda: datetime.now(UTC).isoformat())
    uptime_seconds: float | None = Field(default=None)
    dependencies: list[DependencyHealth] = Field(default_factory=list)


class ReadinessResponse(BaseModel):
    """Response model for readiness check."""

    ready: bool = Field(default=True)
    checks: dict[str, bool] = Field(default_factory=dict)


class LivenessResponse(BaseModel):
    """Response model for liveness check."""

    alive: bool = Field(default=True)
    timestamp: str = Field(default_factory=lambda: datetime.now(UTC).isoformat())


# =============================================================================
# Service Start Time
# =============================================================================

_service_start_time: datetime | None = None


def set_service_start_time(start_time: datetime | None = None) -> None:
    """Set the service start time for uptime calculation."""
    global _service_start_time
    _service_start_time = start_time or datetime.now(UTC)


def get_uptime_seconds() -> float | None:
    """Get service uptime in seconds, or None if start time not set."""
    if _service_start_time is None:
        return None
    return (datetime.now(UTC) - _service_start_time).total_seconds()


# =============================================================================
# Participant Checks
# =============================================================================

def check_participants(orchestrator: ReconciliationOrchestrator) -> list[DependencyHealth]:
    """Readiness of every registered participant, in registration order."""
    checks = []
    for name in orchestrator.registered_names:
        participant = orchestrator.get(name)
        ready = participant is not None and participant.is_ready()
        checks.append(
            DependencyHealth(
                name=name.value,
                status=DependencyStatus.UP if ready else DependencyStatus.DOWN,
                message=None if ready else "Participant not ready",
            )
        )
    return checks


def calculate_overall_status(dependencies: list[DependencyHealth]) -> HealthStatus:
    """Healthy when every participant is up, unhealthy when none is."""
    if not dependencies:
        return HealthStatus.UNHEALTHY

    up_count = sum(1 for d in dependencies if d.status == DependencyStatus.UP)
    if up_count == len(dependencies):
        return HealthStatus.HEALTHY
    if up_count > 0:
        return HealthStatus.DEGRADED
    return HealthStatus.UNHEALTHY


# =============================================================================
# API Endpoints
# =============================================================================

@router.get(
    "",
    response_model=HealthResponse,
    summary="Health check",
)
async def health_check(request: Request) -> HealthResponse:
    """Service health with per-participant readiness."""
    dependencies = check_participants(request.app.state.orchestrator)
    return HealthResponse(
        status=calculate_overall_status(dependencies),
        uptime_seconds=get_uptime_seconds(),
        dependencies=dependencies,
    )


@router.get(
    "/ready",
    response_model=ReadinessResponse,
    summary="Readiness check",
)
async def readiness_check(request: Request) -> ReadinessResponse:
    """Ready when at least one participant can take prompts."""
    checks = {
        dependency.name: dependency.status == DependencyStatus.UP
        for dependency in check_participants(request.app.state.orchestrator)
    }
    return ReadinessResponse(ready=any(checks.values()), checks=checks)


@router.get(
    "/live",
    response_model=LivenessResponse,
    summary="Liveness check",
)
async def liveness_check() -> LivenessResponse:
    """Process liveness."""
    return LivenessResponse()
