"""
Main entry point for the consensus-bridge service.

Creates the FastAPI application instance for uvicorn:

    uvicorn src.main:app --port 3210
"""

import asyncio
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from src.api.error_handlers import register_error_handlers
from src.api.handler import BridgeRequestHandler
from src.api.routes.bridge import router as bridge_router
from src.api.routes.health import router as health_router
from src.api.routes.health import set_service_start_time
from src.clients.inference_service import InferenceServiceClient, create_inference_client
from src.core.config import Settings, get_settings
from src.core.logging import configure_logging, get_logger
from src.participants.inference_participant import InferenceParticipant
from src.reconciliation.consensus import ConsensusConfig
from src.reconciliation.models import ParticipantName
from src.reconciliation.orchestrator import OrchestratorConfig, ReconciliationOrchestrator


# Configure structured logging on module load
configure_logging()
logger = get_logger(__name__)


def build_orchestrator_config(settings: Settings) -> OrchestratorConfig:
    """Translate settings into the orchestrator's run configuration."""
    return OrchestratorConfig(
        participant_timeout_seconds=settings.participant_timeout_seconds,
        enable_critique=settings.enable_critique,
        min_responses=settings.min_responses,
        consensus=ConsensusConfig(
            reference_participant=ParticipantName(settings.reference_participant),
        ),
    )


def build_participants(
    settings: Settings,
    client: InferenceServiceClient,
) -> list[InferenceParticipant]:
    """One inference participant per configured participant model."""
    known = {name.value for name in ParticipantName}
    participants = []
    for name, model in settings.participant_models.items():
        if name not in known:
            logger.warning("Ignoring unknown participant in configuration", participant=name)
            continue
        participants.append(
            InferenceParticipant(
                ParticipantName(name),
                model=model,
                client=client,
                max_retries=settings.participant_max_retries,
                retry_delay_seconds=settings.participant_retry_delay_seconds,
            )
        )
    return participants


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Application lifespan manager.

    On startup: start every participant that supports it
    On shutdown: close participants, abandoned calls and the HTTP client
    """
    settings = get_settings()
    orchestrator: ReconciliationOrchestrator = app.state.orchestrator
    logger.info("Starting consensus-bridge service", port=settings.port)

    set_service_start_time()

    participants = [orchestrator.get(name) for name in orchestrator.registered_names]
    startable = [p for p in participants if hasattr(p, "start")]
    if startable:
        results = await asyncio.gather(
            *(p.start() for p in startable),
            return_exceptions=True,
        )
        for participant, result in zip(startable, results):
            if isinstance(result, Exception):
                logger.error(
                    "Participant failed to start",
                    participant=participant.name.value,
                    error=str(result),
                )
            else:
                logger.info(
                    "Participant started",
                    participant=participant.name.value,
                    ready=bool(result),
                )

    yield

    logger.info("Shutting down consensus-bridge service")
    for participant in participants:
        if hasattr(participant, "close"):
            await participant.close()
    await orchestrator.aclose()

    client: InferenceServiceClient | None = getattr(app.state, "inference_client", None)
    if client is not None:
        await client.close()
        logger.info("Inference client closed")


def create_app(orchestrator: ReconciliationOrchestrator | None = None) -> FastAPI:
    """Create and configure the FastAPI application.

    Args:
        orchestrator: Pre-built orchestrator; when omitted one is built from
            settings with an inference participant per configured model

    Registers:
    - bridge_router: POST /v1/bridge/requests, WS /v1/bridge/ws
    - health_router: GET /health, /health/ready, /health/live
    """
    app = FastAPI(
        title="Consensus Bridge",
        description="Multi-model coding proposals reconciled into editor edits",
        version="0.1.0",
        docs_url="/docs",
        redoc_url="/redoc",
        lifespan=lifespan,
    )

    if orchestrator is None:
        settings = get_settings()
        client = create_inference_client(settings)
        orchestrator = ReconciliationOrchestrator(
            build_participants(settings, client),
            config=build_orchestrator_config(settings),
        )
        app.state.inference_client = client

    app.state.orchestrator = orchestrator
    app.state.request_handler = BridgeRequestHandler(orchestrator)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    register_error_handlers(app)

    app.include_router(bridge_router)
    app.include_router(health_router)

    return app


# Create application instance
app = create_app()
