"""API routes module for the consensus-bridge service.

This module exports all API routers for registration in main.py.
"""

from src.api.routes.bridge import router as bridge_router
from src.api.routes.health import router as health_router


__all__ = [
    "bridge_router",
    "health_router",
]
