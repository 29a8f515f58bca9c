"""
Health check endpoints.
"""

from datetime import datetime, timezone
from typing import Any

from fastapi import APIRouter, Depends

from openklaw.api.deps import get_ollama_client
from openklaw.core.config import settings
from openklaw.llm.ollama_client import OllamaClient
from openklaw.stores.app_state import set_ollama_ready

router = APIRouter()


@router.get("/health")
async def health_check() -> dict[str, Any]:
    """Basic health check endpoint."""
    return {
        "status": "healthy",
        "app": settings.app_name,
        "environment": settings.app_env,
        "timestamp": datetime.now(timezone.utc).isoformat(),
    }


@router.get("/health/ready")
async def readiness_check(
    ollama: OllamaClient = Depends(get_ollama_client),
) -> dict[str, Any]:
    """
    Readiness check endpoint.
    Reports whether the local model server answers.
    """
    ollama_ready = await ollama.is_running()
    set_ollama_ready(ollama_ready)

    checks = {"app": True, "ollama": ollama_ready}

    return {
        "status": "ready" if all(checks.values()) else "not_ready",
        "checks": checks,
        "timestamp": datetime.now(timezone.utc).isoformat(),
    }
