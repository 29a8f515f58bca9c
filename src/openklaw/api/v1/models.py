"""
Model listing endpoints.
"""

from typing import Any

from fastapi import APIRouter, Depends

from openklaw.api.deps import get_ollama_client, get_settings_store
from openklaw.core.constants import AVAILABLE_MODELS
from openklaw.core.exceptions import CompletionServiceError
from openklaw.core.logging import get_logger
from openklaw.llm.ollama_client import OllamaClient
from openklaw.stores.settings_store import SettingsStore

logger = get_logger(__name__)

router = APIRouter()


@router.get("/models")
async def list_models(
    ollama: OllamaClient = Depends(get_ollama_client),
    settings_store: SettingsStore = Depends(get_settings_store),
) -> dict[str, Any]:
    """
    Models installed in Ollama next to the recommended catalog.

    An unreachable server yields an empty ``installed`` list.
    """
    try:
        installed = await ollama.list_models()
    except CompletionServiceError as e:
        logger.warning("Could not list installed models", error=e.message)
        installed = []

    preferences = settings_store.get_settings()

    return {
        "current": preferences.model,
        "installed": installed,
        "available": AVAILABLE_MODELS,
        "custom": preferences.custom_models,
    }
