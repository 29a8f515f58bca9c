"""
API dependencies for dependency injection.
"""

from typing import Optional

from openklaw.llm.ollama_client import OllamaClient
from openklaw.llm.streaming import CompletionStreamConsumer
from openklaw.services.report_service import ReportGenerator
from openklaw.stores.settings_store import SettingsStore
from openklaw.stores.stats_store import StatsStore
from openklaw.stores.storage import JsonFileStorage
from openklaw.templates.registry import TemplateRegistry, get_template_registry


class ServiceContainer:
    """
    Container for all application services.
    Provides singleton instances of services.
    """

    _instance: Optional["ServiceContainer"] = None

    def __init__(self) -> None:
        self._initialized = False

    @classmethod
    def get_instance(cls) -> "ServiceContainer":
        """Get the singleton instance."""
        if cls._instance is None:
            cls._instance = cls()
        return cls._instance

    def initialize(self) -> None:
        """Initialize all services."""
        if self._initialized:
            return

        self._template_registry = get_template_registry()
        self._ollama_client = OllamaClient()

        storage = JsonFileStorage()
        self._settings_store = SettingsStore(storage)
        self._stats_store = StatsStore(storage)

        self._initialized = True

    async def close(self) -> None:
        if self._initialized:
            await self._ollama_client.close()

    @property
    def template_registry(self) -> TemplateRegistry:
        self.initialize()
        return self._template_registry

    @property
    def ollama_client(self) -> OllamaClient:
        self.initialize()
        return self._ollama_client

    @property
    def settings_store(self) -> SettingsStore:
        self.initialize()
        return self._settings_store

    @property
    def stats_store(self) -> StatsStore:
        self.initialize()
        return self._stats_store

    def report_generator(self) -> ReportGenerator:
        """
        A generator bound to the user's currently selected model.

        Built per request so a model change in preferences applies at once.
        """
        return ReportGenerator(
            registry=self.template_registry,
            consumer=CompletionStreamConsumer(self.ollama_client),
            model=self.settings_store.get_settings().model,
        )


# Singleton container instance
container = ServiceContainer.get_instance()


# Dependency functions for FastAPI
def get_registry() -> TemplateRegistry:
    return container.template_registry


def get_ollama_client() -> OllamaClient:
    return container.ollama_client


def get_report_generator() -> ReportGenerator:
    return container.report_generator()


def get_settings_store() -> SettingsStore:
    return container.settings_store


def get_stats_store() -> StatsStore:
    return container.stats_store
