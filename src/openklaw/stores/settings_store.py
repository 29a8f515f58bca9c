"""
User preference store.
Loaded once at startup and written back on every change.
"""

import json
from typing import Any, Callable, Optional

from pydantic import BaseModel, Field

from openklaw.core.config import settings
from openklaw.core.constants import Theme
from openklaw.core.logging import get_logger
from openklaw.stores.observable import ObservableStore
from openklaw.stores.storage import JsonFileStorage

logger = get_logger(__name__)


class Shortcuts(BaseModel):
    """Global keyboard shortcuts."""

    toggle_app: str = "Cmd+Shift+O"
    focus_input: str = "Cmd+/"
    new_chat: str = "Cmd+N"


class AppSettings(BaseModel):
    """User-level preferences."""

    # Model
    model: str = Field(default="qwen2.5:3b-instruct")
    custom_models: list[str] = Field(default_factory=list)

    # Theme
    theme: Theme = Field(default=Theme.DARK)
    accent_color: str = Field(default="#14b8a6")

    shortcuts: Shortcuts = Field(default_factory=Shortcuts)

    # Data
    data_path: str = Field(default="~/.openklaw")
    auto_save: bool = Field(default=True)

    language: str = Field(default="ko", pattern="^(ko|en)$")
    send_on_enter: bool = Field(default=True)


class SettingsStore:
    """
    Observable wrapper around ``AppSettings`` persisted under one key.

    Reads and writes are best-effort: a missing or corrupt record yields
    defaults, and a failed write is logged and otherwise ignored.
    """

    def __init__(
        self,
        storage: Optional[JsonFileStorage] = None,
        key: Optional[str] = None,
    ) -> None:
        """
        Initialize the store and load persisted preferences.

        Args:
            storage: Key-value storage (defaults to the configured data dir)
            key: Namespace key (defaults to settings.storage.settings_key)
        """
        self.storage = storage or JsonFileStorage()
        self.key = key or settings.storage.settings_key
        self._store: ObservableStore[AppSettings] = ObservableStore(self._load())

    def _load(self) -> AppSettings:
        try:
            stored = self.storage.get_item(self.key)
            if stored:
                merged = {**AppSettings().model_dump(), **json.loads(stored)}
                return AppSettings.model_validate(merged)
        except (OSError, ValueError, TypeError) as e:
            logger.warning("Failed to load settings", key=self.key, error=str(e))
        return AppSettings()

    def _persist(self, value: AppSettings) -> None:
        try:
            self.storage.set_item(self.key, value.model_dump_json())
        except OSError as e:
            logger.warning("Failed to save settings", key=self.key, error=str(e))

    def _apply(self, fn: Callable[[AppSettings], AppSettings]) -> AppSettings:
        def persisting(current: AppSettings) -> AppSettings:
            updated = fn(current)
            if updated is not current:
                self._persist(updated)
            return updated

        return self._store.update(persisting)

    def subscribe(self, callback: Callable[[AppSettings], None]) -> Callable[[], None]:
        return self._store.subscribe(callback)

    def get_settings(self) -> AppSettings:
        return self._store.get()

    def update_settings(self, **partial: Any) -> AppSettings:
        """Merge ``partial`` into the current settings and persist."""
        return self._apply(
            lambda current: AppSettings.model_validate({**current.model_dump(), **partial})
        )

    def reset_settings(self) -> AppSettings:
        defaults = AppSettings()
        self._persist(defaults)
        self._store.set(defaults)
        return defaults

    def add_custom_model(self, model_name: str) -> AppSettings:
        """Add a model id to the custom list unless it is already there."""

        def add(current: AppSettings) -> AppSettings:
            if model_name in current.custom_models:
                return current
            return current.model_copy(
                update={"custom_models": [*current.custom_models, model_name]}
            )

        return self._apply(add)

    def remove_custom_model(self, model_name: str) -> AppSettings:
        return self._apply(
            lambda current: current.model_copy(
                update={"custom_models": [m for m in current.custom_models if m != model_name]}
            )
        )
