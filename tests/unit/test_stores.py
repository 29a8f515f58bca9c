"""
Tests for observable state, preference and usage statistics stores.
"""

import json
from pathlib import Path

import pytest
from pydantic import ValidationError

from openklaw.core.constants import Theme
from openklaw.stores.app_state import app_state, set_current_model, set_ollama_ready
from openklaw.stores.observable import ObservableStore
from openklaw.stores.settings_store import AppSettings, SettingsStore
from openklaw.stores.stats_store import StatsStore, UsageStats
from openklaw.stores.storage import JsonFileStorage


class TestObservableStore:
    """Tests for ObservableStore."""

    def test_subscribe_receives_current_then_updates(self) -> None:
        store = ObservableStore(1)
        seen: list[int] = []

        unsubscribe = store.subscribe(seen.append)
        store.set(2)
        store.update(lambda v: v + 10)
        unsubscribe()
        store.set(99)

        assert seen == [1, 2, 12]
        assert store.get() == 99
        assert store.subscriber_count == 0

    def test_failing_subscriber_does_not_block_others(self) -> None:
        store = ObservableStore("a")
        seen: list[str] = []

        def broken(value: str) -> None:
            if value == "b":
                raise RuntimeError("boom")

        store.subscribe(broken)
        store.subscribe(seen.append)
        store.set("b")

        assert seen == ["a", "b"]

    def test_app_state_helpers(self) -> None:
        seen = []
        unsubscribe = app_state.subscribe(seen.append)
        try:
            set_ollama_ready(True)
            set_current_model("gemma2:2b")
        finally:
            unsubscribe()

        assert app_state.get().ollama_ready is True
        assert app_state.get().current_model == "gemma2:2b"
        assert len(seen) == 3


class TestJsonFileStorage:
    """Tests for JsonFileStorage."""

    def test_round_trip_and_remove(self, storage: JsonFileStorage) -> None:
        assert storage.get_item("k") is None

        storage.set_item("k", '{"a": 1}')
        assert storage.get_item("k") == '{"a": 1}'
        assert (storage.data_dir / "k.json").exists()

        storage.remove_item("k")
        assert storage.get_item("k") is None


class TestSettingsStore:
    """Tests for SettingsStore."""

    def test_defaults_when_nothing_stored(self, storage: JsonFileStorage) -> None:
        store = SettingsStore(storage, key="prefs")

        assert store.get_settings() == AppSettings()
        assert store.get_settings().model == "qwen2.5:3b-instruct"
        assert store.get_settings().theme == Theme.DARK

    def test_update_persists_and_notifies(self, storage: JsonFileStorage) -> None:
        store = SettingsStore(storage, key="prefs")
        seen: list[AppSettings] = []
        store.subscribe(seen.append)

        store.update_settings(model="llama3.2:3b", theme="light")

        stored = json.loads(storage.get_item("prefs"))
        assert stored["model"] == "llama3.2:3b"
        assert stored["theme"] == "light"
        assert [s.model for s in seen] == ["qwen2.5:3b-instruct", "llama3.2:3b"]

        reloaded = SettingsStore(storage, key="prefs")
        assert reloaded.get_settings().model == "llama3.2:3b"
        assert reloaded.get_settings().theme == Theme.LIGHT

    def test_partial_stored_record_is_merged_with_defaults(self, storage: JsonFileStorage) -> None:
        storage.set_item("prefs", json.dumps({"language": "en"}))

        settings = SettingsStore(storage, key="prefs").get_settings()

        assert settings.language == "en"
        assert settings.send_on_enter is True

    def test_corrupt_record_falls_back_to_defaults(self, storage: JsonFileStorage) -> None:
        storage.set_item("prefs", "{not json")

        assert SettingsStore(storage, key="prefs").get_settings() == AppSettings()

    def test_invalid_update_is_rejected(self, storage: JsonFileStorage) -> None:
        store = SettingsStore(storage, key="prefs")

        with pytest.raises(ValidationError):
            store.update_settings(language="fr")

        assert store.get_settings().language == "ko"
        assert storage.get_item("prefs") is None

    def test_custom_models(self, storage: JsonFileStorage) -> None:
        store = SettingsStore(storage, key="prefs")

        store.add_custom_model("my-model")
        store.add_custom_model("my-model")
        store.add_custom_model("other")
        assert store.get_settings().custom_models == ["my-model", "other"]

        store.remove_custom_model("my-model")
        assert store.get_settings().custom_models == ["other"]
        assert json.loads(storage.get_item("prefs"))["custom_models"] == ["other"]

    def test_reset(self, storage: JsonFileStorage) -> None:
        store = SettingsStore(storage, key="prefs")
        store.update_settings(accent_color="#3b82f6")

        store.reset_settings()

        assert store.get_settings() == AppSettings()
        assert json.loads(storage.get_item("prefs"))["accent_color"] == "#14b8a6"

    def test_write_failure_is_ignored(self, tmp_path: Path) -> None:
        blocker = tmp_path / "blocker"
        blocker.write_text("file, not a directory")
        store = SettingsStore(JsonFileStorage(blocker / "data"), key="prefs")

        store.update_settings(model="phi3:mini")

        assert store.get_settings().model == "phi3:mini"


class TestStatsStore:
    """Tests for StatsStore."""

    def test_increments_persist_immediately(self, storage: JsonFileStorage) -> None:
        store = StatsStore(storage, key="stats")

        store.increment_messages()
        store.increment_messages()
        store.increment_chats()
        store.increment_hwp()
        store.increment_emails()

        stats = StatsStore(storage, key="stats").load()
        assert stats.total_messages == 2
        assert stats.total_chats == 1
        assert stats.hwp_processed == 1
        assert stats.emails_generated == 1

    def test_save_stamps_last_used(self, storage: JsonFileStorage) -> None:
        store = StatsStore(storage, key="stats")

        saved = store.save(UsageStats(last_used="2000-01-01T00:00:00+00:00"))

        assert saved.last_used != "2000-01-01T00:00:00+00:00"
        assert json.loads(storage.get_item("stats"))["last_used"] == saved.last_used

    def test_corrupt_record_falls_back_to_defaults(self, storage: JsonFileStorage) -> None:
        storage.set_item("stats", "[1, 2")

        stats = StatsStore(storage, key="stats").increment_chats()

        assert stats.total_chats == 1
        assert stats.total_messages == 0

    def test_unreadable_storage_is_ignored(self, tmp_path: Path) -> None:
        blocker = tmp_path / "blocker"
        blocker.write_text("file, not a directory")
        store = StatsStore(JsonFileStorage(blocker / "data"), key="stats")

        assert store.increment_messages().total_messages == 1
        assert store.load().total_messages == 0
