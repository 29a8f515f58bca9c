"""
Usage statistics persisted after every increment.
"""

import json
from datetime import datetime, timezone
from typing import Optional

from pydantic import BaseModel, Field

from openklaw.core.config import settings
from openklaw.core.logging import get_logger
from openklaw.stores.storage import JsonFileStorage

logger = get_logger(__name__)


def _now_iso() -> str:
    return datetime.now(timezone.utc).isoformat()


class UsageStats(BaseModel):
    """App usage counters."""

    total_chats: int = 0
    total_messages: int = 0
    hwp_processed: int = 0
    emails_generated: int = 0
    last_used: str = Field(default_factory=_now_iso)


class StatsStore:
    """
    Counter store. Every increment is load, bump one counter, save.

    Storage failures fall back to defaults on read and are ignored on write.
    """

    def __init__(
        self,
        storage: Optional[JsonFileStorage] = None,
        key: Optional[str] = None,
    ) -> None:
        self.storage = storage or JsonFileStorage()
        self.key = key or settings.storage.stats_key

    def load(self) -> UsageStats:
        try:
            saved = self.storage.get_item(self.key)
            if saved:
                return UsageStats.model_validate(
                    {**UsageStats().model_dump(), **json.loads(saved)}
                )
        except (OSError, ValueError, TypeError) as e:
            logger.warning("Failed to load usage stats", key=self.key, error=str(e))
        return UsageStats()

    def save(self, stats: UsageStats) -> UsageStats:
        """Stamp ``last_used`` and persist."""
        stamped = stats.model_copy(update={"last_used": _now_iso()})
        try:
            self.storage.set_item(self.key, stamped.model_dump_json())
        except OSError as e:
            logger.warning("Failed to save usage stats", key=self.key, error=str(e))
        return stamped

    def _increment(self, counter: str) -> UsageStats:
        stats = self.load()
        return self.save(stats.model_copy(update={counter: getattr(stats, counter) + 1}))

    def increment_chats(self) -> UsageStats:
        return self._increment("total_chats")

    def increment_messages(self) -> UsageStats:
        return self._increment("total_messages")

    def increment_hwp(self) -> UsageStats:
        return self._increment("hwp_processed")

    def increment_emails(self) -> UsageStats:
        return self._increment("emails_generated")
