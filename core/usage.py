"""
Usage Tracker — Per-device "presses today" counter.

One usageData entry per (UTC date, device). The counter is found-or-created
and incremented on every press. The read-modify-write against the
repository is not atomic: two concurrent presses for the same device can
both create a record, or both write the same incremented value. Last write
wins.
"""
from __future__ import annotations

import structlog
from datetime import datetime, timezone
from typing import Callable, Optional

from database.store_base import BaseEntryStore
from models.schemas import ContentType, Entry, UsageDailyRecord, entries_of_type

logger = structlog.get_logger()


def utc_date(now: Optional[datetime] = None) -> str:
    """Format the UTC calendar day of `now` as YYYY-MM-DD."""
    if now is None:
        now = datetime.now(timezone.utc)
    elif now.tzinfo is not None:
        now = now.astimezone(timezone.utc)
    return now.strftime("%Y-%m-%d")


class UsageTracker:
    def __init__(self, store: BaseEntryStore, clock: Callable[[], datetime] = None):
        self.store = store
        self._clock = clock or (lambda: datetime.now(timezone.utc))

    def today(self) -> str:
        return utc_date(self._clock())

    def todays_records(self, entries: list[Entry], device_id: str, date: str) -> list[Entry]:
        return [
            e for e in entries_of_type(entries, ContentType.USAGE_DATA)
            if e.get("date") == date and e.get("deviceSerialNumber") == device_id
        ]

    async def record_press(self, device_id: str, entries: list[Entry] = None) -> int:
        """
        Increment today's press count for `device_id` and return it.

        `entries` is the invocation's pre-fetched snapshot; without it the
        usage entries are fetched from the store.
        """
        if entries is None:
            entries = await self.store.get_entries(ContentType.USAGE_DATA)

        today = self.today()
        matches = self.todays_records(entries, device_id, today)
        if not matches:
            entry = await self.store.create_and_publish(ContentType.USAGE_DATA, {
                "dateTitle": today,
                "date": today,
                "numberOfPresses": 1,
                "deviceSerialNumber": device_id,
            })
        else:
            current = matches[0]
            presses = (current.get("numberOfPresses") or 0) + 1
            entry = await self.store.save_and_publish(current.with_field("numberOfPresses", presses))

        record = UsageDailyRecord.from_entry(entry)
        logger.info("press_recorded", device_id=device_id, date=record.date,
                    press_count=record.press_count, created=not matches)
        return record.press_count
