"""
Message Selector — Least-usage message selection.

Selection runs in four phases:
  1. Pool: messages whose `order` equals the press count; if there are
     none, the default pool (no order, or order 0). Only messages with
     text are eligible.
  2. Reduce: keep the least-used candidates. A message that was never
     used outranks any message that was.
  3. Pick one of them uniformly at random.
  4. Commit: bump its usage by one, update and publish the entry.

The usage commit is a read-modify-write like the daily counter: two
concurrent presses may pick and bump the same message. Last write wins.
"""
from __future__ import annotations

import random
import structlog
from typing import Optional

from core.errors import NoEligibleMessageError
from database.store_base import BaseEntryStore
from models.schemas import ContentType, Entry, MessageCandidate, SelectedMessage, entries_of_type

logger = structlog.get_logger()


def candidate_pool(entries: list[Entry], press_count: int) -> list[Entry]:
    """Return the message entries eligible for `press_count`."""
    messages = [
        e for e in entries_of_type(entries, ContentType.MESSAGE)
        if e.get("message")
    ]

    ordered = [e for e in messages if e.get("order") and e.get("order") == press_count]
    if ordered:
        return ordered

    default = [e for e in messages if not e.get("order")]
    if not default:
        raise NoEligibleMessageError(press_count)
    return default


def least_used(pool: list[Entry]) -> list[Entry]:
    """
    Reduce `pool` to the candidates sharing the lowest usage count.
    A missing usage count ranks below every number, including 0.
    """
    retained: list[Entry] = []
    for entry in pool:
        usage = entry.get("usage")
        if not retained:
            retained = [entry]
            continue

        lowest = retained[0].get("usage")
        if usage is None:
            if lowest is None:
                retained.append(entry)
            else:
                retained = [entry]
        elif lowest is None or usage > lowest:
            continue
        elif usage < lowest:
            retained = [entry]
        else:
            retained.append(entry)
    return retained


class MessageSelector:
    def __init__(self, store: BaseEntryStore, rng: Optional[random.Random] = None):
        self.store = store
        self._rng = rng or random.Random()

    def choose(self, entries: list[Entry], press_count: int) -> Entry:
        """Phases 1-3: pick the entry to deliver without persisting anything."""
        pool = candidate_pool(entries, press_count)
        lowest = least_used(pool)
        chosen = self._rng.choice(lowest)
        logger.debug("message_chosen", press_count=press_count, pool=len(pool),
                     least_used=len(lowest), entry_id=chosen.id)
        return chosen

    async def select_message(self, entries: list[Entry], press_count: int) -> SelectedMessage:
        chosen = self.choose(entries, press_count)

        usage = (chosen.get("usage") or 0) + 1
        published = await self.store.save_and_publish(chosen.with_field("usage", usage))

        candidate = MessageCandidate.from_entry(published)
        logger.info("message_selected", entry_id=candidate.id,
                    press_count=press_count, usage=candidate.usage_count)
        return SelectedMessage(
            entry_id=candidate.id,
            text=candidate.text,
            asset_ref=candidate.asset_ref,
        )
