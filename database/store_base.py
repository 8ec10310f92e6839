"""
Abstract Entry Store — Interface for all content repository backends.

Implementations:
  - ContentfulEntryStore (Contentful Content Management API over HTTP)
  - InMemoryEntryStore   (dict-based, single-process, no persistence)

Every call returns fresh immutable Entry snapshots. Callers never mutate a
returned entry; they build the next version and pass it to update_entry.
No compare-and-swap is performed on the version token: last write wins.
"""
from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any, Optional

from models.schemas import Asset, ContentType, Entry


class BaseEntryStore(ABC):
    """Interface that all entry store backends must implement."""

    # ── Entries ───────────────────────────────────────────────

    @abstractmethod
    async def get_entries(self, content_type: ContentType | str | None = None) -> list[Entry]:
        """Fetch all entries, optionally restricted to one content type."""
        ...

    @abstractmethod
    async def create_entry(self, content_type: ContentType | str, fields: dict[str, Any]) -> Entry:
        """Create an entry from plain (unlocalized) field values."""
        ...

    @abstractmethod
    async def update_entry(self, entry: Entry) -> Entry:
        ...

    @abstractmethod
    async def publish_entry(self, entry: Entry) -> Entry:
        ...

    # ── Assets ────────────────────────────────────────────────

    @abstractmethod
    async def get_asset(self, asset_id: str) -> Optional[Asset]:
        ...

    # ── Lifecycle ─────────────────────────────────────────────

    async def close(self) -> None:
        pass

    async def save_and_publish(self, entry: Entry) -> Entry:
        return await self.publish_entry(await self.update_entry(entry))

    async def create_and_publish(self, content_type: ContentType | str, fields: dict[str, Any]) -> Entry:
        return await self.publish_entry(await self.create_entry(content_type, fields))
