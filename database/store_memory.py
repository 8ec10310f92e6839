"""
InMemoryEntryStore — Dict-backed entry store for development and testing.

Features:
  - Zero dependencies (no network, no Contentful space)
  - Full interface compatibility with ContentfulEntryStore
  - Versions bump on every update/publish, like the real repository
  - Optional JSON seed file so a local run has messages to pick from
  - All data lost on process restart

Best for: local development, unit tests, quick prototyping.
"""
from __future__ import annotations

import json
import uuid
import structlog
from pathlib import Path
from typing import Any, Optional

from database.store_base import BaseEntryStore
from models.schemas import Asset, ContentType, Entry, localize

logger = structlog.get_logger()


def _new_id() -> str:
    return uuid.uuid4().hex[:16]


class InMemoryEntryStore(BaseEntryStore):
    """
    In-memory store with the same interface as ContentfulEntryStore.
    Entries are kept in insertion order, which is the order get_entries returns.
    """

    def __init__(self, entries: list[Entry] = None, assets: dict[str, Asset] = None):
        self._entries: dict[str, Entry] = {}          # id → latest snapshot
        self._assets: dict[str, Asset] = dict(assets or {})
        self._published: dict[str, int] = {}          # id → published version
        for entry in entries or []:
            self._entries[entry.id] = entry
        logger.info("inmemory_store_initialized", entries=len(self._entries))

    # ── Entries ───────────────────────────────────────────

    async def get_entries(self, content_type: ContentType | str | None = None) -> list[Entry]:
        entries = list(self._entries.values())
        if content_type is not None:
            entries = [e for e in entries if e.is_type(content_type)]
        return entries

    async def create_entry(self, content_type: ContentType | str, fields: dict[str, Any]) -> Entry:
        if isinstance(content_type, ContentType):
            content_type = content_type.value
        entry = Entry(
            id=_new_id(),
            content_type_id=content_type,
            fields=localize(fields),
            version=1,
        )
        self._entries[entry.id] = entry
        logger.debug("inmemory_entry_created", entry_id=entry.id, content_type=content_type)
        return entry

    async def update_entry(self, entry: Entry) -> Entry:
        current = self._entries.get(entry.id)
        version = (current.version if current else entry.version) or 0
        updated = entry.model_copy(update={"version": version + 1})
        self._entries[entry.id] = updated
        return updated

    async def publish_entry(self, entry: Entry) -> Entry:
        current = self._entries.get(entry.id, entry)
        published = current.model_copy(update={"version": (current.version or 0) + 1})
        self._entries[entry.id] = published
        self._published[entry.id] = published.version
        return published

    # ── Assets ────────────────────────────────────────────

    async def get_asset(self, asset_id: str) -> Optional[Asset]:
        if asset_id not in self._assets:
            raise KeyError(f"Unknown asset {asset_id}")
        return self._assets[asset_id]

    def add_asset(self, asset_id: str, asset: Asset) -> None:
        self._assets[asset_id] = asset

    # ── Seeding ───────────────────────────────────────────

    @classmethod
    def from_file(cls, path: str) -> "InMemoryEntryStore":
        """
        Load entries and assets from a JSON seed file:

            {"entries": [{"id": "...", "content_type_id": "message",
                          "fields": {"message": "Hello"}}],
             "assets": {"img1": {"url": "...", "title": "..."}}}

        Field values in the seed are plain; they are localized on load.
        """
        raw = json.loads(Path(path).read_text())
        entries = [
            Entry(
                id=item.get("id") or _new_id(),
                content_type_id=item["content_type_id"],
                fields=localize(item.get("fields", {})),
                version=item.get("version", 1),
            )
            for item in raw.get("entries", [])
        ]
        assets = {k: Asset(**v) for k, v in raw.get("assets", {}).items()}
        logger.info("inmemory_store_seeded", path=path, entries=len(entries), assets=len(assets))
        return cls(entries=entries, assets=assets)

    # ── Stats (for debugging) ─────────────────────────────

    def is_published(self, entry_id: str) -> bool:
        entry = self._entries.get(entry_id)
        return entry is not None and self._published.get(entry_id) == entry.version

    def stats(self) -> dict[str, int]:
        counts: dict[str, int] = {}
        for entry in self._entries.values():
            counts[entry.content_type_id] = counts.get(entry.content_type_id, 0) + 1
        counts["assets"] = len(self._assets)
        return counts
