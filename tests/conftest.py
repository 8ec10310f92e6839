"""Shared test fixtures for PressNotifier."""
import random
import pytest
from datetime import datetime, timezone
from typing import Any

from models.schemas import Asset, Entry, localize
from database.store_memory import InMemoryEntryStore
from channels.memory_adapter import MemoryAdapter

DEVICE = "G030MD025452LHCJ"
TODAY = "2024-03-07"
FIXED_NOW = datetime(2024, 3, 7, 9, 30, tzinfo=timezone.utc)


def make_entry(entry_id: str, content_type: str, version: int = 1, **fields: Any) -> Entry:
    return Entry(id=entry_id, content_type_id=content_type, fields=localize(fields), version=version)


def message(entry_id: str, text: str = "", **fields: Any) -> Entry:
    if text:
        fields["message"] = text
    return make_entry(entry_id, "message", **fields)


def configuration(entry_id: str, device: str = DEVICE, channel: str = "#general", **fields: Any) -> Entry:
    return make_entry(entry_id, "configuration", deviceSerialNumber=device, slackChannel=channel, **fields)


def usage(entry_id: str, date: str = TODAY, device: str = DEVICE, presses: int = 1) -> Entry:
    return make_entry(entry_id, "usageData", date=date, dateTitle=date,
                      deviceSerialNumber=device, numberOfPresses=presses)


def image_link(asset_id: str) -> dict:
    return {"sys": {"type": "Link", "linkType": "Asset", "id": asset_id}}


@pytest.fixture
def fixed_clock():
    return lambda: FIXED_NOW


@pytest.fixture
def rng() -> random.Random:
    return random.Random(1234)


@pytest.fixture
def channel() -> MemoryAdapter:
    return MemoryAdapter()


@pytest.fixture
def sample_entries() -> list[Entry]:
    """A realistic space: one device, a default pool, and order-specific messages."""
    return [
        configuration("cfg-1", channel="#office", testChannel="#office-test"),
        message("msg-default-1", "Someone pressed the button!"),
        message("msg-default-2", "Button pressed again", order=0, usage=2),
        message("msg-first", "First press today", order=1),
        message("msg-fifth", "Fifth time, really?", order=5, image=image_link("img-1")),
        message("msg-empty", order=1),
    ]


@pytest.fixture
def store(sample_entries) -> InMemoryEntryStore:
    return InMemoryEntryStore(
        entries=sample_entries,
        assets={"img-1": Asset(url="https://images.example.com/cat.png", title="Cat")},
    )
