"""
Core data models for the PressNotifier system.
These are the universal types shared across all modules.

Repository entries are immutable snapshots. Anything that changes an entry
builds the next version with `Entry.with_field` and hands it back to the
store; nothing mutates a fetched entry in place.
"""
from __future__ import annotations

from enum import Enum
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field

# Every field value in the repository is keyed by this locale.
DEFAULT_LOCALE = "en-US"


# ──────────────────────────────────────────────────────────────
#  Enums
# ──────────────────────────────────────────────────────────────

class ContentType(str, Enum):
    CONFIGURATION = "configuration"
    MESSAGE = "message"
    USAGE_DATA = "usageData"


class ClickType(str, Enum):
    SINGLE = "SINGLE"
    DOUBLE = "DOUBLE"
    LONG = "LONG"


# ──────────────────────────────────────────────────────────────
#  Entry — a content repository record
# ──────────────────────────────────────────────────────────────

class Entry(BaseModel):
    """A repository record: content type id plus localized fields."""
    model_config = ConfigDict(frozen=True)

    id: str
    content_type_id: str
    fields: dict[str, dict[str, Any]] = {}
    version: Optional[int] = None             # optimistic-concurrency token

    def get(self, name: str, default: Any = None) -> Any:
        """Return the default-locale value of a field."""
        localized = self.fields.get(name)
        if not localized:
            return default
        return localized.get(DEFAULT_LOCALE, default)

    def with_field(self, name: str, value: Any) -> "Entry":
        """Return the next version of this entry with one field replaced."""
        fields = {k: dict(v) for k, v in self.fields.items()}
        fields[name] = {DEFAULT_LOCALE: value}
        return self.model_copy(update={"fields": fields})

    def is_type(self, content_type: ContentType | str) -> bool:
        if isinstance(content_type, ContentType):
            content_type = content_type.value
        return self.content_type_id == content_type


def localize(values: dict[str, Any]) -> dict[str, dict[str, Any]]:
    """Wrap plain field values in the default locale."""
    return {k: {DEFAULT_LOCALE: v} for k, v in values.items()}


def entries_of_type(entries: list[Entry], content_type: ContentType | str) -> list[Entry]:
    return [e for e in entries if e.is_type(content_type)]


# ──────────────────────────────────────────────────────────────
#  Derived views
# ──────────────────────────────────────────────────────────────

class MessageCandidate(BaseModel):
    """View over a `message` entry."""
    id: str
    text: str = ""
    order: Optional[int] = None
    usage_count: Optional[int] = None
    asset_ref: Optional[str] = None

    @classmethod
    def from_entry(cls, entry: Entry) -> "MessageCandidate":
        image = entry.get("image")
        asset_ref = None
        if isinstance(image, dict):
            asset_ref = (image.get("sys") or {}).get("id")
        return cls(
            id=entry.id,
            text=entry.get("message") or "",
            order=entry.get("order"),
            usage_count=entry.get("usage"),
            asset_ref=asset_ref,
        )


class UsageDailyRecord(BaseModel):
    """View over a `usageData` entry."""
    date: str
    device_id: str = ""
    press_count: int = 0

    @classmethod
    def from_entry(cls, entry: Entry) -> "UsageDailyRecord":
        return cls(
            date=entry.get("date", ""),
            device_id=entry.get("deviceSerialNumber", ""),
            press_count=entry.get("numberOfPresses", 0),
        )


class DeviceConfiguration(BaseModel):
    """View over a `configuration` entry."""
    device_id: str
    primary_channel: str
    test_channel: Optional[str] = None

    def channel_for(self, test: bool = False) -> str:
        if test and self.test_channel:
            return self.test_channel
        return self.primary_channel

    @classmethod
    def from_entry(cls, entry: Entry) -> "DeviceConfiguration":
        return cls(
            device_id=entry.get("deviceSerialNumber", ""),
            primary_channel=entry.get("slackChannel", ""),
            test_channel=entry.get("testChannel") or None,
        )


class Asset(BaseModel):
    url: str
    title: str


class SelectedMessage(BaseModel):
    entry_id: str
    text: str
    asset_ref: Optional[str] = None


# ──────────────────────────────────────────────────────────────
#  Invocation — inbound event and outcome
# ──────────────────────────────────────────────────────────────

class ButtonEvent(BaseModel):
    """A physical button press, as emitted by the device."""
    model_config = ConfigDict(populate_by_name=True)

    serial_number: str = Field(alias="serialNumber")
    battery_voltage: str = Field(default="", alias="batteryVoltage")   # informational only
    click_type: ClickType = Field(default=ClickType.SINGLE, alias="clickType")
    debug: bool = False
    test: bool = False


class InvocationResult(BaseModel):
    """Outcome of handling one button event."""
    ok: bool
    device_id: str
    press_count: Optional[int] = None
    channel: Optional[str] = None
    text: Optional[str] = None
    asset: Optional[Asset] = None
    delivery: dict[str, Any] = {}
    error: Optional[str] = None
    error_type: Optional[str] = None
