"""Configuration Resolver — Maps a device serial number to its Slack channels."""
from __future__ import annotations

import structlog

from core.errors import ConfigurationNotFoundError
from models.schemas import ContentType, DeviceConfiguration, Entry, entries_of_type

logger = structlog.get_logger()


def resolve_config(entries: list[Entry], device_id: str) -> DeviceConfiguration:
    """Return the first configuration entry for `device_id`."""
    for entry in entries_of_type(entries, ContentType.CONFIGURATION):
        if entry.get("deviceSerialNumber") == device_id:
            config = DeviceConfiguration.from_entry(entry)
            logger.debug("configuration_resolved", device_id=device_id,
                         channel=config.primary_channel, test_channel=config.test_channel)
            return config
    raise ConfigurationNotFoundError(device_id)
