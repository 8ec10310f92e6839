"""Chat delivery adapters."""
from __future__ import annotations

import structlog

from config.settings import ChannelConfig
from channels.base import (
    ChannelAdapter,
    ChannelError,
    ChannelMetrics,
    ImageAttachment,
)
from channels.slack_adapter import SlackAdapter
from channels.memory_adapter import MemoryAdapter, SentMessage

logger = structlog.get_logger()


def create_channel(config: ChannelConfig = None) -> ChannelAdapter:
    """Factory: create the delivery adapter named by `config.backend`."""
    config = config or ChannelConfig()
    if config.backend == "memory":
        adapter: ChannelAdapter = MemoryAdapter()
    elif config.backend == "slack":
        adapter = SlackAdapter(config)
    else:
        raise ValueError(f"Unknown channel backend: {config.backend}")
    logger.info("channel_created", backend=config.backend)
    return adapter


__all__ = [
    "ChannelAdapter", "ChannelError", "ChannelMetrics", "ImageAttachment",
    "SlackAdapter", "MemoryAdapter", "SentMessage", "create_channel",
]
