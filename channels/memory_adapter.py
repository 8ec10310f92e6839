"""
Memory Channel Adapter — Records messages instead of posting them.

Used for local runs (channel backend "memory") and in tests. Only the most
recent `max_sent` messages are kept.
"""
from __future__ import annotations

import uuid
import structlog
from dataclasses import dataclass
from typing import Any, Optional

from channels.base import ChannelAdapter, ImageAttachment

logger = structlog.get_logger()


@dataclass
class SentMessage:
    channel: str
    text: str
    attachment: Optional[ImageAttachment] = None


class MemoryAdapter(ChannelAdapter):
    name = "memory"

    def __init__(self, max_sent: int = 1000):
        super().__init__()
        self.max_sent = max_sent
        self.sent: list[SentMessage] = []

    async def _do_send(
        self, channel: str, text: str, attachment: Optional[ImageAttachment],
    ) -> dict[str, Any]:
        self.sent.append(SentMessage(channel, text, attachment))
        if len(self.sent) > self.max_sent:
            del self.sent[:-self.max_sent]
        msg_id = f"mem_{uuid.uuid4().hex[:12]}"
        logger.debug("memory_message_recorded", channel=channel, msg_id=msg_id)
        return {"status": "mock_sent", "channel": channel, "channel_message_id": msg_id}
