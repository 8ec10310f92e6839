"""
Channel Adapters — Base infrastructure for chat delivery.

Provides:
- ChannelError: structured delivery error
- ImageAttachment: optional image shown under a message
- ChannelMetrics: per-adapter send/fail/latency tracking
- ChannelAdapter: abstract base wrapping every send with logging and metrics

Sends are attempted once. A failed send raises ChannelError and is left to
the caller; there is no transport-level retry.
"""
from __future__ import annotations

import abc
import time
import structlog
from dataclasses import dataclass
from typing import Any, Optional

logger = structlog.get_logger()


# ══════════════════════════════════════════════════════════════
#  ERRORS
# ══════════════════════════════════════════════════════════════

class ChannelError(Exception):
    """Base exception for all channel operations."""

    def __init__(self, message: str, channel: str = ""):
        self.channel = channel
        super().__init__(message)


# ══════════════════════════════════════════════════════════════
#  ATTACHMENT
# ══════════════════════════════════════════════════════════════

@dataclass(frozen=True)
class ImageAttachment:
    fallback_text: str
    image_url: str


# ══════════════════════════════════════════════════════════════
#  CHANNEL METRICS
# ══════════════════════════════════════════════════════════════

class ChannelMetrics:
    """Tracks per-adapter send, failure, and latency metrics."""

    def __init__(self, adapter: str):
        self.adapter = adapter
        self.messages_sent: int = 0
        self.messages_failed: int = 0
        self._latencies: list[float] = []
        self._errors: list[str] = []

    def record_send(self, latency_ms: float = 0.0):
        self.messages_sent += 1
        if latency_ms > 0:
            self._latencies.append(latency_ms)

    def record_failure(self, error: str = ""):
        self.messages_failed += 1
        if error:
            self._errors.append(error)

    @property
    def avg_latency_ms(self) -> float:
        return sum(self._latencies) / len(self._latencies) if self._latencies else 0.0

    @property
    def failure_rate(self) -> float:
        total = self.messages_sent + self.messages_failed
        return self.messages_failed / total if total > 0 else 0.0

    def to_dict(self) -> dict[str, Any]:
        return {
            "adapter": self.adapter,
            "sent": self.messages_sent,
            "failed": self.messages_failed,
            "avg_latency_ms": round(self.avg_latency_ms, 1),
            "failure_rate": round(self.failure_rate, 4),
            "recent_errors": self._errors[-10:],
        }


# ══════════════════════════════════════════════════════════════
#  CHANNEL ADAPTER — Abstract Base
# ══════════════════════════════════════════════════════════════

class ChannelAdapter(abc.ABC):
    """
    Base class for all chat delivery adapters.

    Subclasses implement _do_send. The base class wraps every send with
    latency measurement, metrics, and structured logging.
    """

    name: str = "base"

    def __init__(self):
        self.metrics = ChannelMetrics(self.name)

    # ── Abstract hooks ────────────────────────────────────────

    @abc.abstractmethod
    async def _do_send(
        self, channel: str, text: str, attachment: Optional[ImageAttachment],
    ) -> dict[str, Any]:
        ...

    # ── Public send ───────────────────────────────────────────

    async def send(
        self, channel: str, text: str, attachment: Optional[ImageAttachment] = None,
    ) -> dict[str, Any]:
        start = time.monotonic()
        try:
            result = await self._do_send(channel, text, attachment)
        except ChannelError as e:
            self.metrics.record_failure(str(e))
            logger.error("message_send_failed", adapter=self.name, channel=channel, error=str(e))
            raise
        except Exception as e:
            self.metrics.record_failure(str(e))
            logger.error("message_send_failed", adapter=self.name, channel=channel, error=str(e))
            raise ChannelError(str(e), channel=channel) from e

        latency = (time.monotonic() - start) * 1000
        self.metrics.record_send(latency)
        result["latency_ms"] = round(latency, 1)
        logger.info("message_sent", adapter=self.name, channel=channel,
                    has_attachment=attachment is not None, latency_ms=result["latency_ms"])
        return result

    # ── Health ────────────────────────────────────────────────

    async def health_check(self) -> dict[str, Any]:
        return {"adapter": self.name, "metrics": self.metrics.to_dict()}

    async def shutdown(self) -> None:
        pass
