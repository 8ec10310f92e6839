"""
Orchestrator — Handles one button press end to end.

Flow (one cooperative script, every remote call a suspension point):
  fetch all entries once
    → record today's press for the device   (skipped in debug: count = 1)
    → select the least-used message for that count and bump its usage
    → resolve the device's Slack channels
    → resolve the message image            (best-effort, never fatal)
    → deliver to the primary channel, or to the test channel for test runs

The first failure aborts the remaining steps. handle() never raises: it
logs the failure and returns it as a failed InvocationResult, and the
caller decides what to do with it.
"""
from __future__ import annotations

import random
import time
import structlog
from datetime import datetime
from typing import Callable, Optional

from channels.base import ChannelAdapter, ImageAttachment
from core.configuration import resolve_config
from core.selection import MessageSelector
from core.sequencer import run_script
from core.usage import UsageTracker
from database.store_base import BaseEntryStore
from models.schemas import Asset, ButtonEvent, InvocationResult

logger = structlog.get_logger()


class Orchestrator:
    def __init__(
        self,
        store: BaseEntryStore,
        channel: ChannelAdapter,
        rng: Optional[random.Random] = None,
        clock: Callable[[], datetime] = None,
    ):
        self.store = store
        self.channel = channel
        self.usage = UsageTracker(store, clock=clock)
        self.selector = MessageSelector(store, rng=rng)

    async def handle(self, event: ButtonEvent) -> InvocationResult:
        start = time.monotonic()
        device_id = event.serial_number
        logger.info("press_received", device_id=device_id, click_type=event.click_type.value,
                    battery_voltage=event.battery_voltage, debug=event.debug, test=event.test)
        try:
            result = await run_script(self._press, event)
        except Exception as e:
            logger.error("press_failed", device_id=device_id,
                         error_type=type(e).__name__, error=str(e))
            return InvocationResult(
                ok=False,
                device_id=device_id,
                error=str(e),
                error_type=type(e).__name__,
            )

        logger.info("press_handled", device_id=device_id, channel=result.channel,
                    press_count=result.press_count,
                    total_ms=round((time.monotonic() - start) * 1000, 1))
        return result

    def _press(self, event: ButtonEvent):
        device_id = event.serial_number

        entries = yield self.store.get_entries()

        if event.debug:
            press_count = 1
        else:
            press_count = yield self.usage.record_press(device_id, entries)

        selected = yield self.selector.select_message(entries, press_count)
        config = yield resolve_config(entries, device_id)

        asset = None
        if selected.asset_ref:
            asset = yield self.resolve_asset(selected.asset_ref)

        channel = config.channel_for(event.test)
        text = selected.text
        if event.test:
            text = f"{config.primary_channel}: {text}"

        attachment = ImageAttachment(asset.title, asset.url) if asset else None
        delivery = yield self.channel.send(channel, text, attachment)

        return InvocationResult(
            ok=True,
            device_id=device_id,
            press_count=press_count,
            channel=channel,
            text=text,
            asset=asset,
            delivery=delivery,
        )

    async def resolve_asset(self, asset_id: str) -> Optional[Asset]:
        """Look up a message image. The image isn't critical: any failure means no image."""
        try:
            return await self.store.get_asset(asset_id)
        except Exception as e:
            logger.warning("asset_resolve_failed", asset_id=asset_id, error=str(e))
            return None
