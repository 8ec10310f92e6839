"""
Serverless entry point — one invocation per button press.

    {"serialNumber": "G030MD025452LHCJ", "batteryVoltage": "1737mV",
     "clickType": "SINGLE"}

Collaborators are built from configuration for each invocation and closed
before returning. The returned dict is the InvocationResult; failures are
reported in it rather than raised, so the platform does not retry the
press.
"""
from __future__ import annotations

import asyncio
import structlog
from typing import Any

from dotenv import load_dotenv
from pydantic import ValidationError

from config.settings import get_settings
from channels import create_channel
from core.orchestrator import Orchestrator
from database.store_factory import create_store
from models.schemas import ButtonEvent, InvocationResult

logger = structlog.get_logger()


async def handle_event(event: ButtonEvent) -> InvocationResult:
    store = channel = None
    try:
        settings = get_settings()
        store = create_store(settings.repository)
        channel = create_channel(settings.channel)
        return await Orchestrator(store, channel).handle(event)
    finally:
        if store is not None:
            await store.close()
        if channel is not None:
            await channel.shutdown()


def _failed(event: Any, error: Exception) -> dict[str, Any]:
    device_id = event.get("serialNumber", "") if isinstance(event, dict) else ""
    return InvocationResult(
        ok=False,
        device_id=str(device_id),
        error=str(error),
        error_type=type(error).__name__,
    ).model_dump(mode="json")


def handler(event: dict[str, Any], context: Any = None) -> dict[str, Any]:
    load_dotenv()
    try:
        button_event = ButtonEvent.model_validate(event)
    except ValidationError as e:
        logger.error("invalid_event", error=str(e))
        return _failed(event, e)

    try:
        result = asyncio.run(handle_event(button_event))
    except Exception as e:
        logger.error("invocation_failed", device_id=button_event.serial_number,
                     error=str(e), error_type=type(e).__name__)
        return _failed(event, e)
    return result.model_dump(mode="json")
