"""
FastAPI Application — HTTP surface for button presses.

Provides:
- POST /api/v1/events/press: handle one button event
- GET  /health: backends and delivery metrics

A failed press still answers 200 with `ok: false` in the body, so that a
hosting environment does not re-deliver the event and double-count it.
"""
from __future__ import annotations

import structlog
from contextlib import asynccontextmanager
from datetime import datetime, timezone

# Load .env before any config is read
from dotenv import load_dotenv
load_dotenv()

from fastapi import FastAPI, Request

from config.settings import get_settings
from channels import ChannelAdapter, create_channel
from core.orchestrator import Orchestrator
from database.store_base import BaseEntryStore
from database.store_factory import create_store
from models.schemas import ButtonEvent, InvocationResult

logger = structlog.get_logger()


def create_app(store: BaseEntryStore = None, channel: ChannelAdapter = None) -> FastAPI:
    """Build the app. Collaborators default to the configured backends."""

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        settings = get_settings()
        app.state.store = store or create_store(settings.repository)
        app.state.channel = channel or create_channel(settings.channel)
        app.state.orchestrator = Orchestrator(app.state.store, app.state.channel)
        logger.info("press_notifier_started",
                    store=type(app.state.store).__name__,
                    channel=app.state.channel.name)
        yield
        await app.state.store.close()
        await app.state.channel.shutdown()
        logger.info("press_notifier_stopped")

    app = FastAPI(
        title="PressNotifier API",
        description="Button press to Slack notifier",
        version="1.0.0",
        lifespan=lifespan,
    )

    @app.get("/health")
    async def health(request: Request):
        return {
            "status": "healthy",
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "store": type(request.app.state.store).__name__,
            "channel": await request.app.state.channel.health_check(),
        }

    @app.post("/api/v1/events/press", response_model=InvocationResult)
    async def press(event: ButtonEvent, request: Request):
        return await request.app.state.orchestrator.handle(event)

    return app


app = create_app()


# ══════════════════════════════════════════════════════════════
#  Entry Point
# ══════════════════════════════════════════════════════════════

if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host="0.0.0.0", port=8000)
