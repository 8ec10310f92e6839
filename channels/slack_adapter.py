"""
Slack Channel Adapter — Slack Web API integration.

Posts via chat.postMessage with a bot token:
  POST {base_url}/chat.postMessage
  {"channel": "#general", "text": "...",
   "attachments": [{"fallback": "...", "image_url": "https://..."}]}

Slack answers HTTP 200 for most application errors and reports them in the
body as {"ok": false, "error": "channel_not_found"}; those are raised as
ChannelError just like transport failures.
"""
from __future__ import annotations

import structlog
from typing import Any, Optional

import httpx

from config.settings import ChannelConfig, get_settings
from channels.base import ChannelAdapter, ChannelError, ImageAttachment

logger = structlog.get_logger()


class SlackAdapter(ChannelAdapter):
    name = "slack"

    def __init__(self, config: ChannelConfig = None, transport: httpx.AsyncBaseTransport = None):
        super().__init__()
        self.config = config or get_settings().channel
        self.client: Optional[httpx.AsyncClient] = None
        self._transport = transport

    async def _get_client(self) -> httpx.AsyncClient:
        if self.client is None or self.client.is_closed:
            self.client = httpx.AsyncClient(
                base_url=self.config.base_url,
                headers={"Authorization": f"Bearer {self.config.token}"},
                timeout=self.config.timeout,
                transport=self._transport,
            )
        return self.client

    @staticmethod
    def build_payload(channel: str, text: str, attachment: Optional[ImageAttachment]) -> dict[str, Any]:
        payload: dict[str, Any] = {"channel": channel, "text": text}
        if attachment:
            payload["attachments"] = [{
                "fallback": attachment.fallback_text,
                "image_url": attachment.image_url,
            }]
        return payload

    async def _do_send(
        self, channel: str, text: str, attachment: Optional[ImageAttachment],
    ) -> dict[str, Any]:
        client = await self._get_client()
        try:
            response = await client.post(
                "/chat.postMessage",
                json=self.build_payload(channel, text, attachment),
            )
            response.raise_for_status()
        except httpx.HTTPError as e:
            raise ChannelError(f"Slack request failed: {e}", channel=channel) from e

        body = response.json()
        if not body.get("ok"):
            raise ChannelError(
                f"Slack rejected message: {body.get('error', 'unknown_error')}",
                channel=channel,
            )
        return {
            "status": "sent",
            "channel": body.get("channel", channel),
            "channel_message_id": body.get("ts", ""),
        }

    async def shutdown(self) -> None:
        if self.client:
            await self.client.aclose()
