"""
Tests for chat delivery adapters.

Coverage:
  Base:    metrics, error wrapping
  Slack:   payload shape, attachment, ok=false, transport errors
  Memory:  recording
  Factory: backend selection
"""
import json
import pytest
import httpx

from config.settings import ChannelConfig
from channels import create_channel
from channels.base import ChannelError, ChannelMetrics, ImageAttachment
from channels.memory_adapter import MemoryAdapter
from channels.slack_adapter import SlackAdapter


# ══════════════════════════════════════════════════════════════
#  BASE — Metrics
# ══════════════════════════════════════════════════════════════

class TestChannelMetrics:
    def test_record_and_query(self):
        m = ChannelMetrics("slack")
        m.record_send(100.0)
        m.record_send(200.0)
        m.record_failure("channel_not_found")
        assert m.messages_sent == 2
        assert m.messages_failed == 1
        assert m.avg_latency_ms == 150.0
        assert 0.3 < m.failure_rate < 0.4
        d = m.to_dict()
        assert d["sent"] == 2
        assert d["recent_errors"] == ["channel_not_found"]

    def test_empty(self):
        m = ChannelMetrics("memory")
        assert m.avg_latency_ms == 0.0
        assert m.failure_rate == 0.0


# ══════════════════════════════════════════════════════════════
#  MEMORY ADAPTER
# ══════════════════════════════════════════════════════════════

class TestMemoryAdapter:
    @pytest.mark.asyncio
    async def test_records_message(self):
        adapter = MemoryAdapter()
        attachment = ImageAttachment(fallback_text="Cat", image_url="https://x/cat.png")

        result = await adapter.send("#office", "Hello", attachment)

        assert result["status"] == "mock_sent"
        assert result["channel_message_id"].startswith("mem_")
        assert "latency_ms" in result
        assert adapter.sent[0].channel == "#office"
        assert adapter.sent[0].attachment == attachment
        assert adapter.metrics.messages_sent == 1

    @pytest.mark.asyncio
    async def test_unexpected_error_wrapped(self):
        adapter = MemoryAdapter()

        async def explode(channel, text, attachment):
            raise RuntimeError("disk full")

        adapter._do_send = explode
        with pytest.raises(ChannelError, match="disk full") as exc_info:
            await adapter.send("#office", "Hello")
        assert exc_info.value.channel == "#office"
        assert adapter.metrics.messages_failed == 1

    def test_channel_error_fields(self):
        error = ChannelError("not_in_channel", channel="#office")
        assert str(error) == "not_in_channel"
        assert error.channel == "#office"
        assert not hasattr(error, "retryable")
        with pytest.raises(TypeError):
            ChannelError("not_in_channel", "#office", True)

    @pytest.mark.asyncio
    async def test_keeps_only_recent_messages(self):
        adapter = MemoryAdapter(max_sent=3)
        for i in range(5):
            await adapter.send("#office", f"press {i}")

        assert [m.text for m in adapter.sent] == ["press 2", "press 3", "press 4"]
        assert adapter.metrics.messages_sent == 5

    @pytest.mark.asyncio
    async def test_health_check(self):
        adapter = MemoryAdapter()
        await adapter.send("#a", "x")
        health = await adapter.health_check()
        assert health["adapter"] == "memory"
        assert health["metrics"]["sent"] == 1


# ══════════════════════════════════════════════════════════════
#  SLACK ADAPTER
# ══════════════════════════════════════════════════════════════

def make_slack(handler) -> SlackAdapter:
    config = ChannelConfig(token="xoxb-test")
    return SlackAdapter(config, transport=httpx.MockTransport(handler))


class TestSlackAdapter:
    @pytest.mark.asyncio
    async def test_posts_message(self):
        seen = []

        def handler(request):
            seen.append(request)
            return httpx.Response(200, json={"ok": True, "channel": "C123", "ts": "1700000000.0001"})

        adapter = make_slack(handler)
        result = await adapter.send("#office", "Hello")

        request = seen[0]
        assert request.url == "https://slack.com/api/chat.postMessage"
        assert request.headers["Authorization"] == "Bearer xoxb-test"
        assert json.loads(request.content) == {"channel": "#office", "text": "Hello"}
        assert result["status"] == "sent"
        assert result["channel_message_id"] == "1700000000.0001"
        await adapter.shutdown()

    @pytest.mark.asyncio
    async def test_attachment_payload(self):
        seen = []

        def handler(request):
            seen.append(json.loads(request.content))
            return httpx.Response(200, json={"ok": True})

        adapter = make_slack(handler)
        await adapter.send("#office", "Look", ImageAttachment("Cat", "https://x/cat.png"))

        assert seen[0]["attachments"] == [{"fallback": "Cat", "image_url": "https://x/cat.png"}]

    @pytest.mark.asyncio
    async def test_not_ok_raises(self):
        adapter = make_slack(lambda r: httpx.Response(200, json={"ok": False, "error": "channel_not_found"}))
        with pytest.raises(ChannelError, match="channel_not_found"):
            await adapter.send("#nowhere", "Hello")
        assert adapter.metrics.messages_failed == 1

    @pytest.mark.asyncio
    async def test_http_error_raises(self):
        adapter = make_slack(lambda r: httpx.Response(500))
        with pytest.raises(ChannelError, match="Slack request failed"):
            await adapter.send("#office", "Hello")

    @pytest.mark.asyncio
    async def test_sent_once(self):
        calls = []

        def handler(request):
            calls.append(request)
            return httpx.Response(503)

        adapter = make_slack(handler)
        with pytest.raises(ChannelError):
            await adapter.send("#office", "Hello")
        assert len(calls) == 1


# ══════════════════════════════════════════════════════════════
#  FACTORY
# ══════════════════════════════════════════════════════════════

class TestCreateChannel:
    def test_memory(self):
        assert isinstance(create_channel(ChannelConfig(backend="memory")), MemoryAdapter)

    def test_slack(self):
        assert isinstance(create_channel(ChannelConfig(backend="slack", token="t")), SlackAdapter)

    def test_unknown(self):
        with pytest.raises(ValueError):
            create_channel(ChannelConfig(backend="carrier-pigeon"))
