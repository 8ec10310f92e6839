"""
Contentful Entry Store — Content Management API backend.

Talks to https://api.contentful.com with a management token:
  GET  /spaces/{space}/environments/{env}/entries           (paginated)
  POST /spaces/{space}/environments/{env}/entries           (X-Contentful-Content-Type)
  PUT  /spaces/{space}/environments/{env}/entries/{id}      (X-Contentful-Version)
  PUT  /spaces/{space}/environments/{env}/entries/{id}/published
  GET  /spaces/{space}/environments/{env}/assets/{id}

The version header is sent because the API requires it, taken from the
snapshot being written. Calls are not retried; HTTP failures surface as
RepositoryError.
"""
from __future__ import annotations

import structlog
from typing import Any, Optional

import httpx

from config.settings import RepositoryConfig, get_settings
from core.errors import RepositoryError
from database.store_base import BaseEntryStore
from models.schemas import DEFAULT_LOCALE, Asset, ContentType, Entry, localize

logger = structlog.get_logger()

CONTENT_TYPE_HEADER = "application/vnd.contentful.management.v1+json"


def entry_from_payload(payload: dict[str, Any]) -> Entry:
    """Convert a CMA entry payload into an Entry snapshot."""
    sys = payload.get("sys", {})
    content_type = sys.get("contentType", {}).get("sys", {}).get("id", "")
    return Entry(
        id=sys.get("id", ""),
        content_type_id=content_type,
        fields=payload.get("fields") or {},
        version=sys.get("version"),
    )


def asset_from_payload(payload: dict[str, Any]) -> Optional[Asset]:
    """
    Convert a CMA asset payload into an Asset.
    Assets without a title or a file URL are treated as missing.
    """
    fields = payload.get("fields") or {}
    title = (fields.get("title") or {}).get(DEFAULT_LOCALE)
    if not title:
        return None

    file = (fields.get("file") or {}).get(DEFAULT_LOCALE) or {}
    url = file.get("url")
    if not url:
        return None

    # CMA file URLs are protocol-relative ("//images.ctfassets.net/...")
    if url.startswith("//"):
        url = f"https:{url}"
    elif "//" in url:
        url = f"https://{url.split('//', 1)[1]}"
    return Asset(url=url, title=title)


class ContentfulEntryStore(BaseEntryStore):
    """Entry store backed by a Contentful space."""

    def __init__(self, config: RepositoryConfig = None, transport: httpx.AsyncBaseTransport = None):
        self.config = config or get_settings().repository
        self.client: Optional[httpx.AsyncClient] = None
        self._transport = transport

    async def _get_client(self) -> httpx.AsyncClient:
        if self.client is None or self.client.is_closed:
            headers = {
                "Authorization": f"Bearer {self.config.access_token}",
                "Content-Type": CONTENT_TYPE_HEADER,
            }
            self.client = httpx.AsyncClient(
                base_url=self.config.base_url,
                headers=headers,
                timeout=self.config.timeout,
                transport=self._transport,
            )
        return self.client

    def _path(self, suffix: str) -> str:
        return (
            f"/spaces/{self.config.space_id}"
            f"/environments/{self.config.environment}/{suffix}"
        )

    async def _request(self, method: str, suffix: str, **kwargs) -> dict[str, Any]:
        client = await self._get_client()
        try:
            response = await client.request(method, self._path(suffix), **kwargs)
            response.raise_for_status()
        except httpx.HTTPStatusError as e:
            logger.error("contentful_request_failed", method=method, path=suffix,
                         status=e.response.status_code)
            raise RepositoryError(
                f"Contentful {method} {suffix} failed with {e.response.status_code}",
                status_code=e.response.status_code,
            ) from e
        except httpx.HTTPError as e:
            logger.error("contentful_request_failed", method=method, path=suffix, error=str(e))
            raise RepositoryError(f"Contentful {method} {suffix} failed: {e}") from e
        return response.json()

    # ── Entries ───────────────────────────────────────────

    async def get_entries(self, content_type: ContentType | str | None = None) -> list[Entry]:
        if isinstance(content_type, ContentType):
            content_type = content_type.value

        entries: list[Entry] = []
        skip = 0
        while True:
            params: dict[str, Any] = {"skip": skip, "limit": self.config.page_size}
            if content_type:
                params["content_type"] = content_type
            page = await self._request("GET", "entries", params=params)
            items = page.get("items", [])
            entries.extend(entry_from_payload(item) for item in items)
            skip += len(items)
            if not items or skip >= page.get("total", 0):
                break

        logger.debug("contentful_entries_fetched", count=len(entries), content_type=content_type)
        return entries

    async def create_entry(self, content_type: ContentType | str, fields: dict[str, Any]) -> Entry:
        if isinstance(content_type, ContentType):
            content_type = content_type.value
        payload = await self._request(
            "POST", "entries",
            headers={"X-Contentful-Content-Type": content_type},
            json={"fields": localize(fields)},
        )
        entry = entry_from_payload(payload)
        logger.info("contentful_entry_created", entry_id=entry.id, content_type=content_type)
        return entry

    async def update_entry(self, entry: Entry) -> Entry:
        payload = await self._request(
            "PUT", f"entries/{entry.id}",
            headers={"X-Contentful-Version": str(entry.version or 0)},
            json={"fields": entry.fields},
        )
        return entry_from_payload(payload)

    async def publish_entry(self, entry: Entry) -> Entry:
        payload = await self._request(
            "PUT", f"entries/{entry.id}/published",
            headers={"X-Contentful-Version": str(entry.version or 0)},
        )
        return entry_from_payload(payload)

    # ── Assets ────────────────────────────────────────────

    async def get_asset(self, asset_id: str) -> Optional[Asset]:
        payload = await self._request("GET", f"assets/{asset_id}")
        return asset_from_payload(payload)

    async def close(self):
        if self.client:
            await self.client.aclose()
