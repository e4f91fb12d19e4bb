# src/mungori/store/remote.py
"""HTTP client for the managed database and object storage service.

Rows go through the PostgREST-style endpoint under ``/rest/v1`` and binary
objects through ``/storage/v1``. Every request carries the anonymous API key;
the client never sends anything that identifies the person using it.
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Mapping, Sequence
from dataclasses import dataclass
from typing import Any
from urllib.parse import quote

import httpx

from mungori.core.settings import Settings, settings

from .base import ObjectExistsError, Row, RowNotFoundError, StoreDisabledError, StoreError

# Configure logger for this module
logger = logging.getLogger(__name__)

# HTTP status codes
HTTP_BAD_REQUEST = 400
HTTP_CONFLICT = 409

REST_PREFIX = "/rest/v1"
STORAGE_PREFIX = "/storage/v1"


@dataclass(frozen=True)
class RemoteStoreConfig:
    """Immutable connection details for the remote store."""

    base_url: str
    api_key: str
    timeout_seconds: float


def load_remote_config(config: Settings | None = None) -> RemoteStoreConfig:
    """Build the connection details from application settings."""
    config = config or settings
    return RemoteStoreConfig(
        base_url=(config.supabase_url or "").rstrip("/"),
        api_key=config.supabase_anon_key or "",
        timeout_seconds=float(config.http_timeout_seconds),
    )


class RemoteStore:
    """Store backed by the remote service over HTTP."""

    remote = True

    def __init__(
        self,
        config: RemoteStoreConfig | None = None,
        *,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self.config = config or load_remote_config()
        self._transport = transport
        self._client: httpx.AsyncClient | None = None
        self._client_lock = asyncio.Lock()

    async def _ensure_client(self) -> httpx.AsyncClient:
        if not (self.config.base_url and self.config.api_key):
            raise StoreDisabledError("Remote store credentials are not configured")

        async with self._client_lock:
            if self._client is None:
                self._client = httpx.AsyncClient(
                    base_url=self.config.base_url,
                    timeout=httpx.Timeout(self.config.timeout_seconds),
                    transport=self._transport,
                    headers={
                        "apikey": self.config.api_key,
                        "Authorization": f"Bearer {self.config.api_key}",
                    },
                )

        return self._client

    @dataclass
    class RequestParams:
        """Parameters for HTTP requests."""

        method: str
        path: str
        json_data: Any | None = None
        content: bytes | None = None
        params: Mapping[str, Any] | None = None
        headers: dict[str, str] | None = None

    async def _request(self, params: RequestParams) -> httpx.Response:
        client = await self._ensure_client()
        endpoint = f"{params.method} {params.path}"

        try:
            response = await client.request(
                params.method,
                params.path,
                json=params.json_data,
                content=params.content,
                params=params.params,
                headers=params.headers,
            )
        except httpx.HTTPError as exc:
            raise StoreError(f"{endpoint} failed: {exc}") from exc

        logger.debug("%s -> %d", endpoint, response.status_code)

        if response.status_code == HTTP_CONFLICT:
            raise ObjectExistsError(f"{endpoint} conflicts with an existing object")
        if response.status_code >= HTTP_BAD_REQUEST:
            raise StoreError(
                f"{endpoint} responded with {response.status_code}: {response.text[:200]}"
            )
        return response

    @staticmethod
    def _rows(response: httpx.Response) -> list[Row]:
        try:
            payload = response.json()
        except ValueError as exc:
            raise StoreError("Store returned a non-JSON body") from exc
        if isinstance(payload, dict):
            return [payload]
        if payload is None:
            return []
        if not isinstance(payload, list) or not all(isinstance(row, dict) for row in payload):
            raise StoreError("Store returned a body that is not a list of rows")
        return payload

    async def select(
        self,
        table: str,
        *,
        filters: Mapping[str, Any] | None = None,
        order_by: str = "created_at",
        descending: bool = True,
    ) -> list[Row]:
        """Return rows of ``table`` matching every equality filter."""
        query: dict[str, Any] = {
            "select": "*",
            "order": f"{order_by}.{'desc' if descending else 'asc'}",
        }
        for column, value in (filters or {}).items():
            query[column] = f"eq.{value}"

        response = await self._request(
            self.RequestParams(method="GET", path=f"{REST_PREFIX}/{table}", params=query)
        )
        return self._rows(response)

    async def insert(self, table: str, rows: Sequence[Mapping[str, Any]]) -> list[Row]:
        """Insert rows and return them with server-assigned ids and timestamps."""
        response = await self._request(
            self.RequestParams(
                method="POST",
                path=f"{REST_PREFIX}/{table}",
                json_data=[dict(row) for row in rows],
                headers={"Prefer": "return=representation"},
            )
        )
        return self._rows(response)

    async def update(self, table: str, row_id: str, patch: Mapping[str, Any]) -> Row:
        """Apply ``patch`` to one row and return the updated row."""
        response = await self._request(
            self.RequestParams(
                method="PATCH",
                path=f"{REST_PREFIX}/{table}",
                json_data=dict(patch),
                params={"id": f"eq.{row_id}"},
                headers={"Prefer": "return=representation"},
            )
        )
        rows = self._rows(response)
        if not rows:
            raise RowNotFoundError(f"No row {row_id} in {table}")
        return rows[0]

    async def delete(self, table: str, row_id: str) -> None:
        """Delete one row by id."""
        await self._request(
            self.RequestParams(
                method="DELETE",
                path=f"{REST_PREFIX}/{table}",
                params={"id": f"eq.{row_id}"},
            )
        )

    async def upload(
        self,
        bucket: str,
        path: str,
        data: bytes,
        *,
        content_type: str = "application/octet-stream",
    ) -> None:
        """Upload an object; an existing object at ``path`` is never replaced."""
        await self._request(
            self.RequestParams(
                method="POST",
                path=f"{STORAGE_PREFIX}/object/{bucket}/{quote(path)}",
                content=data,
                headers={"Content-Type": content_type, "x-upsert": "false"},
            )
        )

    async def remove(self, bucket: str, paths: Sequence[str]) -> None:
        """Remove objects from ``bucket``."""
        if not paths:
            return
        await self._request(
            self.RequestParams(
                method="DELETE",
                path=f"{STORAGE_PREFIX}/object/{bucket}",
                json_data={"prefixes": list(paths)},
            )
        )

    def get_public_url(self, bucket: str, path: str) -> str:
        return f"{self.config.base_url}{STORAGE_PREFIX}/object/public/{bucket}/{quote(path)}"

    async def aclose(self) -> None:
        """Close the underlying HTTP client."""
        if self._client is not None:
            await self._client.aclose()
            self._client = None
