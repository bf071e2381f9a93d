"""Lightweight async client for the TargetProcess REST API (v1).

This module provides:
- `ApiClient`: an async client with sane timeouts/connection limits and a
  static Basic authorization header
- `ApiClient.get_resource_page`: one paginated GET decoded into a `ResourcePage`

It implements `IPageProvider` for the backup use case.
"""

from __future__ import annotations

import logging
from typing import Any

import httpx
from pydantic import ValidationError

from tpbackup.core.config import ClientConfig
from tpbackup.core.errors import PageDecodeError
from tpbackup.core.models import ResourcePage

logger = logging.getLogger(__name__)


class ApiClient:
    """Minimal async API client.

    Parameters
    ----------
    config : ClientConfig
        Host and credentials. The endpoint is validated on construction.
    transport : httpx.AsyncBaseTransport | None
        Optional transport override (tests use `httpx.MockTransport`).
    """

    def __init__(
        self,
        config: ClientConfig,
        *,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self.endpoint = config.endpoint
        self.client = httpx.AsyncClient(
            base_url=self.endpoint,
            auth=httpx.BasicAuth(config.user, config.password),
            timeout=httpx.Timeout(
                connect=config.timeout_s,
                read=config.timeout_s,
                write=config.timeout_s,
                pool=max(30, config.timeout_s * 3),
            ),
            limits=httpx.Limits(
                max_connections=config.max_connections,
                max_keepalive_connections=max(1, config.max_connections // 2),
            ),
            http2=True,
            transport=transport,
        )

    async def __aenter__(self) -> ApiClient:
        return self

    async def __aexit__(self, *exc_info: Any) -> None:
        await self.aclose()

    async def get(self, path: str, **params: Any) -> httpx.Response:
        """GET `path` relative to the endpoint with ``format=json`` and extra query params."""
        r = await self.client.get(path, params={"format": "json", **params})
        r.raise_for_status()
        return r

    async def get_resource_page(self, resource: str, take: int, skip: int) -> ResourcePage:
        """Fetch `take` items of `resource` starting at offset `skip`."""
        logger.debug("GET %s take=%d skip=%d", resource, take, skip)
        r = await self.get(resource, take=take, skip=skip)
        try:
            payload = r.json()
        except ValueError as e:
            raise PageDecodeError(resource, skip, f"body is not JSON: {e}") from e
        try:
            return ResourcePage.model_validate(payload)
        except ValidationError as e:
            raise PageDecodeError(resource, skip, f"unexpected envelope: {e.error_count()} error(s)") from e

    async def aclose(self) -> None:
        """Close the underlying HTTP client."""
        await self.client.aclose()
