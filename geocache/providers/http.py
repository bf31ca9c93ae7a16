"""Shared JSON request helper for upstream providers."""

from __future__ import annotations

import asyncio
from collections.abc import Mapping
from typing import Any

import httpx
import structlog

from geocache.core.exceptions import MalformedPayloadError, UpstreamError

logger = structlog.get_logger(__name__)

DEFAULT_TIMEOUT = 10.0
RETRY_ATTEMPTS = 3


async def request_json(
    client: httpx.AsyncClient,
    method: str,
    url: str,
    *,
    provider: str,
    params: Mapping[str, Any] | None = None,
    json: Any = None,
    headers: Mapping[str, str] | None = None,
    timeout: float = DEFAULT_TIMEOUT,
) -> Any:
    """Execute an HTTP request and decode the JSON body, backing off on 429.

    Raises ``UpstreamError`` for transport failures and non-2xx statuses and
    ``MalformedPayloadError`` when the body is not JSON.
    """

    backoff = 0.1
    attempts = 0
    while True:
        attempts += 1
        try:
            response = await client.request(
                method,
                url,
                params=params,
                json=json,
                headers=headers,
                timeout=timeout,
            )
        except httpx.RequestError as exc:
            raise UpstreamError(provider, f"request failed: {exc}") from exc

        if response.status_code == 429 and attempts < RETRY_ATTEMPTS:
            logger.info("upstream_rate_limited", provider=provider, attempt=attempts)
            await asyncio.sleep(backoff)
            backoff *= 2
            continue

        if not response.is_success:
            raise UpstreamError(provider, f"status {response.status_code}")

        try:
            return response.json()
        except ValueError as exc:
            raise MalformedPayloadError(provider, "response is not JSON") from exc


def require_mapping(payload: Any, provider: str, *keys: str) -> Mapping[str, Any]:
    """Return ``payload`` as a mapping, checking that each of ``keys`` is present."""

    if not isinstance(payload, Mapping):
        raise MalformedPayloadError(provider, "expected a JSON object")
    missing = [key for key in keys if key not in payload]
    if missing:
        raise MalformedPayloadError(provider, f"missing keys: {', '.join(missing)}")
    return payload
