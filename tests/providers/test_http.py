from __future__ import annotations

import httpx
import pytest

from geocache.core.exceptions import MalformedPayloadError, UpstreamError
from geocache.providers import http as http_mod
from geocache.providers.http import request_json, require_mapping


@pytest.fixture(autouse=True)
def no_backoff_sleep(monkeypatch):
    async def _sleep(_seconds):
        return None

    monkeypatch.setattr(http_mod.asyncio, "sleep", _sleep)


def _client(handler) -> httpx.AsyncClient:
    return httpx.AsyncClient(transport=httpx.MockTransport(handler))


@pytest.mark.asyncio
async def test_retries_rate_limited_requests():
    attempts = 0

    def handler(request: httpx.Request) -> httpx.Response:
        nonlocal attempts
        attempts += 1
        if attempts < 3:
            return httpx.Response(429)
        return httpx.Response(200, json={"ok": True})

    async with _client(handler) as client:
        data = await request_json(client, "GET", "http://upstream/x", provider="test")
    assert data == {"ok": True}
    assert attempts == 3


@pytest.mark.asyncio
async def test_persistent_rate_limit_is_an_upstream_error():
    async with _client(lambda request: httpx.Response(429)) as client:
        with pytest.raises(UpstreamError) as excinfo:
            await request_json(client, "GET", "http://upstream/x", provider="test")
    assert excinfo.value.provider == "test"
    assert not isinstance(excinfo.value, MalformedPayloadError)


@pytest.mark.asyncio
async def test_server_error_is_an_upstream_error():
    async with _client(lambda request: httpx.Response(503)) as client:
        with pytest.raises(UpstreamError, match="status 503"):
            await request_json(client, "GET", "http://upstream/x", provider="test")


@pytest.mark.asyncio
async def test_transport_error_is_an_upstream_error():
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectTimeout("timed out", request=request)

    async with _client(handler) as client:
        with pytest.raises(UpstreamError, match="request failed"):
            await request_json(client, "GET", "http://upstream/x", provider="test")


@pytest.mark.asyncio
async def test_non_json_body_is_malformed():
    async with _client(lambda request: httpx.Response(200, text="<html>")) as client:
        with pytest.raises(MalformedPayloadError):
            await request_json(client, "GET", "http://upstream/x", provider="test")


def test_require_mapping():
    assert require_mapping({"a": 1, "b": 2}, "test", "a") == {"a": 1, "b": 2}
    with pytest.raises(MalformedPayloadError, match="missing keys: b"):
        require_mapping({"a": 1}, "test", "a", "b")
    with pytest.raises(MalformedPayloadError):
        require_mapping([1, 2], "test")
