from __future__ import annotations

import pytest


@pytest.mark.asyncio
async def test_request_id_echoes_back(app_client):
    rid = "test-123"
    res = await app_client.get("/healthz", headers={"X-Request-ID": rid})
    assert res.status_code == 200
    assert res.headers.get("X-Request-ID") == rid


@pytest.mark.asyncio
async def test_request_id_generated_when_missing(app_client):
    res = await app_client.get("/healthz")
    rid = res.headers.get("X-Request-ID")
    assert isinstance(rid, str)
    assert len(rid) > 0


@pytest.mark.asyncio
async def test_security_headers(app_client):
    res = await app_client.get("/weather", params={"loc": "51.5,-0.12"})
    assert res.headers["X-Content-Type-Options"] == "nosniff"
    assert res.headers["Cache-Control"] == "private, max-age=0"
    assert res.headers["Permissions-Policy"] == "geolocation=(self)"
    assert res.headers["Referrer-Policy"] == "strict-origin-when-cross-origin"
