import pytest


@pytest.mark.asyncio
async def test_healthz_ok(app_client):
    resp = await app_client.get("/healthz")
    assert resp.status_code == 200
    assert resp.json() == {"ok": True}


@pytest.mark.asyncio
async def test_readyz_ok(app_client):
    resp = await app_client.get("/readyz")
    assert resp.status_code == 200
    assert resp.json() == {"ok": True}


@pytest.mark.asyncio
async def test_readyz_503_when_cache_backend_down(app_client, backend):
    backend.available = False
    resp = await app_client.get("/readyz")
    assert resp.status_code == 503
    assert resp.json() == {"detail": "cache backend unavailable"}


@pytest.mark.asyncio
async def test_health(app_client):
    resp = await app_client.get("/health")
    assert resp.status_code == 200
    assert resp.json()["status"] == "ok"
