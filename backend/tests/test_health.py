import pytest


@pytest.mark.asyncio
async def test_health(client):
    # без X-User-Id: health-check дергает балансировщик
    resp = await client.get("/health")
    assert resp.status_code == 200
    assert resp.json() == {"status": "ok"}


@pytest.mark.asyncio
async def test_non_numeric_identity_is_rejected(client):
    resp = await client.get("/users/me", headers={"X-User-Id": "alice"})
    assert resp.status_code == 422
