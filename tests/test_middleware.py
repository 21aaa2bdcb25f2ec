"""Tests for middleware: security headers, request IDs, login throttling.

Learn: Rate limiting is skipped when Redis is unavailable, which is the
default in tests. The throttling tests swap in a FakeRedis instead.
"""

import pytest

from edtasks import redis_client
from helpers import FakeRedis


@pytest.mark.asyncio
async def test_security_headers_on_health(client):
    """Health endpoint returns security headers."""
    r = await client.get("/health")
    assert r.status_code == 200
    assert r.headers["X-Content-Type-Options"] == "nosniff"
    assert r.headers["X-Frame-Options"] == "DENY"
    assert r.headers["Referrer-Policy"] == "strict-origin-when-cross-origin"
    assert "Cache-Control" not in r.headers


@pytest.mark.asyncio
async def test_auth_responses_not_cached(client):
    """Responses that may carry a token are marked no-store."""
    r = await client.post("/auth/login", json={"email": "x@example.com", "password": "nope"})
    assert r.headers["Cache-Control"] == "no-store"


@pytest.mark.asyncio
async def test_request_id_generated(client):
    """Each request gets a unique X-Request-ID header."""
    r1 = await client.get("/health")
    r2 = await client.get("/health")
    assert "X-Request-ID" in r1.headers
    assert "X-Request-ID" in r2.headers
    assert r1.headers["X-Request-ID"] != r2.headers["X-Request-ID"]


@pytest.mark.asyncio
async def test_request_id_propagated(client):
    """Incoming X-Request-ID is propagated through the response."""
    custom_id = "test-trace-12345"
    r = await client.get("/health", headers={"X-Request-ID": custom_id})
    assert r.headers["X-Request-ID"] == custom_id


@pytest.mark.asyncio
async def test_request_id_on_errors(client):
    r = await client.get("/tasks")
    assert r.status_code == 401
    assert "X-Request-ID" in r.headers


@pytest.mark.asyncio
async def test_no_hsts_on_http(client):
    """HSTS header is NOT set on HTTP connections (only HTTPS)."""
    r = await client.get("/health")
    assert "Strict-Transport-Security" not in r.headers


# ═══════════════════════════════════════════════════════════
# Login throttling
# ═══════════════════════════════════════════════════════════


@pytest.fixture()
def fake_redis(monkeypatch):
    fake = FakeRedis()
    monkeypatch.setattr(redis_client, "_redis", fake)
    return fake


@pytest.mark.asyncio
async def test_login_throttled_after_five_attempts(client, teacher, fake_redis):
    body = {"email": teacher["user"]["email"], "password": "wrong_password"}
    for attempt in range(5):
        r = await client.post("/auth/login", json=body)
        assert r.status_code == 401
        assert r.headers["X-RateLimit-Remaining"] == str(4 - attempt)

    r = await client.post("/auth/login", json=body)
    assert r.status_code == 429
    assert r.json() == {
        "success": False,
        "message": "Too many login attempts, please try again after 15 minutes",
    }
    assert r.headers["Retry-After"] == "900"

    # Even the right password is refused until the window rolls over
    r = await client.post(
        "/auth/login",
        json={"email": teacher["user"]["email"], "password": teacher["password"]},
    )
    assert r.status_code == 429


@pytest.mark.asyncio
async def test_throttle_key_expires(client, fake_redis):
    await client.post("/auth/login", json={"email": "a@example.com", "password": "x"})
    [key] = fake_redis.counts
    assert key.startswith("edtasks:rl:")
    assert ":login:" in key
    assert fake_redis.ttls[key] == 1800


@pytest.mark.asyncio
async def test_only_login_is_throttled(client, teacher, fake_redis):
    for _ in range(7):
        r = await client.get("/tasks", headers=teacher["headers"])
        assert r.status_code == 200
    assert fake_redis.counts == {}
