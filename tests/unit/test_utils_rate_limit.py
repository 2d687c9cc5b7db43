import logging
import time

import pytest
from fastapi import APIRouter, FastAPI, Depends, Request
from fastapi.testclient import TestClient
from fastapi_limiter import FastAPILimiter
from redis.exceptions import ConnectionError as RedisConnectionError

from campreg.utils.rate_limit import optional_rate_limit, rate_limit_health_info


def _make_app(times=2, seconds=60):
    app = FastAPI()

    @app.get("/limitedA", dependencies=[Depends(optional_rate_limit(times, seconds))])
    def limited_a():
        return {"ok": True}

    @app.get("/limitedB", dependencies=[Depends(optional_rate_limit(times, seconds))])
    def limited_b():
        return {"ok": True}

    # Route montée via include_router, comme les routeurs de l'application
    router = APIRouter(prefix="/api")

    @router.post("/limited", dependencies=[Depends(optional_rate_limit(times, seconds))])
    def limited_api():
        return {"ok": True}

    app.include_router(router)

    @app.get("/rl_info")
    def rl_info(request: Request):
        return rate_limit_health_info(request)

    return app


@pytest.fixture(autouse=True)
def _no_limiter_redis(monkeypatch):
    monkeypatch.setattr(FastAPILimiter, "redis", None, raising=False)


def test_rate_limit_fallback_blocks_after_limit(monkeypatch):
    monkeypatch.setenv("LOCAL_RATE_LIMIT_FALLBACK", "1")
    client = TestClient(_make_app(times=2, seconds=60))

    assert client.get("/limitedA").status_code == 200
    assert client.get("/limitedA").status_code == 200
    assert client.get("/limitedA").status_code == 429


def test_rate_limit_is_per_path(monkeypatch):
    monkeypatch.setenv("LOCAL_RATE_LIMIT_FALLBACK", "1")
    client = TestClient(_make_app(times=1, seconds=60))

    assert client.get("/limitedA").status_code == 200
    assert client.get("/limitedA").status_code == 429
    # path B: indépendant de A
    assert client.get("/limitedB").status_code == 200


def test_rate_limit_disabled_flag_bypasses_limit(monkeypatch):
    monkeypatch.delenv("LOCAL_RATE_LIMIT_FALLBACK", raising=False)
    app = _make_app(times=1, seconds=60)
    app.state.rate_limit_enabled = False
    client = TestClient(app)

    for _ in range(3):
        assert client.get("/limitedA").status_code == 200


def test_rate_limit_without_initialized_limiter_is_noop(monkeypatch):
    monkeypatch.delenv("LOCAL_RATE_LIMIT_FALLBACK", raising=False)
    app = _make_app(times=1, seconds=60)
    app.state.rate_limit_enabled = True
    client = TestClient(app)

    assert client.get("/limitedA").status_code == 200
    assert client.get("/limitedA").status_code == 200


def test_rate_limit_health_info(monkeypatch):
    monkeypatch.delenv("LOCAL_RATE_LIMIT_FALLBACK", raising=False)
    app = _make_app()
    client = TestClient(app)

    app.state.rate_limit_enabled = True
    info = client.get("/rl_info").json()
    assert info["enabled"] is True
    assert info["ready"] is False
    assert info["backend"] is None

    monkeypatch.setattr(FastAPILimiter, "redis", object(), raising=False)
    monkeypatch.setenv("RATE_LIMIT_REDIS_URL", "redis://localhost:6379/0")
    info2 = client.get("/rl_info").json()
    assert info2["ready"] is True
    assert info2["backend"] == "redis"
    assert info2["redis"] == {"scheme": "redis", "host": "localhost", "port": 6379}


def test_fallback_store_drops_expired_keys(monkeypatch):
    monkeypatch.setenv("LOCAL_RATE_LIMIT_FALLBACK", "1")
    app = _make_app(times=5, seconds=60)
    app.state._rl_store = {
        "ip:10.0.0.1:/limitedA": [time.time() - 120],
        "ip:10.0.0.2:/limitedA": [],
    }
    client = TestClient(app)

    assert client.get("/limitedB").status_code == 200
    assert list(app.state._rl_store) == ["ip:testclient:/limitedB"]


def test_redis_limiter_blocks_after_limit(limiter_redis):
    app = _make_app(times=2, seconds=60)
    app.state.rate_limit_enabled = True
    client = TestClient(app)

    assert client.post("/api/limited").status_code == 200
    assert client.post("/api/limited").status_code == 200
    resp = client.post("/api/limited")
    assert resp.status_code == 429
    assert resp.headers["retry-after"] == "60"
    # Clé: préfixe + IP + chemin
    assert limiter_redis.keys[0] == "fastapi-limiter:ip:testclient:/api/limited"


def test_redis_limiter_is_per_path(limiter_redis):
    app = _make_app(times=1, seconds=60)
    app.state.rate_limit_enabled = True
    client = TestClient(app)

    assert client.get("/limitedA").status_code == 200
    assert client.get("/limitedA").status_code == 429
    assert client.get("/limitedB").status_code == 200


def test_redis_limiter_reloads_missing_script(limiter_redis):
    app = _make_app(times=1, seconds=60)
    app.state.rate_limit_enabled = True
    client = TestClient(app)
    loads = limiter_redis.script_loads
    limiter_redis.missing_script = True

    assert client.get("/limitedA").status_code == 200
    assert limiter_redis.script_loads == loads + 1
    assert client.get("/limitedA").status_code == 429


def test_redis_failure_lets_request_through(limiter_redis, caplog):
    app = _make_app(times=1, seconds=60)
    app.state.rate_limit_enabled = True
    client = TestClient(app)
    limiter_redis.error = RedisConnectionError("connection refused")

    with caplog.at_level(logging.WARNING, logger="campreg.utils.rate_limit"):
        assert client.get("/limitedA").status_code == 200
        assert client.get("/limitedA").status_code == 200

    assert "Rate limiting skipped for /limitedA" in caplog.text
