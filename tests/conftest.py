import asyncio
import os

# Avant l'import de l'app: pas de Redis pendant les tests
os.environ.setdefault("DISABLE_FASTAPI_LIMITER_INIT_FOR_TESTS", "1")

import pytest
from typing import Dict, Generator
from fastapi.testclient import TestClient
from fastapi_limiter import FastAPILimiter

from campreg.app import app as fastapi_app
from campreg.registration.stripe_client import get_checkout_client
from campreg.registration.errors import CheckoutError
from tests.fakes import FakeCheckoutClient, FakeLimiterRedis

# Marquage automatique selon le dossier
def pytest_collection_modifyitems(config, items):
    for item in items:
        nodeid = item.nodeid.replace("\\", "/")
        if "/unit/" in nodeid:
            item.add_marker(pytest.mark.unit)
        elif "/integration/" in nodeid:
            item.add_marker(pytest.mark.integration)
        elif "/functional/" in nodeid:
            item.add_marker(pytest.mark.functional)


@pytest.fixture(scope="session")
def app():
    return fastapi_app

@pytest.fixture()
def checkout_client(app) -> Generator[FakeCheckoutClient, None, None]:
    fake = FakeCheckoutClient()
    app.dependency_overrides[get_checkout_client] = lambda: fake
    try:
        yield fake
    finally:
        app.dependency_overrides.pop(get_checkout_client, None)

@pytest.fixture()
def failing_checkout_client(checkout_client) -> FakeCheckoutClient:
    checkout_client.error = CheckoutError("Stripe a refusé la création de la session: boom")
    return checkout_client

@pytest.fixture()
def client(app, checkout_client) -> Generator[TestClient, None, None]:
    with TestClient(app) as c:
        yield c

@pytest.fixture()
def valid_form() -> Dict[str, str]:
    return {
        "name": "Jane Camper",
        "email": "jane@example.com",
        "friday_adults": "2",
        "friday_children": "0",
        "saturday_adults": "1",
        "saturday_children": "0",
        "vehicles": "1",
    }

@pytest.fixture()
def limiter_redis(monkeypatch) -> FakeLimiterRedis:
    """FastAPILimiter initialisé sur un Redis factice; état de classe restauré ensuite."""
    for attr in ("redis", "prefix", "lua_sha", "identifier", "http_callback", "ws_callback"):
        monkeypatch.setattr(FastAPILimiter, attr, getattr(FastAPILimiter, attr), raising=False)
    monkeypatch.delenv("LOCAL_RATE_LIMIT_FALLBACK", raising=False)
    fake = FakeLimiterRedis()
    asyncio.run(FastAPILimiter.init(fake))
    return fake
