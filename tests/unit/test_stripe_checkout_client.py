from types import SimpleNamespace

import pytest
import stripe

from campreg.registration import CheckoutError, StripeCheckoutClient, get_checkout_client
from campreg.registration import stripe_client as stripe_client_module


def test_create_session_passes_key_and_params(monkeypatch):
    captured = {}

    def fake_create(**kwargs):
        captured.update(kwargs)
        return SimpleNamespace(id="cs_test_123", url="https://checkout.stripe.test/cs_test_123")

    monkeypatch.setattr(stripe.checkout.Session, "create", fake_create)
    client = StripeCheckoutClient(secret_key="sk_test_abc")
    session = client.create_session(mode="payment", customer_email="a@example.com", line_items=[])

    assert session == {"id": "cs_test_123", "url": "https://checkout.stripe.test/cs_test_123"}
    assert captured["api_key"] == "sk_test_abc"
    assert captured["mode"] == "payment"
    assert captured["customer_email"] == "a@example.com"


def test_missing_secret_key_raises_before_remote_call(monkeypatch):
    def fail_create(**kwargs):
        raise AssertionError("Stripe ne doit pas être appelé")

    monkeypatch.setattr(stripe.checkout.Session, "create", fail_create)
    with pytest.raises(CheckoutError):
        StripeCheckoutClient(secret_key="").create_session(mode="payment")


def test_stripe_error_is_wrapped(monkeypatch):
    def boom(**kwargs):
        raise stripe.StripeError("card network unavailable")

    monkeypatch.setattr(stripe.checkout.Session, "create", boom)
    with pytest.raises(CheckoutError) as exc:
        StripeCheckoutClient(secret_key="sk_test_abc").create_session(mode="payment")
    assert isinstance(exc.value.__cause__, stripe.StripeError)


def test_default_key_comes_from_config(monkeypatch):
    monkeypatch.setattr(stripe_client_module, "STRIPE_SECRET_KEY", "sk_test_from_env")
    assert StripeCheckoutClient().secret_key == "sk_test_from_env"
    assert get_checkout_client().secret_key == "sk_test_from_env"
