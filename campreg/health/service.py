from urllib.parse import urlparse
from campreg import config

def _key_mode(key: str):
    # sk_test_... / pk_live_... -> "test" / "live"
    parts = (key or "").split("_")
    if len(parts) >= 3 and parts[1] in ("test", "live"):
        return parts[1]
    return None

def health_stripe_info():
    """
    État de la configuration Stripe, sans appel réseau ni exposition des clés.
    """
    success = urlparse(config.CHECKOUT_SUCCESS_URL)
    return {
        "secret_key_configured": bool(config.STRIPE_SECRET_KEY),
        "public_key_configured": bool(config.STRIPE_PUBLIC_KEY),
        "mode": _key_mode(config.STRIPE_SECRET_KEY),
        "success_url": config.CHECKOUT_SUCCESS_URL,
        "cancel_url": config.CHECKOUT_CANCEL_URL,
        "success_host": success.hostname,
    }
