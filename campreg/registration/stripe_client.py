"""
Adaptateur Stripe: centralise l'appel de création de session Checkout.
"""
import logging
from typing import Any, Dict, Optional

import stripe

from campreg.config import STRIPE_SECRET_KEY
from .errors import CheckoutError

logger = logging.getLogger(__name__)

# module campreg.registration.stripe_client
class StripeCheckoutClient:
    """
    Client Checkout lié à une clé secrète.
    - La clé est passée à chaque appel (api_key=...), sans toucher à stripe.api_key global.
    - En absence de clé, create_session() soulève CheckoutError avant tout appel réseau.
    """

    def __init__(self, secret_key: Optional[str] = None):
        self.secret_key = STRIPE_SECRET_KEY if secret_key is None else secret_key

    def require_stripe(self) -> str:
        if not self.secret_key:
            raise CheckoutError("STRIPE_SECRET_KEY manquant")
        return self.secret_key

    def create_session(self, **params: Any) -> Dict[str, Any]:
        """
        Crée une session Stripe Checkout.
        - params: line_items, mode, customer_email, success_url, cancel_url, metadata, ...
        Retour: {"id": "cs_test_...", "url": "https://checkout.stripe.com/..."}
        """
        api_key = self.require_stripe()
        try:
            session = stripe.checkout.Session.create(api_key=api_key, **params)
        except stripe.StripeError as e:
            logger.warning("stripe.checkout.create failed: %s", getattr(e, "user_message", None) or e)
            raise CheckoutError(f"Stripe a refusé la création de la session: {e}") from e
        return {"id": getattr(session, "id", None), "url": getattr(session, "url", None)}


def get_checkout_client() -> StripeCheckoutClient:
    """
    Dépendance FastAPI: client Checkout configuré depuis campreg.config.
    Les tests la remplacent via app.dependency_overrides.
    """
    return StripeCheckoutClient()
