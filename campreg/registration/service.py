"""
Cas d'usage 'registration': orchestre validation, tarification et Stripe.
"""
import logging
from typing import Any, Dict, List, Optional, Protocol, Sequence, Tuple

from campreg import config
from . import pricing
from .errors import CheckoutError
from .models import LineItem, PaymentReference, RegistrationForm

logger = logging.getLogger(__name__)


class CheckoutClient(Protocol):
    def create_session(self, **params: Any) -> Dict[str, Any]: ...


# module campreg.registration.service
def make_metadata(form: RegistrationForm) -> Dict[str, str]:
    """
    Métadonnées Stripe associées à la session (valeurs str, limites Stripe respectées).
    """
    return {
        "registrant_name": form.name[:500],
        "friday_adults": str(form.friday_adults),
        "friday_children": str(form.friday_children),
        "saturday_adults": str(form.saturday_adults),
        "saturday_children": str(form.saturday_children),
        "vehicles": str(form.vehicles),
    }

def build_session_params(
    items: Sequence[LineItem],
    customer_email: str,
    *,
    success_url: str,
    cancel_url: str,
    metadata: Optional[Dict[str, str]] = None,
) -> Dict[str, Any]:
    """
    Requête de création de session Checkout: carte uniquement, paiement unique.
    """
    params: Dict[str, Any] = {
        "customer_email": customer_email,
        "payment_method_types": ["card"],
        "line_items": [item.to_stripe() for item in items],
        "mode": "payment",
        "success_url": success_url,
        "cancel_url": cancel_url,
    }
    if metadata:
        params["metadata"] = metadata
    return params

def initiate_checkout(
    items: Sequence[LineItem],
    customer_email: str,
    client: CheckoutClient,
    *,
    success_url: Optional[str] = None,
    cancel_url: Optional[str] = None,
    metadata: Optional[Dict[str, str]] = None,
) -> PaymentReference:
    """
    Crée la session Checkout chez le fournisseur (un seul appel, sans retry).
    - success_url / cancel_url: par défaut CHECKOUT_SUCCESS_URL / CHECKOUT_CANCEL_URL.
    - Soulève CheckoutError si la commande est vide ou si le fournisseur ne renvoie pas d'id.
    """
    if not items:
        raise CheckoutError("Aucun article à régler")
    params = build_session_params(
        items,
        customer_email,
        success_url=success_url or config.CHECKOUT_SUCCESS_URL,
        cancel_url=cancel_url or config.CHECKOUT_CANCEL_URL,
        metadata=metadata,
    )
    session = client.create_session(**params)
    session_id = (session or {}).get("id")
    if not session_id:
        raise CheckoutError("Session Stripe invalide")
    return PaymentReference(checkout_session_id=str(session_id), url=session.get("url"))

def register(form: RegistrationForm, client: CheckoutClient) -> Tuple[List[LineItem], PaymentReference]:
    """
    Inscription complète: formulaire validé -> lignes de commande -> session Checkout.
    """
    items = pricing.to_line_items(form)
    reference = initiate_checkout(items, form.email, client, metadata=make_metadata(form))
    logger.info(
        "registration.checkout session_id=%s items=%s total=%s",
        reference.checkout_session_id, len(items), pricing.order_total(items),
    )
    return items, reference
