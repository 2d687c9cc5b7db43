"""
Module 'registration' (feature-first): point d'entrée public.
Réunit formulaire, tarification, client Stripe et cas d'usage.
"""

from .errors import CheckoutError, RegistrationValidationError
from .models import LineItem, PaymentReference, RegistrationForm
from .pricing import format_amount, order_total, to_line_items
from .service import build_session_params, initiate_checkout, make_metadata, register
from .stripe_client import StripeCheckoutClient, get_checkout_client
from .validation import parse_registration

__all__ = [
    # errors
    "CheckoutError",
    "RegistrationValidationError",
    # models
    "LineItem",
    "PaymentReference",
    "RegistrationForm",
    "parse_registration",
    # pricing
    "to_line_items",
    "order_total",
    "format_amount",
    # stripe
    "StripeCheckoutClient",
    "get_checkout_client",
    # services
    "build_session_params",
    "initiate_checkout",
    "make_metadata",
    "register",
]
