import logging
from typing import Any, Dict, List, Mapping, Optional

from fastapi import APIRouter, Request, Depends, HTTPException
from fastapi.responses import HTMLResponse
from starlette.concurrency import run_in_threadpool

from campreg.utils.csrf import validate_csrf_token
from campreg.utils.rate_limit import optional_rate_limit
from campreg.utils.templates import templates
from . import pricing
from .errors import CheckoutError, RegistrationValidationError
from .models import LineItem, PaymentReference, RegistrationForm
from .service import register
from .stripe_client import StripeCheckoutClient, get_checkout_client
from .validation import parse_registration

logger = logging.getLogger(__name__)

# module campreg.registration.views
web_router = APIRouter(tags=["Registration"])
api_router = APIRouter(prefix="/api/v1/registration", tags=["Registration API"])

CHECKOUT_FAILED_MESSAGE = "We could not start the payment. Please try again in a few minutes."

# Page de paiement: identifiant de session Checkout, jamais mis en cache
NO_CACHE_HEADERS = {
    "Cache-Control": "no-store, no-cache, must-revalidate, max-age=0",
    "Pragma": "no-cache",
    "Expires": "0",
}

EMPTY_FORM: Dict[str, Any] = {
    "name": "",
    "email": "",
    "friday_adults": 0,
    "friday_children": 0,
    "saturday_adults": 0,
    "saturday_children": 0,
    "vehicles": 1,
}

def _render_form(
    request: Request,
    values: Mapping[str, Any],
    errors: Optional[Dict[str, str]] = None,
    error: Optional[str] = None,
    status_code: int = 200,
):
    return templates.TemplateResponse(
        request,
        "register.html",
        {
            "values": {**EMPTY_FORM, **{k: v for k, v in values.items() if k in EMPTY_FORM}},
            "errors": errors or {},
            "error": error,
            "csrf_token": getattr(request.state, "csrf_token", ""),
        },
        status_code=status_code,
    )

def _render_payment(
    request: Request,
    reference: PaymentReference,
    items: Optional[List[LineItem]] = None,
):
    return templates.TemplateResponse(
        request,
        "payment.html",
        {
            "reference": reference,
            "items": items or [],
            "total": pricing.order_total(items or []),
        },
        headers=NO_CACHE_HEADERS,
    )

# --- Pages web ---

@web_router.get("/", response_class=HTMLResponse)
def registration_page(request: Request):
    """Formulaire vide (effectifs à 0, un véhicule)."""
    return _render_form(request, EMPTY_FORM)

@web_router.post(
    "/",
    response_class=HTMLResponse,
    dependencies=[Depends(optional_rate_limit(times=10, seconds=60))],
)
async def submit_registration(request: Request, client: StripeCheckoutClient = Depends(get_checkout_client)):
    """
    Soumission du formulaire d'inscription.
    - CSRF: champ csrf_token comparé au cookie (403 si différent).
    - Invalide: formulaire ré-affiché avec un message par champ, aucun appel Stripe.
    - Valide: lignes de commande -> session Checkout -> page de paiement.
    - Échec Stripe: formulaire ré-affiché avec un message générique (502).
    """
    form_data = await request.form()
    if not validate_csrf_token(request, form_data):
        raise HTTPException(status_code=403, detail="CSRF token invalid")

    values = {k: v for k, v in form_data.items() if isinstance(v, str)}
    try:
        form = parse_registration(values)
    except RegistrationValidationError as e:
        return _render_form(request, values, errors=e.errors)

    try:
        items, reference = await run_in_threadpool(register, form, client)
    except CheckoutError:
        logger.exception("Erreur submit_registration")
        return _render_form(request, values, error=CHECKOUT_FAILED_MESSAGE, status_code=502)
    return _render_payment(request, reference, items)

@web_router.api_route("/Payment", methods=["GET", "POST"], response_class=HTMLResponse)
@web_router.api_route("/payment", methods=["GET", "POST"], response_class=HTMLResponse, include_in_schema=False)
async def payment_page(request: Request):
    """
    Page de paiement: affiche l'identifiant de session Checkout (query ou formulaire).
    Ne vérifie pas que le paiement a abouti.
    """
    session_id = request.query_params.get("session_id")
    if not session_id and request.method == "POST":
        form_data = await request.form()
        session_id = form_data.get("session_id")
    if not session_id:
        raise HTTPException(status_code=400, detail="session_id manquant")
    return _render_payment(request, PaymentReference(checkout_session_id=str(session_id)))

# --- API v1 ---

def _quote_payload(items: List[LineItem]) -> Dict[str, Any]:
    return {
        "items": [item.model_dump() for item in items],
        "total": pricing.order_total(items),
        "currency": pricing.CURRENCY,
    }

@api_router.post("/quote")
def api_quote(form: RegistrationForm) -> Dict[str, Any]:
    """Détail des lignes et total, sans appel Stripe."""
    return _quote_payload(pricing.to_line_items(form))

@api_router.post("/checkout", dependencies=[Depends(optional_rate_limit(times=10, seconds=60))])
def api_checkout(form: RegistrationForm, client: StripeCheckoutClient = Depends(get_checkout_client)) -> Dict[str, Any]:
    """
    Crée la session Checkout et renvoie {id, url, items, total, currency}.
    - Erreurs: 422 si le corps est invalide, 502 si Stripe échoue.
    """
    try:
        items, reference = register(form, client)
    except CheckoutError as e:
        logger.exception("Erreur api_checkout")
        raise HTTPException(status_code=502, detail=CHECKOUT_FAILED_MESSAGE) from e
    return {"id": reference.checkout_session_id, "url": reference.url, **_quote_payload(items)}
