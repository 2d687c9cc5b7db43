from fastapi import FastAPI
from campreg.config import COOKIE_SECURE

STRIPE_CHECKOUT = "https://checkout.stripe.com"

def register_security_middleware(app: FastAPI) -> None:
    @app.middleware("http")
    async def security_headers(request, call_next):
        response = await call_next(request)

        # En-têtes de sécurité
        response.headers.setdefault("X-Frame-Options", "DENY")
        response.headers.setdefault("X-Content-Type-Options", "nosniff")
        response.headers.setdefault("Referrer-Policy", "no-referrer")
        response.headers.setdefault("Permissions-Policy", "geolocation=(), microphone=(), camera=()")
        if COOKIE_SECURE:
            response.headers.setdefault("Strict-Transport-Security", "max-age=63072000; includeSubDomains; preload")

        # CSP: formulaire et lien vers Stripe Checkout, CDN pour la doc Swagger
        swagger_cdns = ["https://cdn.jsdelivr.net", "https://unpkg.com"]
        csp = (
            "default-src 'self'; "
            "base-uri 'self'; object-src 'none'; frame-ancestors 'none'; "
            f"img-src 'self' data: https://fastapi.tiangolo.com https://*.stripe.com; "
            f"style-src 'self' 'unsafe-inline' {' '.join(swagger_cdns)}; "
            f"script-src 'self' 'unsafe-inline' {' '.join(swagger_cdns)}; "
            "connect-src 'self'; "
            f"form-action 'self' {STRIPE_CHECKOUT}"
        )
        response.headers["Content-Security-Policy"] = csp

        return response
