"""
Middlewares transverses de l’application.
- register_basic_middlewares: CORS, TrustedHost et confiance en X-Forwarded-*.
- register_no_cache_middleware: empêche la mise en cache de la page de paiement.
"""
from fastapi import Request, FastAPI
from fastapi.middleware.cors import CORSMiddleware
from starlette.middleware.trustedhost import TrustedHostMiddleware
from uvicorn.middleware.proxy_headers import ProxyHeadersMiddleware
from campreg.config import CORS_ORIGINS, ALLOWED_HOSTS

NO_CACHE_PATHS = {"/payment"}

def register_basic_middlewares(app: FastAPI) -> None:
    """
    Ajoute les middlewares « de base »:
    - CORSMiddleware: autorise les origines définies (dev/prod).
    - TrustedHostMiddleware: limite les hôtes acceptés (défense host header).
    - ProxyHeadersMiddleware: fait confiance aux en-têtes du proxy (x-forwarded-*).
    """
    app.add_middleware(
        CORSMiddleware,
        allow_origins=CORS_ORIGINS,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    app.add_middleware(
        TrustedHostMiddleware,
        allowed_hosts=ALLOWED_HOSTS + ["*"] if "*" in CORS_ORIGINS else ALLOWED_HOSTS,
    )
    # Fait confiance aux en-têtes X-Forwarded-* (Render, Nginx, etc.)
    app.add_middleware(ProxyHeadersMiddleware, trusted_hosts=["*"])

def register_no_cache_middleware(app: FastAPI) -> None:
    """
    Empêche la mise en cache de la page de paiement (identifiant de session Checkout).
    """
    @app.middleware("http")
    async def no_cache_for_payment(request: Request, call_next):
        response = await call_next(request)
        path = request.url.path.rstrip("/").lower()
        if path in NO_CACHE_PATHS:
            response.headers["Cache-Control"] = "no-store, no-cache, must-revalidate, max-age=0"
            response.headers["Pragma"] = "no-cache"
            response.headers["Expires"] = "0"
        return response
