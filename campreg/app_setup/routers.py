"""
Registre central des routers (web, API v1, health).
- Web: formulaire d’inscription et page de paiement
- API v1: devis et création de session Checkout
- Health: état de l’application, de Stripe et du rate limiting
"""
from fastapi import FastAPI
from campreg.registration.views import web_router as registration_web_router, api_router as registration_api_router
from campreg.health.router import router as health_router

def register_routers(app: FastAPI) -> None:
    # Pages web (HTML)
    app.include_router(registration_web_router)
    # API v1
    app.include_router(registration_api_router)
    # Health & monitoring
    app.include_router(health_router)
