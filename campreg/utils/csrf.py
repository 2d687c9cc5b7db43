# module campreg.utils.csrf
from typing import Any, Iterable
from fastapi import FastAPI, Request
from fastapi.responses import Response
import secrets
from campreg.config import COOKIE_SECURE

CSRF_COOKIE_NAME = "csrf_token"
CSRF_FIELD_NAMES = ("csrf_token", "X-CSRF-Token")

def get_or_create_csrf_token(request: Request) -> str:
    """
    Renvoie le token CSRF existant (cookie) ou en crée un nouveau.
    """
    token = request.cookies.get(CSRF_COOKIE_NAME)
    if not token:
        token = secrets.token_urlsafe(32)
    return token

def attach_csrf_cookie_if_missing(response: Response, request: Request, token: str) -> None:
    """
    Pose le cookie CSRF si absent pour le navigateur.
    """
    if not request.cookies.get(CSRF_COOKIE_NAME):
        response.set_cookie(
            key=CSRF_COOKIE_NAME,
            value=token,
            httponly=False,
            secure=COOKIE_SECURE,
            samesite="Lax",
            max_age=60 * 60,
            path="/",
        )

def validate_csrf_token(request: Request, form_data: Any, field_names: Iterable[str] = CSRF_FIELD_NAMES) -> bool:
    """
    Valide le token CSRF en comparant le champ du formulaire et le cookie.
    - Si le cookie n'existe pas, on ne bloque pas (POST direct, clients sans cookie).
    - Accepte plusieurs noms de champ: csrf_token ou X-CSRF-Token.
    """
    token_cookie = request.cookies.get(CSRF_COOKIE_NAME)
    if not token_cookie:
        return True
    token_form = None
    for name in field_names:
        if hasattr(form_data, "get"):
            token_form = form_data.get(name)
            if token_form:
                break
    return bool(token_form) and secrets.compare_digest(str(token_form), str(token_cookie))


def register_csrf_middleware(app: FastAPI) -> None:
    """
    Expose le token sur request.state.csrf_token (utilisé par les templates)
    et dépose le cookie correspondant s'il manque.
    """
    @app.middleware("http")
    async def csrf_cookie(request: Request, call_next):
        token = get_or_create_csrf_token(request)
        request.state.csrf_token = token
        response = await call_next(request)
        attach_csrf_cookie_if_missing(response, request, token)
        return response
