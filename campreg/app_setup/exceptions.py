"""
Gestionnaires d’exceptions.
- Pages web (Accept: text/html, hors /api/*): page d’erreur HTML avec le code HTTP.
- Clients API (Accept JSON ou chemins /api/*): body JSON FastAPI standard.
"""
from fastapi import FastAPI, HTTPException, Request
from fastapi.responses import JSONResponse
from campreg.utils.templates import templates

def register_exception_handlers(app: FastAPI) -> None:
    """
    Enregistre le handler HTTPException.
    - UX web: page error.html (statut conservé, ex: 400, 403, 429).
    - UX API: {"detail": ...} pour debug et intégration front.
    """
    @app.exception_handler(HTTPException)
    async def html_or_json_http_errors(request: Request, exc: HTTPException):
        accept = (request.headers.get("accept") or "").lower()
        is_api = request.url.path.startswith("/api/")
        if "text/html" in accept and not is_api:
            return templates.TemplateResponse(
                request,
                "error.html",
                {"status_code": exc.status_code, "detail": str(exc.detail or "")},
                status_code=exc.status_code,
                headers=getattr(exc, "headers", None),
            )
        return JSONResponse(status_code=exc.status_code, content={"detail": exc.detail}, headers=getattr(exc, "headers", None))
