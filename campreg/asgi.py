"""
ASGI entrypoint: expose `app` pour les process managers / déploiements.

- En production, un process manager (ex: gunicorn/uvicorn-workers, hypercorn) importe `campreg.asgi:app`
  pour servir l’application FastAPI en mode ASGI.
- Toute la configuration de FastAPI (routes, middlewares, sécurité, static, etc.) est centralisée
  dans campreg.app_setup.factory, ce fichier ne fait qu’exposer l’instance `app`.
"""

from campreg.app import app

if __name__ == "__main__":
    # Exécution directe utile en développement local (uvicorn standalone).
    import os
    import uvicorn
    uvicorn.run(
        "campreg.asgi:app",
        host="0.0.0.0",
        port=int(os.getenv("PORT", "8000")),
        reload=True,
    )
