from typing import Dict, Any
from fastapi import Request, Response, HTTPException
import logging
import os
import time
from fastapi_limiter import FastAPILimiter
from fastapi_limiter.depends import RateLimiter
from redis.exceptions import NoScriptError

logger = logging.getLogger(__name__)

def _client_key(req: Request) -> str:
    # Clé: IP du client + chemin (pas de session utilisateur dans cette application)
    ip = req.client.host if req.client else "local"
    return f"ip:{ip}:{req.url.path}"

class PathRateLimiter(RateLimiter):
    """
    RateLimiter dont la clé Redis ne dépend que de l'identifiant (IP + chemin).
    RateLimiter.__call__ parcourt request.app.routes pour indexer la route, ce qui
    casse avec les routeurs inclus des versions récentes de FastAPI.
    """

    async def __call__(self, request: Request, response: Response):
        identifier = self.identifier or FastAPILimiter.identifier
        callback = self.callback or FastAPILimiter.http_callback
        key = f"{FastAPILimiter.prefix}:{await identifier(request)}"
        try:
            pexpire = await self._check(key)
        except NoScriptError:
            FastAPILimiter.lua_sha = await FastAPILimiter.redis.script_load(FastAPILimiter.lua_script)
            pexpire = await self._check(key)
        if pexpire != 0:
            return await callback(request, response, pexpire)

def _prune_store(store: Dict[str, list], now: float, seconds: int) -> None:
    # Supprime les clés dont toutes les requêtes sont sorties de la fenêtre
    for key in [k for k, hits in store.items() if not hits or now - hits[-1] >= seconds]:
        del store[key]

def optional_rate_limit(times: int, seconds: int):
    async def _identifier(req: Request) -> str:
        return _client_key(req)

    limiter = PathRateLimiter(times=times, seconds=seconds, identifier=_identifier)

    async def _dep(request: Request, response: Response):
        # Forcer le fallback mémoire en DEV si demandé
        if os.getenv("LOCAL_RATE_LIMIT_FALLBACK") == "1":
            now = time.time()
            key = _client_key(request)
            store = getattr(request.app.state, "_rl_store", {})
            _prune_store(store, now, seconds)
            hits = [t for t in store.get(key, []) if now - t < seconds]
            if len(hits) >= times:
                store[key] = hits
                request.app.state._rl_store = store
                raise HTTPException(status_code=429, detail="Too Many Requests")
            hits.append(now)
            store[key] = hits
            request.app.state._rl_store = store
            return

        # Respecter le flag global
        if getattr(request.app.state, "rate_limit_enabled", None) is False:
            return

        # Utiliser fastapi-limiter si initialisé
        if getattr(FastAPILimiter, "redis", None) is None:
            return

        try:
            return await limiter(request, response)
        except HTTPException:
            raise
        except Exception as e:
            # Redis indisponible ou script refusé: pas de 429, la requête passe
            logger.warning("Rate limiting skipped for %s: %s", request.url.path, e)
            return
    return _dep

def rate_limit_health_info(request: Request) -> Dict[str, Any]:
    enabled = getattr(request.app.state, "rate_limit_enabled", None)

    limiter_ready = getattr(FastAPILimiter, "redis", None) is not None
    backend = "redis" if limiter_ready else None

    info: Dict[str, Any] = {
        "enabled": (bool(enabled) if enabled is not None else None),
        "ready": limiter_ready,
        "backend": backend,
        "local_fallback": os.getenv("LOCAL_RATE_LIMIT_FALLBACK") == "1",
    }

    redis_url = os.getenv("RATE_LIMIT_REDIS_URL")
    if backend == "redis" and redis_url:
        from urllib.parse import urlparse
        p = urlparse(redis_url)
        info["redis"] = {
            "scheme": p.scheme,
            "host": p.hostname,
            "port": p.port,
        }

    return info
