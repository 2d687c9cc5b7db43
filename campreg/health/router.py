from fastapi import APIRouter, Request
from fastapi.responses import JSONResponse
from campreg.health.service import health_stripe_info
from campreg.utils.rate_limit import rate_limit_health_info

router = APIRouter(prefix="/health", tags=["Health"])

@router.get("")
def health_root():
    return {"ok": True}

@router.get("/stripe")
def health_stripe():
    return JSONResponse(health_stripe_info())

@router.get("/rate-limit")
def health_rate_limit(request: Request):
    return JSONResponse(rate_limit_health_info(request))
