import logging

import httpx
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from .core.config import get_settings
from .core.logging import configure_logging
from .api.routes_hypernetwork import router as hypernetwork_router

settings = get_settings()
configure_logging(settings.LOG_LEVEL.upper())

logger = logging.getLogger(__name__)

app = FastAPI(title="Hyper Network Search API")

# CORS:
# - In prod, FRONTEND_ORIGIN is required and we never fall back to "*".
# - In non-prod, an explicit FRONTEND_ORIGIN wins unless CORS_ALLOW_ALL_ORIGINS=True.
if settings.ENV.lower() == "prod":
    if not settings.FRONTEND_ORIGIN:
        raise RuntimeError(
            "FRONTEND_ORIGIN must be set in production – refusing to start with wide-open CORS."
        )
    origins = [
        o.strip()
        for o in settings.FRONTEND_ORIGIN.split(",")
        if o.strip()
    ]
elif settings.FRONTEND_ORIGIN and not settings.CORS_ALLOW_ALL_ORIGINS:
    origins = [
        o.strip()
        for o in settings.FRONTEND_ORIGIN.split(",")
        if o.strip()
    ]
else:
    origins = ["*"]

app.add_middleware(
    CORSMiddleware,
    allow_origins=origins,
    allow_methods=["GET", "HEAD", "POST", "OPTIONS"],
    allow_headers=["*"],
    allow_credentials=False,
    max_age=86400,
)


@app.exception_handler(httpx.HTTPStatusError)
async def notion_status_error_handler(request: Request, exc: httpx.HTTPStatusError):
    logger.error(
        "Notion rejected a query with %s",
        exc.response.status_code,
        extra={"status": exc.response.status_code, "step": "upstream_error"},
    )
    return JSONResponse(
        status_code=502,
        content={"detail": "Upstream store error", "status": exc.response.status_code},
    )


@app.exception_handler(httpx.TransportError)
async def notion_transport_error_handler(request: Request, exc: httpx.TransportError):
    logger.error(
        "Notion unreachable: %s",
        exc,
        extra={"step": "upstream_error"},
    )
    return JSONResponse(
        status_code=502,
        content={"detail": "Upstream store unreachable"},
    )


app.include_router(hypernetwork_router, prefix=settings.API_PREFIX)
