"""Site Assembler application: logging, error handlers and router wiring.

``SITE_LOG_LEVEL`` sets the root log level (default ``INFO``).
"""

import logging
import logging.config
import os

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from slowapi import _rate_limit_exceeded_handler
from slowapi.errors import RateLimitExceeded

from app.routers.assemble import limiter, router as assemble_router
from app.routers.projects import router as projects_router
from app.routers.results import router as results_router
from app.services import generator

SERVICE_NAME = "site-assembler"
VERSION = "1.0.0"
LOG_LEVEL = os.environ.get("SITE_LOG_LEVEL", "INFO").upper()

LOGGING_CONFIG = {
    "version": 1,
    "disable_existing_loggers": False,
    "formatters": {
        "json": {
            "format": (
                '{"time": "%(asctime)s", "service": "' + SERVICE_NAME + '", '
                '"level": "%(levelname)s", "logger": "%(name)s", "message": "%(message)s"}'
            ),
        },
    },
    "handlers": {
        "console": {
            "class": "logging.StreamHandler",
            "formatter": "json",
        },
    },
    "loggers": {
        # httpx logs every request at INFO
        "httpx": {"level": "WARNING" if LOG_LEVEL != "DEBUG" else "DEBUG"},
    },
    "root": {"level": LOG_LEVEL, "handlers": ["console"]},
}

logging.config.dictConfig(LOGGING_CONFIG)
logger = logging.getLogger(__name__)

app = FastAPI(
    title="Site Assembler",
    description=(
        "Parses model-generated multi-file websites and serves them as "
        "self-contained HTML pages."
    ),
    version=VERSION,
)

app.state.limiter = limiter
app.add_exception_handler(RateLimitExceeded, _rate_limit_exceeded_handler)


@app.exception_handler(Exception)
async def unhandled_error(request: Request, exc: Exception) -> JSONResponse:
    logger.exception("Unhandled %s on %s %s", type(exc).__name__, request.method, request.url.path)
    return JSONResponse(status_code=500, content={"detail": "An unexpected error occurred."})


for router in (assemble_router, projects_router, results_router):
    app.include_router(router)


@app.get("/", summary="Health check")
async def health() -> dict:
    """Report the service version and whether site generation is configured."""
    return {
        "status": "ok",
        "service": SERVICE_NAME,
        "version": VERSION,
        "generation": {"model": generator.MODEL, "configured": bool(generator.API_KEY)},
    }
