import logging
import os
import subprocess
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from starlette.middleware.base import BaseHTTPMiddleware

from .api.cms import router as cms_router
from .api.health import router as health_router
from .config import API_PREFIX, API_VERSION, APP_PORT, runtime_config
from .db import init_db
from .logging_config import setup_logging
from .middleware import TracingMiddleware

# Configure logging at import time
setup_logging()

logger = logging.getLogger("cms")
logger.info("startup: logging configured", extra={"component": "api"})


@asynccontextmanager
async def lifespan(application: FastAPI):
    logger.info("CMS gateway starting up", extra={
        "component": "api",
        "version": API_VERSION,
        "flags": runtime_config.get_all(),
    })
    init_db()
    logger.info("CMS gateway ready", extra={"component": "api"})
    try:
        yield
    finally:
        logger.info("CMS gateway shutting down", extra={"component": "api"})


app = FastAPI(title="Multi-tenant CMS Gateway", version=API_VERSION, lifespan=lifespan)

# Optional auto-migrate on startup
if os.getenv("AUTO_MIGRATE", "0") in ("1", "true", "True"):
    try:
        subprocess.run(["alembic", "upgrade", "head"], check=True)
        logger.info("Alembic auto-migrate: upgrade head OK")
    except (OSError, subprocess.CalledProcessError):
        logger.exception("Alembic auto-migrate failed")

app.add_middleware(TracingMiddleware)


class ApiVersionHeaderMiddleware(BaseHTTPMiddleware):
    async def dispatch(self, request: Request, call_next):
        response = await call_next(request)
        response.headers["X-API-Version"] = API_PREFIX.strip("/") or "v1"
        return response


app.add_middleware(ApiVersionHeaderMiddleware)

app.include_router(health_router, prefix=API_PREFIX)
app.include_router(cms_router, prefix=API_PREFIX)

# Server startup configuration
if __name__ == "__main__":
    import uvicorn

    logger.info("Starting CMS gateway on port %s", APP_PORT, extra={"component": "api"})
    uvicorn.run(
        "cms_gateway.main:app",
        host="0.0.0.0",
        port=APP_PORT,
        reload=False,
        access_log=True,
    )
