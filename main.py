import logging
import socket

import uvicorn
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from webflow_cms.config import settings
from webflow_cms.exception_handlers import register_exception_handlers
from webflow_cms.middleware.logging import StructuredLoggingMiddleware, setup_structured_logging
from webflow_cms.routes import collections, fields, health, items, sites
from webflow_cms.utils.metrics import set_app_info

logger = logging.getLogger(__name__)

PORT_ATTEMPTS = 10


def create_app() -> FastAPI:
    """Create the FastAPI application."""
    setup_structured_logging(log_level=settings.log_level, json_format=settings.log_json)
    set_app_info(settings.app_version, settings.environment)

    app = FastAPI(
        title=settings.app_name,
        description="Admin backend for editing Webflow CMS collections",
        debug=settings.debug,
        version=settings.app_version,
    )

    app.add_middleware(StructuredLoggingMiddleware)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.allowed_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    register_exception_handlers(app)

    # Include routers
    app.include_router(health.router)
    app.include_router(collections.router, prefix="/api")
    app.include_router(items.router, prefix="/api")
    app.include_router(sites.router, prefix="/api")
    app.include_router(fields.router, prefix="/api")

    if not settings.webflow_access_token:
        logger.warning("WEBFLOW_ACCESS_TOKEN is not set; Webflow routes will return 500")
    if settings.debug:
        logger.info(f"Running in {settings.environment} mode")

    return app


app = create_app()


def port_is_free(port: int, host: str = "0.0.0.0") -> bool:
    with socket.socket(socket.AF_INET, socket.SOCK_STREAM) as sock:
        try:
            sock.bind((host, port))
        except OSError:
            return False
    return True


def find_available_port(start: int, attempts: int = PORT_ATTEMPTS, host: str = "0.0.0.0") -> int:
    """First free port from start upward; raises RuntimeError when none is free."""
    for port in range(start, start + attempts):
        if port_is_free(port, host):
            if port != start:
                logger.warning("Port %s is in use, trying %s instead", start, port)
            return port
    raise RuntimeError(f"No free port in range {start}-{start + attempts - 1}")


if __name__ == "__main__":
    port = find_available_port(settings.port)
    logger.info("Server is running on port %s", port)
    uvicorn.run("main:app", host="0.0.0.0", port=port, reload=settings.debug)
