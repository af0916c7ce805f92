"""
Stargazer FastAPI app factory.

Use: uvicorn stargazer.app:create_app --factory
Or:  from stargazer import create_app
"""

import logging
import time
from typing import Optional

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware

from .errors import EngagementError
from .routes import register_routes
from .routes.root import VERSION
from .state import AppState, get_state
from .utils import error_response

logger = logging.getLogger(__name__)
access_logger = logging.getLogger("stargazer.access")

LOG_FORMAT = "%(asctime)s %(levelname)s [%(name)s] %(message)s"


def _register_error_handlers(app: FastAPI) -> None:
    @app.exception_handler(EngagementError)
    async def engagement_error_handler(request: Request, exc: EngagementError):
        if exc.status_code >= 500:
            logger.error("%s %s failed: %s", request.method, request.url.path, exc)
        return error_response(exc.status_code, exc.message)

    @app.exception_handler(RequestValidationError)
    async def request_validation_handler(request: Request, exc: RequestValidationError):
        logger.info("could not parse request body for %s %s: %s", request.method, request.url.path, exc.errors())
        return error_response(400, "could not parse request body")


def create_app(state: Optional[AppState] = None) -> FastAPI:
    """Build FastAPI app with CORS, access logging, error handlers and routes."""
    state = state or get_state()
    logging.basicConfig(level=state.config.log_level, format=LOG_FORMAT)

    app = FastAPI(
        title="Stargazer Engagement API",
        description="Stars and comments on catalog items",
        version=VERSION,
    )
    app.state.stargazer = state
    app.add_middleware(
        CORSMiddleware,
        allow_origins=list(state.config.cors_allow_origins),
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.middleware("http")
    async def access_log(request: Request, call_next):
        start = time.perf_counter()
        response = await call_next(request)
        elapsed_ms = (time.perf_counter() - start) * 1000
        access_logger.info(
            "%s %s %d %.1fms", request.method, request.url.path, response.status_code, elapsed_ms
        )
        return response

    _register_error_handlers(app)
    register_routes(app)
    return app
