"""Register all route modules on the FastAPI app."""

from fastapi import FastAPI

from .root import router as root_router
from .stars import router as stars_router
from .comments import router as comments_router


def register_routes(app: FastAPI) -> None:
    """Attach all API routers to the app."""
    app.include_router(root_router)
    app.include_router(stars_router, prefix="/v1/stars", tags=["stars"])
    app.include_router(comments_router, prefix="/v1/comments", tags=["comments"])
