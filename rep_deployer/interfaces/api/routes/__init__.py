from fastapi import FastAPI

from .auth import router as auth_router
from .deployments import router as deployments_router
from .health import router as health_router
from .servers import router as servers_router
from .uploads import router as uploads_router


def register_routes(app: FastAPI) -> None:
    """Register every API router on the FastAPI application."""

    app.include_router(auth_router)
    app.include_router(servers_router)
    app.include_router(uploads_router)
    app.include_router(deployments_router)
    app.include_router(health_router)
