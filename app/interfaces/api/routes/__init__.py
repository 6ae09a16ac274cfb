from fastapi import FastAPI

from .alerts import router as alerts_router
from .notifications import router as notifications_router
from .orders import router as orders_router


def register_routes(app: FastAPI) -> None:
    """Register every API router on the FastAPI application."""

    app.include_router(alerts_router)
    app.include_router(notifications_router)
    app.include_router(orders_router)
