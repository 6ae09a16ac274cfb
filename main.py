import asyncio
import logging
from contextlib import asynccontextmanager
from typing import Callable

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from sqlalchemy.orm import Session

from app.application.alerts import AlertRuntime, AsyncioScheduler
from app.config import get_settings
from app.infrastructure.database import SessionLocal, engine, initialize_database
from app.infrastructure.notifications import ConsoleConnectionManager, RealtimeChangeFeed
from app.interfaces.api.routes import register_routes

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Start the alert services on startup and release them on shutdown."""

    settings = get_settings()
    logging.basicConfig(
        level=settings.log_level.upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    session_factory = app.state.session_factory
    if session_factory is SessionLocal:
        initialize_database()

    feed = RealtimeChangeFeed()
    feed.attach(session_factory)
    consoles = ConsoleConnectionManager(settings.staff_route_prefixes)
    runtime = AlertRuntime(
        settings=settings,
        session_factory=session_factory,
        feed=feed,
        consoles=consoles,
        scheduler=AsyncioScheduler(asyncio.get_running_loop()),
    )
    runtime.start()
    app.state.change_feed = feed
    app.state.alert_runtime = runtime
    try:
        yield
    finally:
        runtime.shutdown()
        feed.detach()
        app.state.alert_runtime = None
        if session_factory is SessionLocal:
            engine.dispose()


def create_app(session_factory: Callable[[], Session] | None = None) -> FastAPI:
    """Create and configure the FastAPI application."""

    settings = get_settings()
    app = FastAPI(title="Flower Shop Order Alerts", lifespan=lifespan)
    app.state.session_factory = session_factory or SessionLocal
    app.state.alert_runtime = None

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    register_routes(app)
    return app


app = create_app()
