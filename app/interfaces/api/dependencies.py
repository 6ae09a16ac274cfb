"""FastAPI dependency utilities."""

from collections.abc import Generator

from fastapi import HTTPException, Request, status
from sqlalchemy.orm import Session

from app.application.alerts import AlertRuntime


def get_db(request: Request) -> Generator[Session, None, None]:
    """Yield a session from the application's session factory."""

    db = request.app.state.session_factory()
    try:
        yield db
    finally:
        db.close()


def get_alert_runtime(request: Request) -> AlertRuntime:
    """Return the alert services built at application start."""

    runtime = getattr(request.app.state, "alert_runtime", None)
    if runtime is None:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="Alert services are not running",
        )
    return runtime
