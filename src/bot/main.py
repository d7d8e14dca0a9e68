"""Main FastAPI application entry point."""

from contextlib import asynccontextmanager

import structlog
import uvicorn
from fastapi import FastAPI

from identity.presentation import routes as identity_routes
from infrastructure.dependencies import get_calendar_client
from infrastructure.logging import configure_logging
from infrastructure.settings import get_settings, get_watcher_settings
from infrastructure.version import __version__
from notification.dependencies import get_notification_router
from reservation.application.services import ChangeNotificationService
from reservation.dependencies import get_resource_usage_repository
from reservation.infrastructure.change_watcher import ChangeWatcher
from reservation.presentation import routes as reservation_routes

logger = structlog.get_logger()


@asynccontextmanager
async def run_change_watcher(app: FastAPI):
    """Take the baseline snapshot and poll for changes until shutdown.

    A failing baseline snapshot aborts startup: without it the first poll
    would report every existing reservation as new.
    """
    watcher_settings = get_watcher_settings()
    if not watcher_settings.enabled:
        logger.info("change_watcher_disabled")
        yield
        return

    service = await ChangeNotificationService.create(
        repository=get_resource_usage_repository(),
        notifier=get_notification_router(),
    )
    watcher = ChangeWatcher(
        service, poll_interval_seconds=watcher_settings.poll_interval_seconds
    )
    app.state.change_watcher = watcher
    await watcher.start()

    try:
        yield
    finally:
        await watcher.stop()


@asynccontextmanager
async def lab_resource_manager_lifespan(app: FastAPI):
    """Application lifespan context.

    Manages:
    - Logging configuration
    - Change watcher start/stop
    - HTTP client pools (closed on shutdown)
    """
    settings = get_settings()
    configure_logging(debug=settings.debug)

    async with run_change_watcher(app):
        yield

    await get_notification_router().aclose()
    if settings.repository_backend == "google_calendar":
        await get_calendar_client().aclose()


app = FastAPI(
    title="Lab Resource Manager",
    description="Reservations of shared lab GPUs and rooms, backed by Google Calendar",
    version=__version__,
    lifespan=lab_resource_manager_lifespan,
)

app.include_router(reservation_routes.router)
app.include_router(identity_routes.router)


@app.get("/health")
def health():
    """Basic health check endpoint."""
    return {"status": "ok"}


@app.get("/health/watcher")
def health_watcher() -> dict:
    """Report whether the change watcher is polling."""
    watcher: ChangeWatcher | None = getattr(app.state, "change_watcher", None)
    if watcher is None:
        return {"status": "disabled"}
    return {
        "status": "ok" if watcher.is_running else "stopped",
        "poll_cycle": watcher.poll_cycle,
    }


def run() -> None:
    """Serve the application with uvicorn."""
    settings = get_settings()
    uvicorn.run(
        "main:app",
        host=settings.host,
        port=settings.port,
        reload=settings.debug,
    )


if __name__ == "__main__":
    run()
