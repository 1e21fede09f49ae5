from fastapi import FastAPI, Query, Request
from fastapi.responses import JSONResponse

from typing import Optional
import logging

from workplan.api.deps import get_repository
from workplan.api.routes import activities, plans, reports
from workplan.domain.errors import ConflictViolation, NotFound, RepositoryError, ValidationError
from workplan.events.web_observers import start as start_event_observers, get_events as get_web_events
from workplan.infra.scheduler import start_scheduler
from workplan.logic.renewal.engine import RenewalEngine
from workplan.utilities.config import DEBUG, SCHEDULER_ENABLED

# Logging
logger = logging.getLogger("workplan_app")

# Initialize FastAPI app
app = FastAPI(title="Work Progress Tracker API", debug=DEBUG)

# Include routers
app.include_router(plans.router)
app.include_router(reports.router)
app.include_router(activities.router)

_scheduler = None


# -------------------- Error mapping --------------------
def _error_response(status_code: int, exc: Exception) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"detail": str(exc)})


@app.exception_handler(NotFound)
def _not_found(request: Request, exc: NotFound):
    return _error_response(404, exc)


@app.exception_handler(ConflictViolation)
def _conflict(request: Request, exc: ConflictViolation):
    logger.warning("Conflict on %s %s: %s", request.method, request.url.path, exc)
    return _error_response(409, exc)


@app.exception_handler(ValidationError)
def _invalid(request: Request, exc: ValidationError):
    return _error_response(400, exc)


@app.exception_handler(RepositoryError)
def _storage_unavailable(request: Request, exc: RepositoryError):
    logger.error("Storage failure on %s %s: %s", request.method, request.url.path, exc)
    return _error_response(503, exc)


# -------------------- Lifecycle --------------------
@app.on_event("startup")
def _startup_web_observers():
    """Register event bus subscribers for the dashboard feed."""
    start_event_observers()


@app.on_event("startup")
def _startup_scheduler():
    global _scheduler
    if not SCHEDULER_ENABLED:
        logger.info("Plan renewal scheduler disabled")
        return
    _scheduler = start_scheduler(RenewalEngine(get_repository()))


@app.on_event("shutdown")
def _shutdown_scheduler():
    global _scheduler
    if _scheduler is not None:
        _scheduler.shutdown(wait=False)
        _scheduler = None


# -------------------- API: Health --------------------
@app.get('/api/health')
def health():
    return {"status": "OK", "message": "Work Progress Tracker API is running"}


# -------------------- API: Plan events (polled by the dashboard) --------------------
@app.get('/api/events')
def api_events(
    since: Optional[int] = Query(default=None, description="Return events with id greater than this value")
):
    """
    Return recent plan lifecycle events (plan created/archived, report submitted).

    Client polling strategy:
        1. First call without 'since' to load the current backlog.
        2. Store 'next_cursor' from the response.
        3. Subsequent polls: /api/events?since=<next_cursor>
    """
    return get_web_events(since)
