"""Web-facing observers for plan lifecycle events.

Subscribes to the GLOBAL_EVENT_BUS for plan.created, plan.archived and
report.submitted and keeps a bounded in-memory feed the main-branch
dashboard polls through ``GET /api/events?since=<cursor>``.

  * Each event gets an auto-increment integer id (cursor) so clients can
    request only newer events.
  * A Lock guards the buffer: renewal runs on a scheduler thread while
    requests are served on the event loop / worker threads. The feed is
    per-process.
  * MAX_EVENTS caps memory.
"""
from __future__ import annotations
from typing import List, Dict, Any
from threading import Lock
from datetime import datetime
import logging

from .Event_Bus import GLOBAL_EVENT_BUS, PLAN_CREATED, PLAN_ARCHIVED, REPORT_SUBMITTED

logger = logging.getLogger(__name__)

_lock = Lock()
_events: List[Dict[str, Any]] = []
_next_id = 1
MAX_EVENTS = 300
_started = False


def _record(event_name: str, payload: Any):  # signature expected by EventBus
    global _next_id
    with _lock:
        evt: Dict[str, Any] = {
            'id': _next_id,
            'type': event_name,
            'ts': datetime.utcnow().isoformat() + 'Z',
        }
        if isinstance(payload, dict):
            plan = payload.get('plan')
            if plan is not None and hasattr(plan, 'period'):
                evt['plan_id'] = plan.id
                evt['month'] = plan.month
                evt['year'] = plan.year
                evt['target_amount'] = plan.target_amount
            for k in ('reports', 'activity_reports', 'kind', 'report_id', 'user_id', 'percentage', 'status'):
                if k in payload:
                    evt[k] = payload[k]
        _events.append(evt)
        _next_id += 1
        if len(_events) > MAX_EVENTS:
            del _events[: len(_events) - MAX_EVENTS]


def start():
    """Idempotent start: subscribe observers once."""
    global _started
    if _started:
        return
    for name in (PLAN_CREATED, PLAN_ARCHIVED, REPORT_SUBMITTED):
        GLOBAL_EVENT_BUS.subscribe(name, _record)
    _started = True
    logger.info("Web observers for plan events started")


def get_events(since: int | None = None) -> Dict[str, Any]:
    """Return events newer than 'since' (exclusive).

    Response includes next_cursor (largest id) so the client can poll with since=next_cursor.
    """
    with _lock:
        if since is None:
            data = list(_events)
        else:
            data = [e for e in _events if e['id'] > since]
        next_cursor = _events[-1]['id'] if _events else since or 0
    return {'events': data, 'next_cursor': next_cursor}


__all__ = ['start', 'get_events']
