"""Simple Event Bus / Observer implementation for plan lifecycle events.

Event names used so far:
  plan.created     -> payload {"plan": Plan, "reports": int, "activity_reports": int}
  plan.archived    -> payload {"plan": Plan}
  report.submitted -> payload {"kind": "monthly"|"activity", "report_id": int, "user_id": int,
                               "percentage": float, "status": str}

Subscribers are callables taking (event_name, payload).
"""
from __future__ import annotations
from collections import defaultdict
from typing import Callable, Any, Dict, List
import logging

logger = logging.getLogger(__name__)

# --- Event name constants (used across modules) ---
PLAN_CREATED = "plan.created"
PLAN_ARCHIVED = "plan.archived"
REPORT_SUBMITTED = "report.submitted"


class EventBus:
    def __init__(self):
        self._subscribers: Dict[str, List[Callable[[str, Any], None]]] = defaultdict(list)

    def subscribe(self, event_name: str, callback: Callable[[str, Any], None]):
        if callback not in self._subscribers[event_name]:
            self._subscribers[event_name].append(callback)

    def unsubscribe(self, event_name: str, callback: Callable[[str, Any], None]):
        try:
            self._subscribers[event_name].remove(callback)
        except (ValueError, KeyError):
            pass

    def publish(self, event_name: str, payload: Any):
        # Subscriber errors are logged, never raised to the publisher.
        for cb in list(self._subscribers.get(event_name, [])):
            try:
                cb(event_name, payload)
            except Exception:
                logger.exception("Error delivering %s to %r", event_name, cb)


# Process-wide instance
GLOBAL_EVENT_BUS = EventBus()


def publish(event_name: str, payload: Any = None) -> None:
    """Publish an event on the global bus."""
    GLOBAL_EVENT_BUS.publish(event_name, payload)


__all__ = ['EventBus', 'GLOBAL_EVENT_BUS', 'publish', 'PLAN_CREATED', 'PLAN_ARCHIVED', 'REPORT_SUBMITTED']
