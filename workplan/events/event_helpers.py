"""Event helper utilities.

Quick import:
    from workplan.events.event_helpers import (
        publish_plan_created, publish_plan_archived, publish_report_submitted
    )
"""
from __future__ import annotations
from typing import Any
from .Event_Bus import publish, PLAN_CREATED, PLAN_ARCHIVED, REPORT_SUBMITTED

__all__ = [
    'publish_plan_created', 'publish_plan_archived', 'publish_report_submitted',
    'PLAN_CREATED', 'PLAN_ARCHIVED', 'REPORT_SUBMITTED',
]


def publish_plan_created(plan: Any, reports: int, activity_reports: int = 0):
    """Publish a plan.created event after the creating transaction committed."""
    publish(PLAN_CREATED, {
        'plan': plan,
        'reports': reports,
        'activity_reports': activity_reports,
    })


def publish_plan_archived(plan: Any):
    publish(PLAN_ARCHIVED, {'plan': plan})


def publish_report_submitted(kind: str, report_id: int, user_id: int, percentage: float, status: str):
    publish(REPORT_SUBMITTED, {
        'kind': kind,
        'report_id': report_id,
        'user_id': user_id,
        'percentage': percentage,
        'status': status,
    })
