"""Report submission: records achievements against a plan and classifies lateness.

Percentage policy per report kind:
  monthly  -> achieved / target * 100, unclamped (over-achievement is meaningful)
  activity -> actual / planned * 100, clamped to ACTIVITY_PERCENTAGE_CAP

A report moves pending -> submitted|late exactly once; resubmission raises
ConflictViolation.
"""
from __future__ import annotations

import logging
from datetime import date, datetime
from typing import Optional, Type

from pydantic import BaseModel, ValidationError as PydanticValidationError

from workplan.domain.errors import ConflictViolation, NotFound, ValidationError
from workplan.events.event_helpers import publish_report_submitted
from workplan.infra.Plan_Repository import PlanRepository
from workplan.logic.calendar.fiscal import deadline_at
from workplan.utilities.constants import ACTIVITY_PERCENTAGE_CAP, REPORT_LATE, REPORT_SUBMITTED
from workplan.utilities.validators import ActivityReportSubmissionInput, ReportSubmissionInput

logger = logging.getLogger(__name__)

__all__ = ["ReportSubmissionHandler", "completion_percentage", "classify_submission", "parse_input"]


def completion_percentage(achieved: float, target: float, *, cap: Optional[float] = None) -> float:
    """``achieved / target * 100``; 0 when the target is not positive."""
    if not target or target <= 0:
        return 0.0
    pct = (achieved / target) * 100
    if cap is not None:
        pct = min(pct, cap)
    return pct


def classify_submission(now: datetime, deadline: date) -> str:
    """``late`` once ``now`` is past 00:00 of the deadline day, else ``submitted``.

    The deadline day itself is not inclusive: a report sent at 09:00 on the
    18th is late. Only a submission at exactly midnight still counts as on time.
    """
    return REPORT_LATE if now > deadline_at(deadline) else REPORT_SUBMITTED


def parse_input(schema: Type[BaseModel], data: dict) -> BaseModel:
    """Validate raw input with ``schema``; pydantic errors become ValidationError."""
    try:
        return schema.model_validate(data)
    except PydanticValidationError as e:
        messages = "; ".join(
            f"{'.'.join(str(p) for p in err['loc']) or 'input'}: {err['msg']}" for err in e.errors()
        )
        raise ValidationError(messages) from e


class ReportSubmissionHandler:
    def __init__(self, repository: PlanRepository):
        self.repository = repository

    def submit(self, stub_id, achieved_amount, notes=None, *, user_id: int,
               now: Optional[datetime] = None) -> dict:
        """Record a monthly report submission for ``user_id``.

        Raises ValidationError for malformed input, NotFound when the report
        is missing or owned by another user, ConflictViolation when it was
        already submitted.
        """
        data = parse_input(ReportSubmissionInput, {
            "report_id": stub_id, "achieved_amount": achieved_amount, "notes": notes,
        })
        now = now or datetime.now()
        with self.repository.transaction() as store:
            stub = store.find_stub(data.report_id)
            if stub is None or stub.branch_user_id != user_id:
                raise NotFound("Report not found")
            if not stub.is_pending:
                raise ConflictViolation(f"Report {stub.id} was already submitted ({stub.status})")
            plan = store.find_plan(stub.plan_id)
            if plan is None:
                raise NotFound("Monthly plan not found")
            percentage = completion_percentage(data.achieved_amount, plan.target_amount)
            status = classify_submission(now, plan.deadline)
            store.update_stub(
                stub.id,
                achieved_amount=data.achieved_amount,
                progress_percentage=percentage,
                notes=data.notes,
                status=status,
                submitted_at=now,
            )
        logger.info("Monthly report %s submitted by user %s: %.2f%% (%s)", stub.id, user_id, percentage, status)
        publish_report_submitted("monthly", stub.id, user_id, percentage, status)
        return {"report_id": stub.id, "percentage": percentage, "status": status}

    def submit_activity(self, report_id, actual_amount, notes=None, *, user_id: int,
                        now: Optional[datetime] = None) -> dict:
        """Record an activity report submission; the percentage is capped."""
        data = parse_input(ActivityReportSubmissionInput, {
            "report_id": report_id, "actual_amount": actual_amount, "notes": notes,
        })
        now = now or datetime.now()
        with self.repository.transaction() as store:
            report = store.find_activity_report(data.report_id)
            if report is None or report.branch_user_id != user_id:
                raise NotFound("Activity report not found")
            if not report.is_pending:
                raise ConflictViolation(f"Activity report {report.id} was already submitted ({report.status})")
            activity = store.find_activity(report.activity_id)
            plan = store.find_plan(report.plan_id)
            if activity is None or plan is None:
                raise NotFound("Activity report not found")
            percentage = completion_percentage(data.actual_amount, activity.planned_amount,
                                               cap=ACTIVITY_PERCENTAGE_CAP)
            status = classify_submission(now, plan.deadline)
            store.update_activity_report(
                report.id,
                actual_activity=data.actual_amount,
                implementation_percentage=percentage,
                notes=data.notes,
                status=status,
                submitted_at=now,
            )
        logger.info("Activity report %s submitted by user %s: %.2f%% (%s)", report.id, user_id, percentage, status)
        publish_report_submitted("activity", report.id, user_id, percentage, status)
        return {"report_id": report.id, "percentage": percentage, "status": status}
