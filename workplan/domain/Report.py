"""Report domain entities: per-branch-user obligations to report against a plan."""
from datetime import datetime
from typing import Optional

from workplan.utilities.constants import REPORT_PENDING


def _iso(value: Optional[datetime]) -> Optional[str]:
    return value.isoformat() if value else None


class ReportStub:
    """Monthly report of one branch user against one plan."""

    def __init__(self, id: int, plan_id: int, branch_user_id: int,
                 achieved_amount: Optional[float] = None, progress_percentage: Optional[float] = None,
                 notes: Optional[str] = None, status: str = REPORT_PENDING,
                 submitted_at: Optional[datetime] = None):
        self.id = id
        self.plan_id = plan_id
        self.branch_user_id = branch_user_id
        self.achieved_amount = achieved_amount
        self.progress_percentage = progress_percentage
        self.notes = notes
        self.status = status
        self.submitted_at = submitted_at

    @property
    def is_pending(self) -> bool:
        return self.status == REPORT_PENDING

    def __repr__(self) -> str:
        return f"ReportStub(id={self.id}, plan={self.plan_id}, user={self.branch_user_id}, status={self.status})"

    def to_dict(self):
        return {
            "id": self.id,
            "monthly_plan_id": self.plan_id,
            "branch_user_id": self.branch_user_id,
            "achieved_amount": self.achieved_amount,
            "progress_percentage": self.progress_percentage,
            "notes": self.notes,
            "status": self.status,
            "submitted_at": _iso(self.submitted_at),
        }


class ActivityReport:
    """Report of one branch user against one activity within a plan's period."""

    def __init__(self, id: int, plan_id: int, activity_id: int, branch_user_id: int,
                 actual_amount: Optional[float] = None, implementation_percentage: Optional[float] = None,
                 notes: Optional[str] = None, status: str = REPORT_PENDING,
                 submitted_at: Optional[datetime] = None):
        self.id = id
        self.plan_id = plan_id
        self.activity_id = activity_id
        self.branch_user_id = branch_user_id
        self.actual_amount = actual_amount
        self.implementation_percentage = implementation_percentage
        self.notes = notes
        self.status = status
        self.submitted_at = submitted_at

    @property
    def is_pending(self) -> bool:
        return self.status == REPORT_PENDING

    def to_dict(self):
        return {
            "id": self.id,
            "monthly_plan_id": self.plan_id,
            "activity_id": self.activity_id,
            "branch_user_id": self.branch_user_id,
            "actual_activity": self.actual_amount,
            "implementation_percentage": self.implementation_percentage,
            "notes": self.notes,
            "status": self.status,
            "submitted_at": _iso(self.submitted_at),
        }
