"""Plan statistics and branch comparison.

Pure aggregation over domain objects loaded by the repository.
"""
from __future__ import annotations
from collections import defaultdict
from typing import Any, Dict, Iterable, List, Optional

from workplan.domain.BranchUser import BranchUser
from workplan.domain.Plan import Plan
from workplan.domain.Report import ActivityReport, ReportStub
from workplan.utilities.constants import REPORT_LATE, REPORT_PENDING, REPORT_SUBMITTED

__all__ = ["compute_plan_stats", "compute_branch_comparison", "compute_activity_summary"]


def _mean(values: List[float]) -> Optional[float]:
    return sum(values) / len(values) if values else None


def compute_plan_stats(plan: Plan, reports: Iterable[ReportStub]) -> Dict[str, Any]:
    """Plan fields plus report counts, total achieved and average progress.

    Unsubmitted reports count toward ``total_reports`` but not toward the
    achieved total or the average (which is None when nothing was submitted).
    """
    reports = list(reports)
    achieved = [r.achieved_amount for r in reports if r.achieved_amount is not None]
    progress = [r.progress_percentage for r in reports if r.progress_percentage is not None]
    stats = plan.to_dict()
    stats.update({
        'total_reports': len(reports),
        'submitted_reports': sum(1 for r in reports if r.status == REPORT_SUBMITTED),
        'pending_reports': sum(1 for r in reports if r.status == REPORT_PENDING),
        'late_reports': sum(1 for r in reports if r.status == REPORT_LATE),
        'total_achieved': sum(achieved) if achieved else None,
        'avg_progress': _mean(progress),
    })
    return stats


def _per_branch(users: Iterable[BranchUser], reports, progress_of, total_key: str, avg_key: str) -> List[Dict[str, Any]]:
    """One row per branch user with status counts and mean progress; best average first.

    Users without reports get zero counts and an average of 0.
    """
    by_user: Dict[int, list] = defaultdict(list)
    for r in reports:
        by_user[r.branch_user_id].append(r)

    rows = []
    for user in users:
        own = by_user.get(user.id, [])
        progress = [progress_of(r) for r in own if progress_of(r) is not None]
        rows.append({
            'id': user.id,
            'username': user.username,
            'branch_name': user.branch_name,
            total_key: len(own),
            'submitted_on_time': sum(1 for r in own if r.status == REPORT_SUBMITTED),
            'submitted_late': sum(1 for r in own if r.status == REPORT_LATE),
            'pending': sum(1 for r in own if r.status == REPORT_PENDING),
            avg_key: _mean(progress) or 0,
        })
    rows.sort(key=lambda x: (-x[avg_key], x['branch_name'], x['id']))
    return rows


def compute_branch_comparison(users: Iterable[BranchUser], reports: Iterable[ReportStub]) -> List[Dict[str, Any]]:
    """Monthly report comparison across branches, with the achieved total per branch."""
    reports = list(reports)
    rows = _per_branch(users, reports, lambda r: r.progress_percentage, 'total_reports', 'avg_progress')
    achieved: Dict[int, float] = defaultdict(float)
    for r in reports:
        achieved[r.branch_user_id] += r.achieved_amount or 0
    for row in rows:
        row['total_achieved'] = achieved.get(row['id'], 0)
    return rows


def compute_activity_summary(users: Iterable[BranchUser], reports: Iterable[ActivityReport]) -> List[Dict[str, Any]]:
    """Activity report summary per branch: counts by status and average implementation."""
    return _per_branch(users, reports, lambda r: r.implementation_percentage, 'total_actions', 'avg_implementation')
