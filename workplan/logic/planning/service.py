"""Plan-facing operations used by the HTTP layer.

Returns plain data (domain objects or dicts); HTTP concerns stay in
``workplan.api``.
"""
from __future__ import annotations

import logging
from datetime import datetime
from typing import Any, Dict, List, Optional

from workplan.domain.Activity import Activity
from workplan.domain.Plan import Plan
from workplan.domain.errors import NotFound
from workplan.infra.Plan_Repository import PlanRepository
from workplan.logic.calendar.fiscal import days_until_deadline, format_deadline, month_name
from workplan.logic.renewal.engine import RenewalEngine
from workplan.logic.reporting.statistics import (
    compute_activity_summary, compute_branch_comparison, compute_plan_stats,
)
from workplan.logic.reporting.submission import parse_input
from workplan.utilities.validators import ActivityInput, TargetUpdateInput

logger = logging.getLogger(__name__)


def describe_plan(plan: Plan, now: Optional[datetime] = None) -> Dict[str, Any]:
    """Plan dict enriched with fiscal month names and the days left to report."""
    data = plan.to_dict()
    data['month_name'] = month_name(plan.month, 'english')
    data['month_name_amharic'] = month_name(plan.month, 'amharic')
    data['deadline_display'] = format_deadline(plan.deadline, plan.month, 'english')
    data['days_until_deadline'] = days_until_deadline(plan.deadline, now or datetime.now())
    return data


class PlanService:
    def __init__(self, repository: PlanRepository, engine: Optional[RenewalEngine] = None):
        self.repository = repository
        self.engine = engine or RenewalEngine(repository)

    # -------------------- Monthly plans --------------------
    def get_current_plan(self, now: Optional[datetime] = None) -> Plan:
        return self.engine.ensure_current_plan(now)

    def update_plan_target(self, new_target, now: Optional[datetime] = None) -> Plan:
        data = parse_input(TargetUpdateInput, {"target_amount": new_target})
        with self.repository.transaction() as store:
            active = store.find_active_plan()
            if active is None:
                raise NotFound("No active monthly plan found")
            plan = store.update_plan_target(active.id, data.target_amount, now or datetime.now())
        logger.info("Target of plan %s (%s) set to %s", plan.id, plan.period, plan.target_amount)
        return plan

    def get_plan(self, plan_id: int) -> Plan:
        with self.repository.transaction() as store:
            plan = store.find_plan(plan_id)
        if plan is None:
            raise NotFound("Monthly plan not found")
        return plan

    def list_plans(self) -> List[Plan]:
        with self.repository.transaction() as store:
            return store.list_plans()

    def plan_stats(self, plan_id: int) -> Dict[str, Any]:
        with self.repository.transaction() as store:
            plan = store.find_plan(plan_id)
            if plan is None:
                raise NotFound("Monthly plan not found")
            reports = store.list_stubs(plan_id=plan_id)
        return compute_plan_stats(plan, reports)

    # -------------------- Monthly reports --------------------
    def plan_reports(self, plan_id: int) -> List[Dict[str, Any]]:
        """Every branch report of a plan, with user and plan context, ordered by branch."""
        with self.repository.transaction() as store:
            plan = store.find_plan(plan_id)
            if plan is None:
                raise NotFound("Monthly plan not found")
            reports = store.list_stubs(plan_id=plan_id)
            users = {u.id: u for u in store.list_users(r.branch_user_id for r in reports)}
        rows = []
        for r in reports:
            row = r.to_dict()
            user = users.get(r.branch_user_id)
            row.update({
                'month': plan.month, 'year': plan.year,
                'target_amount': plan.target_amount, 'deadline': plan.deadline.isoformat(),
                'username': user.username if user else None,
                'branch_name': user.branch_name if user else None,
            })
            rows.append(row)
        rows.sort(key=lambda x: (x['branch_name'] or '', x['status']))
        return rows

    def my_reports(self, user_id: int) -> List[Dict[str, Any]]:
        """A branch user's monthly reports, newest period first."""
        with self.repository.transaction() as store:
            reports = store.list_stubs(user_id=user_id)
            plans = {p.id: p for p in store.list_plans()}
        rows = []
        for r in reports:
            plan = plans[r.plan_id]
            row = r.to_dict()
            row.update({
                'month': plan.month, 'year': plan.year,
                'target_amount': plan.target_amount, 'deadline': plan.deadline.isoformat(),
                'plan_title': plan.title, 'plan_status': plan.status,
            })
            rows.append(row)
        rows.sort(key=lambda x: (x['year'], x['month']), reverse=True)
        return rows

    def branch_comparison(self, plan_id: int) -> List[Dict[str, Any]]:
        with self.repository.transaction() as store:
            if store.find_plan(plan_id) is None:
                raise NotFound("Monthly plan not found")
            reports = store.list_stubs(plan_id=plan_id)
            users = store.list_branch_users()
        return compute_branch_comparison(users, reports)

    # -------------------- Activities --------------------
    def create_activity(self, payload: dict) -> Dict[str, Any]:
        """Define an activity and fan out its reports against the active plan, if any."""
        data = parse_input(ActivityInput, payload)
        with self.repository.transaction() as store:
            activity = store.create_activity(data.number, data.title, data.planned_amount)
            active = store.find_active_plan()
            created = 0
            if active is not None:
                users = store.list_branch_users()
                created = store.create_activity_reports([(active.id, activity.id, u.id) for u in users])
        logger.info("Activity %s created with %d reports", activity.number, created)
        return {'activity': activity.to_dict(), 'reports_created': created}

    def list_activities(self) -> List[Activity]:
        with self.repository.transaction() as store:
            return store.list_activities()

    def my_activity_reports(self, user_id: int) -> List[Dict[str, Any]]:
        with self.repository.transaction() as store:
            reports = store.list_activity_reports(user_id=user_id)
            plans = {p.id: p for p in store.list_plans()}
            activities = {a.id: a for a in store.list_activities()}
        rows = []
        for r in reports:
            plan = plans[r.plan_id]
            activity = activities[r.activity_id]
            row = r.to_dict()
            row.update({
                'action_number': activity.number, 'action_title': activity.title,
                'plan_activity': activity.planned_amount,
                'month': plan.month, 'year': plan.year, 'deadline': plan.deadline.isoformat(),
            })
            rows.append(row)
        rows.sort(key=lambda x: (-x['year'], -x['month'], x['action_number']))
        return rows

    def plan_activity_reports(self, plan_id: int) -> List[Dict[str, Any]]:
        """Every activity report of a plan with activity and branch context, by activity then branch."""
        with self.repository.transaction() as store:
            plan = store.find_plan(plan_id)
            if plan is None:
                raise NotFound("Monthly plan not found")
            reports = store.list_activity_reports(plan_id=plan_id)
            activities = {a.id: a for a in store.list_activities()}
            users = {u.id: u for u in store.list_users(r.branch_user_id for r in reports)}
        rows = []
        for r in reports:
            activity = activities[r.activity_id]
            user = users.get(r.branch_user_id)
            row = r.to_dict()
            row.update({
                'action_number': activity.number, 'action_title': activity.title,
                'plan_activity': activity.planned_amount,
                'month': plan.month, 'year': plan.year,
                'username': user.username if user else None,
                'branch_name': user.branch_name if user else None,
            })
            rows.append(row)
        rows.sort(key=lambda x: (x['action_number'], x['branch_name'] or ''))
        return rows

    def activity_summary(self, plan_id: int) -> List[Dict[str, Any]]:
        with self.repository.transaction() as store:
            if store.find_plan(plan_id) is None:
                raise NotFound("Monthly plan not found")
            reports = store.list_activity_reports(plan_id=plan_id)
            users = store.list_branch_users()
        return compute_activity_summary(users, reports)
