"""Monthly plan renewal engine.

State machine over the single active-plan slot, evaluated by
``check_and_renew(now)`` on every scheduler tick:

  no active plan                 -> create plan for current_period(now), fan out
  active, now <= deadline        -> nothing
  active, now >  deadline        -> archive it, create plan for the next period, fan out

Archive, create and fan-out happen in one repository transaction. Fan-out
snapshots the branch users present at creation time and inserts one pending
monthly report per user, plus one pending activity report per
(activity, user), as two bulk inserts.
"""
from __future__ import annotations

import logging
from datetime import datetime
from typing import Optional, Tuple

from workplan.domain.Period import Period
from workplan.domain.Plan import Plan
from workplan.domain.errors import ConflictViolation, NotFound, RepositoryError
from workplan.events.event_helpers import publish_plan_archived, publish_plan_created
from workplan.infra.Plan_Repository import PlanRepository, PlanStore
from workplan.logic.calendar.fiscal import current_period, deadline_at, deadline_for, month_name, next_period
from workplan.utilities.constants import PLAN_ARCHIVED

logger = logging.getLogger(__name__)

__all__ = ["RenewalEngine", "CREATED", "RENEWED", "UNCHANGED", "FAILED"]

CREATED = "created"
RENEWED = "renewed"
UNCHANGED = "unchanged"
FAILED = "failed"


class RenewalEngine:
    def __init__(self, repository: PlanRepository):
        self.repository = repository

    def check_and_renew(self, now: Optional[datetime] = None) -> str:
        """Run one renewal tick. Never raises for storage or uniqueness failures.

        Returns one of CREATED, RENEWED, UNCHANGED, FAILED.
        """
        now = now or datetime.now()
        period = current_period(now)
        archived: Optional[Plan] = None
        try:
            with self.repository.transaction() as store:
                active = store.find_active_plan()
                if active is None:
                    created, counts = self._create_for_current(store, period, now)
                    outcome = CREATED
                elif now <= deadline_at(active.deadline):
                    return UNCHANGED
                else:
                    logger.info("Deadline %s passed for plan %s; rolling over", active.deadline, active.period)
                    store.archive_plan(active.id)
                    archived = active
                    created, counts = self._materialize(store, next_period(active.period),
                                                        active.target_amount, now)
                    outcome = RENEWED
        except (ConflictViolation, RepositoryError) as e:
            logger.error("Plan renewal failed for period %s at %s: %s", period, now.isoformat(), e)
            return FAILED

        if archived is not None:
            archived.status = PLAN_ARCHIVED
            publish_plan_archived(archived)
        publish_plan_created(created, *counts)
        logger.info("Plan %s for %s %s (%d reports, %d activity reports)",
                    outcome, created.period, created.title, counts[0], counts[1])
        return outcome

    def ensure_current_plan(self, now: Optional[datetime] = None) -> Plan:
        """Return the active plan, creating the current period's plan if none is active.

        Unlike ``check_and_renew`` errors propagate, except a creation race
        lost to a concurrent tick, which is resolved by re-reading.
        """
        now = now or datetime.now()
        period = current_period(now)
        try:
            with self.repository.transaction() as store:
                active = store.find_active_plan()
                if active is not None:
                    return active
                created, counts = self._create_for_current(store, period, now)
        except ConflictViolation:
            logger.info("Plan for %s was created concurrently; re-reading", period)
            with self.repository.transaction() as store:
                active = store.find_active_plan()
            if active is None:
                raise NotFound("No active monthly plan found")
            return active
        publish_plan_created(created, *counts)
        return created

    def _create_for_current(self, store: PlanStore, period: Period, now: datetime) -> Tuple[Plan, Tuple[int, int]]:
        previous = store.find_latest_plan(before=period)
        target = previous.target_amount if previous is not None else 0.0
        return self._materialize(store, period, target, now)

    def _materialize(self, store: PlanStore, period: Period, target: float,
                     now: datetime) -> Tuple[Plan, Tuple[int, int]]:
        name = month_name(period.month, "english")
        plan = store.create_plan(
            title=f"Monthly Plan - {name} {period.year}",
            description=f"Auto-generated monthly plan for fiscal month {period.month} ({name}) of {period.year}",
            period=period,
            target_amount=target,
            deadline=deadline_for(period.month, period.year),
            created_at=now,
        )
        users = store.list_branch_users()
        activities = store.list_activities()
        reports = store.create_report_stubs([(plan.id, u.id) for u in users])
        activity_reports = store.create_activity_reports(
            [(plan.id, a.id, u.id) for a in activities for u in users]
        )
        return plan, (reports, activity_reports)
