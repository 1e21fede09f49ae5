"""Plan repository: SQLAlchemy persistence for plans, reports, activities and branch users.

All reads and writes go through ``PlanRepository.transaction()``, which
yields a ``PlanStore`` bound to one session. The block commits on success
and rolls back on any exception. Storage exceptions are translated:
  IntegrityError  -> ConflictViolation (unique/check constraint hit)
  SQLAlchemyError -> RepositoryError
"""
from __future__ import annotations

import logging
from contextlib import contextmanager
from datetime import date, datetime
from typing import Iterable, Iterator, List, Optional, Sequence, Tuple

from sqlalchemy import insert, select, update
from sqlalchemy.engine import Engine
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session, sessionmaker

from workplan.domain.Activity import Activity
from workplan.domain.BranchUser import BranchUser
from workplan.domain.Period import Period
from workplan.domain.Plan import Plan
from workplan.domain.Report import ActivityReport, ReportStub
from workplan.domain.errors import ConflictViolation, RepositoryError
from workplan.infra.database import (
    ActivityReportRow,
    ActivityRow,
    MonthlyReportRow,
    PlanRow,
    UserRow,
    build_engine,
    create_schema,
)
from workplan.utilities.constants import PLAN_ACTIVE, PLAN_ARCHIVED, REPORT_PENDING, ROLE_BRANCH_USER

logger = logging.getLogger(__name__)

_STUB_FIELDS = {"achieved_amount", "progress_percentage", "notes", "status", "submitted_at"}
_ACTIVITY_REPORT_FIELDS = {"actual_activity", "implementation_percentage", "notes", "status", "submitted_at"}


def _to_plan(row: PlanRow) -> Plan:
    return Plan(
        id=row.id, title=row.title, description=row.description or "",
        month=row.month, year=row.year, target_amount=row.target_amount,
        deadline=row.deadline, status=row.status,
        created_at=row.created_at, updated_at=row.updated_at,
    )


def _to_stub(row: MonthlyReportRow) -> ReportStub:
    return ReportStub(
        id=row.id, plan_id=row.monthly_plan_id, branch_user_id=row.branch_user_id,
        achieved_amount=row.achieved_amount, progress_percentage=row.progress_percentage,
        notes=row.notes, status=row.status, submitted_at=row.submitted_at,
    )


def _to_activity_report(row: ActivityReportRow) -> ActivityReport:
    return ActivityReport(
        id=row.id, plan_id=row.monthly_plan_id, activity_id=row.activity_id,
        branch_user_id=row.branch_user_id, actual_amount=row.actual_activity,
        implementation_percentage=row.implementation_percentage,
        notes=row.notes, status=row.status, submitted_at=row.submitted_at,
    )


def _to_activity(row: ActivityRow) -> Activity:
    return Activity(id=row.id, number=row.action_number, title=row.action_title,
                    planned_amount=row.plan_activity, created_at=row.created_at)


def _to_user(row: UserRow) -> BranchUser:
    return BranchUser(id=row.id, username=row.username, branch_name=row.branch_name or "", role=row.role)


class PlanStore:
    """Repository operations bound to one open transaction."""

    def __init__(self, session: Session):
        self.session = session

    # -------------------- Plans --------------------
    def find_active_plan(self, period: Optional[Period] = None) -> Optional[Plan]:
        """Active plan for ``period``; with no period, the latest active plan of any period."""
        stmt = select(PlanRow).where(PlanRow.status == PLAN_ACTIVE)
        if period is not None:
            stmt = stmt.where(PlanRow.month == period.month, PlanRow.year == period.year)
        stmt = stmt.order_by(PlanRow.year.desc(), PlanRow.month.desc(), PlanRow.id.desc()).limit(1)
        row = self.session.execute(stmt).scalars().first()
        return _to_plan(row) if row else None

    def find_latest_plan(self, before: Period) -> Optional[Plan]:
        """Most recent plan of any status strictly before ``before``."""
        stmt = (
            select(PlanRow)
            .where((PlanRow.year < before.year) | ((PlanRow.year == before.year) & (PlanRow.month < before.month)))
            .order_by(PlanRow.year.desc(), PlanRow.month.desc(), PlanRow.id.desc())
            .limit(1)
        )
        row = self.session.execute(stmt).scalars().first()
        return _to_plan(row) if row else None

    def find_plan(self, plan_id: int) -> Optional[Plan]:
        row = self.session.get(PlanRow, plan_id)
        return _to_plan(row) if row else None

    def list_plans(self) -> List[Plan]:
        stmt = select(PlanRow).order_by(PlanRow.year.desc(), PlanRow.month.desc(), PlanRow.id.desc())
        return [_to_plan(r) for r in self.session.execute(stmt).scalars()]

    def create_plan(self, *, title: str, description: str, period: Period, target_amount: float,
                    deadline: date, created_at: Optional[datetime] = None) -> Plan:
        row = PlanRow(
            title=title, description=description, month=period.month, year=period.year,
            target_amount=target_amount, deadline=deadline, status=PLAN_ACTIVE,
        )
        if created_at is not None:
            row.created_at = created_at
            row.updated_at = created_at
        self.session.add(row)
        self.session.flush()
        return _to_plan(row)

    def archive_plan(self, plan_id: int) -> None:
        result = self.session.execute(
            update(PlanRow)
            .where(PlanRow.id == plan_id, PlanRow.status == PLAN_ACTIVE)
            .values(status=PLAN_ARCHIVED)
        )
        if result.rowcount != 1:
            raise ConflictViolation(f"Plan {plan_id} is not active and cannot be archived")

    def update_plan_target(self, plan_id: int, target_amount: float, updated_at: datetime) -> Plan:
        row = self.session.get(PlanRow, plan_id)
        row.target_amount = target_amount
        row.updated_at = updated_at
        self.session.flush()
        return _to_plan(row)

    # -------------------- Users --------------------
    def add_user(self, username: str, branch_name: str = "", role: str = ROLE_BRANCH_USER) -> BranchUser:
        row = UserRow(username=username, branch_name=branch_name, role=role)
        self.session.add(row)
        self.session.flush()
        return _to_user(row)

    def list_branch_users(self) -> List[BranchUser]:
        stmt = select(UserRow).where(UserRow.role == ROLE_BRANCH_USER).order_by(UserRow.id)
        return [_to_user(r) for r in self.session.execute(stmt).scalars()]

    def list_users(self, ids: Iterable[int]) -> List[BranchUser]:
        ids = list(set(ids))
        if not ids:
            return []
        stmt = select(UserRow).where(UserRow.id.in_(ids))
        return [_to_user(r) for r in self.session.execute(stmt).scalars()]

    # -------------------- Monthly reports --------------------
    def create_report_stubs(self, pairs: Sequence[Tuple[int, int]]) -> int:
        """Bulk insert pending stubs for (plan_id, user_id) pairs; returns the count."""
        if not pairs:
            return 0
        self.session.execute(
            insert(MonthlyReportRow),
            [{"monthly_plan_id": plan_id, "branch_user_id": user_id, "status": REPORT_PENDING}
             for plan_id, user_id in pairs],
        )
        return len(pairs)

    def find_stub(self, stub_id: int) -> Optional[ReportStub]:
        row = self.session.get(MonthlyReportRow, stub_id)
        return _to_stub(row) if row else None

    def update_stub(self, stub_id: int, **fields) -> None:
        """Write a submission onto a pending stub; ConflictViolation if it is no longer pending."""
        unknown = set(fields) - _STUB_FIELDS
        if unknown:
            raise ValueError(f"Unknown report fields: {sorted(unknown)}")
        fields["updated_at"] = fields.get("submitted_at") or datetime.now()
        result = self.session.execute(
            update(MonthlyReportRow)
            .where(MonthlyReportRow.id == stub_id, MonthlyReportRow.status == REPORT_PENDING)
            .values(**fields)
        )
        if result.rowcount != 1:
            raise ConflictViolation(f"Report {stub_id} is not pending and cannot be submitted")

    def list_stubs(self, plan_id: Optional[int] = None, user_id: Optional[int] = None) -> List[ReportStub]:
        stmt = select(MonthlyReportRow)
        if plan_id is not None:
            stmt = stmt.where(MonthlyReportRow.monthly_plan_id == plan_id)
        if user_id is not None:
            stmt = stmt.where(MonthlyReportRow.branch_user_id == user_id)
        stmt = stmt.order_by(MonthlyReportRow.monthly_plan_id, MonthlyReportRow.branch_user_id)
        return [_to_stub(r) for r in self.session.execute(stmt).scalars()]

    # -------------------- Activities --------------------
    def create_activity(self, number: int, title: str, planned_amount: float) -> Activity:
        row = ActivityRow(action_number=number, action_title=title, plan_activity=planned_amount)
        self.session.add(row)
        self.session.flush()
        return _to_activity(row)

    def find_activity(self, activity_id: int) -> Optional[Activity]:
        row = self.session.get(ActivityRow, activity_id)
        return _to_activity(row) if row else None

    def list_activities(self) -> List[Activity]:
        stmt = select(ActivityRow).order_by(ActivityRow.action_number)
        return [_to_activity(r) for r in self.session.execute(stmt).scalars()]

    def create_activity_reports(self, triples: Sequence[Tuple[int, int, int]]) -> int:
        """Bulk insert pending activity reports for (plan_id, activity_id, user_id) triples."""
        if not triples:
            return 0
        self.session.execute(
            insert(ActivityReportRow),
            [{"monthly_plan_id": plan_id, "activity_id": activity_id, "branch_user_id": user_id,
              "status": REPORT_PENDING}
             for plan_id, activity_id, user_id in triples],
        )
        return len(triples)

    def find_activity_report(self, report_id: int) -> Optional[ActivityReport]:
        row = self.session.get(ActivityReportRow, report_id)
        return _to_activity_report(row) if row else None

    def update_activity_report(self, report_id: int, **fields) -> None:
        unknown = set(fields) - _ACTIVITY_REPORT_FIELDS
        if unknown:
            raise ValueError(f"Unknown activity report fields: {sorted(unknown)}")
        fields["updated_at"] = fields.get("submitted_at") or datetime.now()
        result = self.session.execute(
            update(ActivityReportRow)
            .where(ActivityReportRow.id == report_id, ActivityReportRow.status == REPORT_PENDING)
            .values(**fields)
        )
        if result.rowcount != 1:
            raise ConflictViolation(f"Activity report {report_id} is not pending and cannot be submitted")

    def list_activity_reports(self, plan_id: Optional[int] = None, user_id: Optional[int] = None) -> List[ActivityReport]:
        stmt = select(ActivityReportRow)
        if plan_id is not None:
            stmt = stmt.where(ActivityReportRow.monthly_plan_id == plan_id)
        if user_id is not None:
            stmt = stmt.where(ActivityReportRow.branch_user_id == user_id)
        stmt = stmt.order_by(ActivityReportRow.monthly_plan_id, ActivityReportRow.activity_id,
                             ActivityReportRow.branch_user_id)
        return [_to_activity_report(r) for r in self.session.execute(stmt).scalars()]


class PlanRepository:
    def __init__(self, engine: Engine | str, create_tables: bool = True):
        self.engine = build_engine(engine) if isinstance(engine, str) else engine
        self._session_factory = sessionmaker(bind=self.engine, autoflush=False, expire_on_commit=False)
        if create_tables:
            create_schema(self.engine)

    @contextmanager
    def transaction(self) -> Iterator[PlanStore]:
        """Open a session, yield a store, commit on success, roll back on error."""
        session = self._session_factory()
        try:
            yield PlanStore(session)
            session.commit()
        except IntegrityError as e:
            session.rollback()
            raise ConflictViolation(str(e.orig) if e.orig is not None else str(e)) from e
        except SQLAlchemyError as e:
            session.rollback()
            logger.error("Repository transaction failed: %s", e)
            raise RepositoryError(str(e)) from e
        except BaseException:
            session.rollback()
            raise
        finally:
            session.close()
