"""SQLAlchemy schema and engine factory.

PostgreSQL in production (``postgresql+psycopg2://...``), SQLite for local
runs and tests. The uniqueness rules the renewal core relies on live here:
  * one active plan per (month, year): partial unique index
  * one monthly report per (plan, branch user)
  * one activity report per (plan, activity, branch user)
"""
from __future__ import annotations

from sqlalchemy import (
    CheckConstraint,
    Column,
    Date,
    DateTime,
    Float,
    ForeignKey,
    Index,
    Integer,
    String,
    Text,
    UniqueConstraint,
    create_engine,
    func,
    text,
)
from sqlalchemy.engine import Engine
from sqlalchemy.orm import declarative_base
from sqlalchemy.pool import StaticPool

Base = declarative_base()

_STATUS_ACTIVE = text("status = 'active'")


class UserRow(Base):
    __tablename__ = "users"
    id = Column(Integer, primary_key=True)
    username = Column(String(100), nullable=False, unique=True)
    branch_name = Column(String(200), nullable=False, default="")
    role = Column(String(50), nullable=False, index=True)
    created_at = Column(DateTime, server_default=func.now())


class PlanRow(Base):
    __tablename__ = "monthly_plans"
    id = Column(Integer, primary_key=True)
    title = Column(String(200), nullable=False)
    description = Column(Text, nullable=False, default="")
    month = Column(Integer, nullable=False)
    year = Column(Integer, nullable=False)
    target_amount = Column(Float, nullable=False, default=0.0)
    deadline = Column(Date, nullable=False)
    status = Column(String(16), nullable=False, default="active")
    created_at = Column(DateTime, server_default=func.now())
    updated_at = Column(DateTime, server_default=func.now())

    __table_args__ = (
        CheckConstraint("status IN ('active', 'archived')", name="ck_monthly_plans_status"),
        CheckConstraint("month BETWEEN 1 AND 12", name="ck_monthly_plans_month"),
        Index(
            "uq_monthly_plans_active_period", "month", "year",
            unique=True,
            sqlite_where=_STATUS_ACTIVE,
            postgresql_where=_STATUS_ACTIVE,
        ),
    )


class MonthlyReportRow(Base):
    __tablename__ = "monthly_reports"
    id = Column(Integer, primary_key=True)
    monthly_plan_id = Column(Integer, ForeignKey("monthly_plans.id", ondelete="CASCADE"), nullable=False, index=True)
    branch_user_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    achieved_amount = Column(Float, nullable=True)
    progress_percentage = Column(Float, nullable=True)
    notes = Column(Text, nullable=True)
    status = Column(String(16), nullable=False, default="pending")
    submitted_at = Column(DateTime, nullable=True)
    created_at = Column(DateTime, server_default=func.now())
    updated_at = Column(DateTime, server_default=func.now())

    __table_args__ = (
        UniqueConstraint("monthly_plan_id", "branch_user_id", name="uq_monthly_reports_plan_user"),
        CheckConstraint("status IN ('pending', 'submitted', 'late')", name="ck_monthly_reports_status"),
    )


class ActivityRow(Base):
    __tablename__ = "activities"
    id = Column(Integer, primary_key=True)
    action_number = Column(Integer, nullable=False, unique=True)
    action_title = Column(String(300), nullable=False)
    plan_activity = Column(Float, nullable=False)
    created_at = Column(DateTime, server_default=func.now())


class ActivityReportRow(Base):
    __tablename__ = "activity_reports"
    id = Column(Integer, primary_key=True)
    monthly_plan_id = Column(Integer, ForeignKey("monthly_plans.id", ondelete="CASCADE"), nullable=False, index=True)
    activity_id = Column(Integer, ForeignKey("activities.id", ondelete="CASCADE"), nullable=False, index=True)
    branch_user_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    actual_activity = Column(Float, nullable=True)
    implementation_percentage = Column(Float, nullable=True)
    notes = Column(Text, nullable=True)
    status = Column(String(16), nullable=False, default="pending")
    submitted_at = Column(DateTime, nullable=True)
    created_at = Column(DateTime, server_default=func.now())
    updated_at = Column(DateTime, server_default=func.now())

    __table_args__ = (
        UniqueConstraint("monthly_plan_id", "activity_id", "branch_user_id", name="uq_activity_reports_plan_activity_user"),
        CheckConstraint("status IN ('pending', 'submitted', 'late')", name="ck_activity_reports_status"),
    )


def build_engine(url: str, echo: bool = False) -> Engine:
    """Create an engine; in-memory SQLite shares one connection across threads."""
    if url.startswith("sqlite"):
        kwargs = {"connect_args": {"check_same_thread": False}}
        if url in ("sqlite://", "sqlite:///:memory:"):
            kwargs["poolclass"] = StaticPool
        return create_engine(url, echo=echo, **kwargs)
    return create_engine(url, echo=echo, pool_pre_ping=True)


def create_schema(engine: Engine) -> None:
    Base.metadata.create_all(engine)
