"""Plan domain entity: the target and deadline for one fiscal period."""
from datetime import date, datetime
from typing import Optional

from workplan.domain.Period import Period
from workplan.utilities.constants import PLAN_ACTIVE


class Plan:
    def __init__(self, id: int, title: str, month: int, year: int, target_amount: float,
                 deadline: date, status: str = PLAN_ACTIVE, description: str = "",
                 created_at: Optional[datetime] = None, updated_at: Optional[datetime] = None):
        self.id = id
        self.title = title
        self.description = description
        self.month = month
        self.year = year
        self.target_amount = target_amount
        self.deadline = deadline
        self.status = status
        self.created_at = created_at
        self.updated_at = updated_at

    @property
    def period(self) -> Period:
        return Period(self.month, self.year)

    def __repr__(self) -> str:
        return f"Plan(id={self.id}, period={self.period}, status={self.status}, target={self.target_amount})"

    def to_dict(self):
        '''Plain JSON-friendly representation used by the HTTP layer.'''
        return {
            "id": self.id,
            "title": self.title,
            "description": self.description,
            "month": self.month,
            "year": self.year,
            "target_amount": self.target_amount,
            "deadline": self.deadline.isoformat() if self.deadline else None,
            "status": self.status,
            "created_at": self.created_at.isoformat() if self.created_at else None,
            "updated_at": self.updated_at.isoformat() if self.updated_at else None,
        }
