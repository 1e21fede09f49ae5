"""Activity domain entity: a standing monthly activity target set by the main branch."""
from datetime import datetime
from typing import Optional


class Activity:
    def __init__(self, id: int, number: int, title: str, planned_amount: float,
                 created_at: Optional[datetime] = None):
        self.id = id
        self.number = number
        self.title = title
        self.planned_amount = planned_amount
        self.created_at = created_at

    def __repr__(self) -> str:
        return f"Activity(id={self.id}, number={self.number}, title={self.title!r})"

    def to_dict(self):
        return {
            "id": self.id,
            "action_number": self.number,
            "action_title": self.title,
            "plan_activity": self.planned_amount,
            "created_at": self.created_at.isoformat() if self.created_at else None,
        }
