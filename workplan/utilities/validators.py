"""
Input validation schemas using Pydantic.

Field aliases follow the camelCase names the web client sends; snake_case
names are accepted as well.
"""
import math
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator


def _finite_non_negative(v: float) -> float:
    if not math.isfinite(v):
        raise ValueError('Amount must be a finite number')
    if v < 0:
        raise ValueError('Amount cannot be negative')
    return v


class ReportSubmissionInput(BaseModel):
    """Schema for a monthly report submission."""
    model_config = ConfigDict(populate_by_name=True)

    report_id: int = Field(..., gt=0, alias='reportId')
    achieved_amount: float = Field(..., alias='achievedAmount')
    notes: Optional[str] = Field(None, max_length=2000)

    @field_validator('achieved_amount')
    @classmethod
    def validate_amount(cls, v):
        return _finite_non_negative(v)

    @field_validator('notes')
    @classmethod
    def strip_notes(cls, v):
        """Blank notes are stored as NULL."""
        if v is None:
            return None
        v = v.strip()
        return v or None


class ActivityReportSubmissionInput(BaseModel):
    """Schema for a per-activity report submission."""
    model_config = ConfigDict(populate_by_name=True)

    report_id: int = Field(..., gt=0, alias='reportId')
    actual_amount: float = Field(..., alias='actualActivity')
    notes: Optional[str] = Field(None, max_length=2000)

    @field_validator('actual_amount')
    @classmethod
    def validate_amount(cls, v):
        return _finite_non_negative(v)

    @field_validator('notes')
    @classmethod
    def strip_notes(cls, v):
        if v is None:
            return None
        v = v.strip()
        return v or None


class TargetUpdateInput(BaseModel):
    """Schema for changing the current plan's target."""
    model_config = ConfigDict(populate_by_name=True)

    target_amount: float = Field(..., alias='targetAmount')

    @field_validator('target_amount')
    @classmethod
    def validate_target(cls, v):
        return _finite_non_negative(v)


class ActivityInput(BaseModel):
    """Schema for defining a monthly activity target."""
    model_config = ConfigDict(populate_by_name=True)

    number: int = Field(..., ge=1, alias='actionNumber')
    title: str = Field(..., min_length=1, max_length=300, alias='actionTitle')
    planned_amount: float = Field(..., gt=0, alias='planActivity')

    @field_validator('title')
    @classmethod
    def strip_whitespace(cls, v):
        v = v.strip()
        if not v:
            raise ValueError('Activity title cannot be empty')
        return v

    @field_validator('planned_amount')
    @classmethod
    def validate_planned(cls, v):
        return _finite_non_negative(v)
