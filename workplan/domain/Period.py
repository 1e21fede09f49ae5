"""Period value object: a (month, year) pair of the fiscal calendar."""
from __future__ import annotations

from dataclasses import dataclass

from workplan.utilities.constants import MONTHS_PER_YEAR


@dataclass(frozen=True)
class Period:
    month: int
    year: int

    def __post_init__(self):
        if not 1 <= self.month <= MONTHS_PER_YEAR:
            raise ValueError(f"Fiscal month out of range: {self.month}")

    def next(self) -> "Period":
        if self.month == MONTHS_PER_YEAR:
            return Period(1, self.year + 1)
        return Period(self.month + 1, self.year)

    def previous(self) -> "Period":
        if self.month == 1:
            return Period(MONTHS_PER_YEAR, self.year - 1)
        return Period(self.month - 1, self.year)

    def __str__(self) -> str:
        return f"{self.year}-M{self.month:02d}"
