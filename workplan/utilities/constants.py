from typing import Final

# Ethiopian government fiscal calendar: month 1 (Hamle) starts in Gregorian July.
FISCAL_YEAR_START_MONTH: Final[int] = 7
# Fiscal year = Gregorian year - offset (July..December / January..June)
FISCAL_YEAR_OFFSET_FIRST_HALF: Final[int] = 7
FISCAL_YEAR_OFFSET_SECOND_HALF: Final[int] = 8
MONTHS_PER_YEAR: Final[int] = 12

# Reports are due on this day of the period's Gregorian month.
DEADLINE_DAY: Final[int] = 18

FISCAL_MONTHS: Final[list[dict]] = [
    {"number": 1, "amharic": "ሐምሌ", "english": "Hamle"},
    {"number": 2, "amharic": "ነሐሴ", "english": "Nehase"},
    {"number": 3, "amharic": "መስከረም", "english": "Meskerem"},
    {"number": 4, "amharic": "ጥቅምት", "english": "Tikimt"},
    {"number": 5, "amharic": "ኅዳር", "english": "Hidar"},
    {"number": 6, "amharic": "ታኅሣሥ", "english": "Tahsas"},
    {"number": 7, "amharic": "ጥር", "english": "Tir"},
    {"number": 8, "amharic": "የካቲት", "english": "Yekatit"},
    {"number": 9, "amharic": "መጋቢት", "english": "Megabit"},
    {"number": 10, "amharic": "ሚያዝያ", "english": "Miazia"},
    {"number": 11, "amharic": "ግንቦት", "english": "Ginbot"},
    {"number": 12, "amharic": "ሰኔ", "english": "Sene"},
]

# Plan statuses
PLAN_ACTIVE: Final[str] = "active"
PLAN_ARCHIVED: Final[str] = "archived"

# Report statuses
REPORT_PENDING: Final[str] = "pending"
REPORT_SUBMITTED: Final[str] = "submitted"
REPORT_LATE: Final[str] = "late"

# Roles
ROLE_BRANCH_USER: Final[str] = "branch_user"
ROLE_MAIN_BRANCH: Final[str] = "main_branch"
ROLE_ADMIN: Final[str] = "admin"

# Monthly reports may exceed 100% (over-achievement); activity reports are capped.
ACTIVITY_PERCENTAGE_CAP: Final[float] = 100.0
