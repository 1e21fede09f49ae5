from datetime import date, datetime
import unittest

from workplan.domain.Period import Period
from workplan.logic.calendar.fiscal import (
    current_period,
    days_until_deadline,
    deadline_at,
    deadline_for,
    format_deadline,
    gregorian_month_of,
    month_name,
    next_period,
    previous_period,
)


class TestFiscalCalendar(unittest.TestCase):

    def test_january_is_month_seven_of_previous_fiscal_year(self):
        self.assertEqual(current_period(datetime(2026, 1, 5, 10, 30)), Period(7, 2018))

    def test_july_starts_fiscal_year(self):
        self.assertEqual(current_period(datetime(2025, 7, 1)), Period(1, 2018))
        self.assertEqual(current_period(datetime(2025, 6, 30, 23, 59)), Period(12, 2017))

    def test_every_gregorian_month_maps_back(self):
        for g_month in range(1, 13):
            period = current_period(date(2026, g_month, 10))
            self.assertEqual(gregorian_month_of(period), (2026, g_month))

    def test_deadline_is_eighteenth_of_gregorian_month(self):
        self.assertEqual(deadline_for(7, 2018), date(2026, 1, 18))
        self.assertEqual(deadline_for(1, 2018), date(2025, 7, 18))
        self.assertEqual(deadline_for(12, 2018), date(2026, 6, 18))

    def test_deadline_instant_is_start_of_day(self):
        self.assertEqual(deadline_at(date(2026, 1, 18)), datetime(2026, 1, 18, 0, 0, 0))

    def test_next_period_wraps_year(self):
        self.assertEqual(next_period(Period(12, 2018)), Period(1, 2019))
        self.assertEqual(next_period(Period(3, 2018)), Period(4, 2018))

    def test_previous_period_wraps_year(self):
        self.assertEqual(previous_period(Period(1, 2019)), Period(12, 2018))

    def test_period_rejects_invalid_month(self):
        with self.assertRaises(ValueError):
            Period(13, 2018)
        with self.assertRaises(ValueError):
            Period(0, 2018)

    def test_month_names(self):
        self.assertEqual(month_name(1), "Hamle")
        self.assertEqual(month_name(12, "english"), "Sene")
        self.assertEqual(month_name(7, "amharic"), "ጥር")
        self.assertEqual(month_name(99), "")

    def test_format_deadline_uses_ethiopian_year(self):
        # Ethiopian year turns over in September
        self.assertEqual(format_deadline(date(2026, 1, 18), 7), "Tir 18, 2018")
        self.assertEqual(format_deadline(date(2025, 9, 18), 3), "Meskerem 18, 2018")
        self.assertEqual(format_deadline(date(2025, 7, 18), 1), "Hamle 18, 2017")

    def test_days_until_deadline(self):
        deadline = date(2026, 1, 18)
        self.assertEqual(days_until_deadline(deadline, datetime(2026, 1, 5, 23, 0)), 13)
        self.assertEqual(days_until_deadline(deadline, date(2026, 1, 18)), 0)
        self.assertEqual(days_until_deadline(deadline, date(2026, 1, 20)), -2)


if __name__ == "__main__":
    unittest.main()
