from datetime import date
import unittest

from workplan.domain.BranchUser import BranchUser
from workplan.domain.Plan import Plan
from workplan.domain.Report import ActivityReport, ReportStub
from workplan.logic.reporting.statistics import (
    compute_activity_summary, compute_branch_comparison, compute_plan_stats,
)


class TestPlanStatistics(unittest.TestCase):

    def setUp(self):
        self.plan = Plan(1, "Monthly Plan - Tir 2018", 7, 2018, 100.0, date(2026, 1, 18))
        self.users = [
            BranchUser(1, "adama", "Adama Branch"),
            BranchUser(2, "bishoftu", "Bishoftu Branch"),
            BranchUser(3, "hawassa", "Hawassa Branch"),
        ]

    def test_empty_plan(self):
        stats = compute_plan_stats(self.plan, [])
        self.assertEqual(stats["total_reports"], 0)
        self.assertIsNone(stats["total_achieved"])
        self.assertIsNone(stats["avg_progress"])
        self.assertEqual(stats["target_amount"], 100.0)

    def test_counts_and_averages(self):
        reports = [
            ReportStub(1, 1, 1, 80.0, 80.0, status="submitted"),
            ReportStub(2, 1, 2, 120.0, 120.0, status="late"),
            ReportStub(3, 1, 3),
        ]
        stats = compute_plan_stats(self.plan, reports)
        self.assertEqual(stats["total_reports"], 3)
        self.assertEqual(stats["submitted_reports"], 1)
        self.assertEqual(stats["late_reports"], 1)
        self.assertEqual(stats["pending_reports"], 1)
        self.assertEqual(stats["total_achieved"], 200.0)
        self.assertEqual(stats["avg_progress"], 100.0)

    def test_branch_comparison_orders_by_progress(self):
        reports = [
            ReportStub(1, 1, 1, 40.0, 40.0, status="submitted"),
            ReportStub(2, 1, 2, 90.0, 90.0, status="late"),
        ]
        rows = compute_branch_comparison(self.users, reports)
        self.assertEqual([r["username"] for r in rows], ["bishoftu", "adama", "hawassa"])
        self.assertEqual(rows[0]["submitted_late"], 1)
        self.assertEqual(rows[1]["submitted_on_time"], 1)
        self.assertEqual(rows[2]["total_reports"], 0)
        self.assertEqual(rows[2]["avg_progress"], 0)
        self.assertEqual(rows[0]["total_achieved"], 90.0)

    def test_activity_summary(self):
        reports = [
            ActivityReport(1, 1, 1, 1, 20.0, 50.0, status="submitted"),
            ActivityReport(2, 1, 2, 1, 40.0, 100.0, status="submitted"),
            ActivityReport(3, 1, 1, 2),
            ActivityReport(4, 1, 2, 2, 10.0, 25.0, status="late"),
        ]
        rows = compute_activity_summary(self.users, reports)
        self.assertEqual([r["username"] for r in rows], ["adama", "bishoftu", "hawassa"])
        self.assertEqual(rows[0]["total_actions"], 2)
        self.assertEqual(rows[0]["submitted_on_time"], 2)
        self.assertEqual(rows[0]["avg_implementation"], 75.0)
        self.assertEqual(rows[1]["pending"], 1)
        self.assertEqual(rows[1]["submitted_late"], 1)
        self.assertEqual(rows[1]["avg_implementation"], 25.0)
        self.assertEqual(rows[2]["total_actions"], 0)


if __name__ == "__main__":
    unittest.main()
