from datetime import datetime, timedelta
from unittest import mock
import unittest

from workplan.domain.errors import ConflictViolation, NotFound, ValidationError
from workplan.infra.Plan_Repository import PlanRepository, PlanStore
from workplan.logic.calendar.fiscal import deadline_at
from workplan.logic.renewal.engine import RenewalEngine
from workplan.logic.reporting.submission import (
    ReportSubmissionHandler,
    classify_submission,
    completion_percentage,
)
from workplan.utilities.constants import REPORT_LATE, REPORT_SUBMITTED


class TestCompletionPercentage(unittest.TestCase):

    def test_over_achievement_is_not_clamped(self):
        self.assertEqual(completion_percentage(150, 100), 150.0)

    def test_zero_target_gives_zero(self):
        self.assertEqual(completion_percentage(50, 0), 0.0)

    def test_cap(self):
        self.assertEqual(completion_percentage(60, 40, cap=100.0), 100.0)
        self.assertEqual(completion_percentage(20, 40, cap=100.0), 50.0)


class TestReportSubmission(unittest.TestCase):

    def setUp(self):
        self.repo = PlanRepository("sqlite://")
        with self.repo.transaction() as store:
            self.alice = store.add_user("alice", "Adama Branch")
            self.bob = store.add_user("bob", "Bishoftu Branch")
            store.create_activity(1, "Loan disbursement", 40.0)
        self.now = datetime(2026, 1, 5, 9, 0)
        RenewalEngine(self.repo).check_and_renew(self.now)
        with self.repo.transaction() as store:
            plan = store.find_active_plan()
            self.plan = store.update_plan_target(plan.id, 100.0, self.now)
            self.stub = store.list_stubs(plan_id=plan.id, user_id=self.alice.id)[0]
            self.activity_report = store.list_activity_reports(plan_id=plan.id, user_id=self.alice.id)[0]
        self.handler = ReportSubmissionHandler(self.repo)

    def _stub(self, stub_id):
        with self.repo.transaction() as store:
            return store.find_stub(stub_id)

    def test_submit_on_time(self):
        result = self.handler.submit(self.stub.id, 150, "  strong month  ", user_id=self.alice.id, now=self.now)
        self.assertEqual(result, {"report_id": self.stub.id, "percentage": 150.0, "status": REPORT_SUBMITTED})
        stored = self._stub(self.stub.id)
        self.assertEqual(stored.status, REPORT_SUBMITTED)
        self.assertEqual(stored.achieved_amount, 150.0)
        self.assertEqual(stored.progress_percentage, 150.0)
        self.assertEqual(stored.notes, "strong month")
        self.assertEqual(stored.submitted_at, self.now)

    def test_submission_at_deadline_is_on_time(self):
        at = deadline_at(self.plan.deadline)
        result = self.handler.submit(self.stub.id, 10, user_id=self.alice.id, now=at)
        self.assertEqual(result["status"], REPORT_SUBMITTED)

    def test_submission_after_deadline_is_late(self):
        after = deadline_at(self.plan.deadline) + timedelta(seconds=1)
        result = self.handler.submit(self.stub.id, 10, user_id=self.alice.id, now=after)
        self.assertEqual(result["status"], REPORT_LATE)

    def test_classify_submission(self):
        self.assertEqual(classify_submission(datetime(2026, 1, 17, 23, 59), self.plan.deadline), REPORT_SUBMITTED)
        self.assertEqual(classify_submission(datetime(2026, 1, 18, 12, 0), self.plan.deadline), REPORT_LATE)

    def test_morning_of_deadline_day_is_late(self):
        result = self.handler.submit(self.stub.id, 10, user_id=self.alice.id, now=datetime(2026, 1, 18, 9, 0))
        self.assertEqual(result["status"], REPORT_LATE)

    def test_overlapping_submission_loses(self):
        # Second request read the stub while it was still pending
        self.handler.submit(self.stub.id, 90, user_id=self.alice.id, now=self.now)
        with mock.patch.object(PlanStore, "find_stub", return_value=self.stub):
            with self.assertRaises(ConflictViolation):
                self.handler.submit(self.stub.id, 10, user_id=self.alice.id, now=self.now)
        stored = self._stub(self.stub.id)
        self.assertEqual(stored.achieved_amount, 90.0)
        self.assertEqual(stored.progress_percentage, 90.0)

    def test_overlapping_activity_submission_loses(self):
        self.handler.submit_activity(self.activity_report.id, 30, user_id=self.alice.id, now=self.now)
        with mock.patch.object(PlanStore, "find_activity_report", return_value=self.activity_report):
            with self.assertRaises(ConflictViolation):
                self.handler.submit_activity(self.activity_report.id, 5, user_id=self.alice.id, now=self.now)
        with self.repo.transaction() as store:
            self.assertEqual(store.find_activity_report(self.activity_report.id).actual_amount, 30.0)

    def test_zero_target_gives_zero_percentage(self):
        with self.repo.transaction() as store:
            store.update_plan_target(self.plan.id, 0.0, self.now)
        result = self.handler.submit(self.stub.id, 500, user_id=self.alice.id, now=self.now)
        self.assertEqual(result["percentage"], 0.0)

    def test_unknown_report(self):
        with self.assertRaises(NotFound):
            self.handler.submit(9999, 10, user_id=self.alice.id, now=self.now)

    def test_report_of_other_user_is_not_found(self):
        with self.assertRaises(NotFound):
            self.handler.submit(self.stub.id, 10, user_id=self.bob.id, now=self.now)
        self.assertTrue(self._stub(self.stub.id).is_pending)

    def test_resubmission_is_rejected(self):
        self.handler.submit(self.stub.id, 10, user_id=self.alice.id, now=self.now)
        with self.assertRaises(ConflictViolation):
            self.handler.submit(self.stub.id, 90, user_id=self.alice.id, now=self.now)
        self.assertEqual(self._stub(self.stub.id).achieved_amount, 10.0)

    def test_invalid_amounts(self):
        for amount in (-1, "abc", None, float("nan"), float("inf")):
            with self.subTest(amount=amount):
                with self.assertRaises(ValidationError):
                    self.handler.submit(self.stub.id, amount, user_id=self.alice.id, now=self.now)
        self.assertTrue(self._stub(self.stub.id).is_pending)

    def test_invalid_report_id(self):
        with self.assertRaises(ValidationError):
            self.handler.submit(0, 10, user_id=self.alice.id, now=self.now)

    def test_notes_too_long(self):
        with self.assertRaises(ValidationError):
            self.handler.submit(self.stub.id, 10, "x" * 2001, user_id=self.alice.id, now=self.now)

    def test_activity_percentage_is_capped(self):
        result = self.handler.submit_activity(self.activity_report.id, 60, user_id=self.alice.id, now=self.now)
        self.assertEqual(result["percentage"], 100.0)
        self.assertEqual(result["status"], REPORT_SUBMITTED)
        with self.repo.transaction() as store:
            stored = store.find_activity_report(self.activity_report.id)
        self.assertEqual(stored.actual_amount, 60.0)
        self.assertEqual(stored.implementation_percentage, 100.0)

    def test_activity_resubmission_is_rejected(self):
        self.handler.submit_activity(self.activity_report.id, 20, user_id=self.alice.id, now=self.now)
        with self.assertRaises(ConflictViolation):
            self.handler.submit_activity(self.activity_report.id, 20, user_id=self.alice.id, now=self.now)

    def test_activity_report_of_other_user_is_not_found(self):
        with self.assertRaises(NotFound):
            self.handler.submit_activity(self.activity_report.id, 20, user_id=self.bob.id, now=self.now)


if __name__ == "__main__":
    unittest.main()
