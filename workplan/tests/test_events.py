from datetime import date
import unittest

from workplan.domain.Plan import Plan
from workplan.events import web_observers
from workplan.events.Event_Bus import EventBus
from workplan.events.event_helpers import publish_plan_created, publish_report_submitted


class TestEventBus(unittest.TestCase):

    def test_subscribe_publish_unsubscribe(self):
        bus = EventBus()
        seen = []
        cb = lambda name, payload: seen.append((name, payload))
        bus.subscribe("plan.created", cb)
        bus.subscribe("plan.created", cb)
        bus.publish("plan.created", {"n": 1})
        bus.unsubscribe("plan.created", cb)
        bus.publish("plan.created", {"n": 2})
        self.assertEqual(seen, [("plan.created", {"n": 1})])

    def test_failing_subscriber_does_not_break_others(self):
        bus = EventBus()
        seen = []

        def broken(name, payload):
            raise RuntimeError("boom")

        bus.subscribe("report.submitted", broken)
        bus.subscribe("report.submitted", lambda name, payload: seen.append(payload))
        with self.assertLogs("workplan.events.Event_Bus", level="ERROR"):
            bus.publish("report.submitted", 1)
        self.assertEqual(seen, [1])

    def test_unsubscribe_unknown_is_silent(self):
        EventBus().unsubscribe("plan.archived", print)


class TestWebObservers(unittest.TestCase):

    def setUp(self):
        web_observers.start()

    def test_feed_records_plan_and_report_events(self):
        cursor = web_observers.get_events()["next_cursor"]
        plan = Plan(5, "Monthly Plan - Tir 2018", 7, 2018, 100.0, date(2026, 1, 18))
        publish_plan_created(plan, 3, 6)
        publish_report_submitted("monthly", 11, 2, 75.0, "submitted")

        feed = web_observers.get_events(cursor)
        self.assertEqual([e["type"] for e in feed["events"]], ["plan.created", "report.submitted"])
        created, submitted = feed["events"]
        self.assertEqual(created["plan_id"], 5)
        self.assertEqual((created["month"], created["year"]), (7, 2018))
        self.assertEqual(created["reports"], 3)
        self.assertEqual(created["activity_reports"], 6)
        self.assertEqual(submitted["report_id"], 11)
        self.assertEqual(submitted["status"], "submitted")
        self.assertEqual(feed["next_cursor"], submitted["id"])

        self.assertEqual(web_observers.get_events(feed["next_cursor"])["events"], [])

    def test_start_is_idempotent(self):
        web_observers.start()
        cursor = web_observers.get_events()["next_cursor"]
        publish_report_submitted("activity", 1, 1, 10.0, "late")
        self.assertEqual(len(web_observers.get_events(cursor)["events"]), 1)


if __name__ == "__main__":
    unittest.main()
