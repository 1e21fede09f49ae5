"""Core business logic layer.

Subpackages:
- calendar: fiscal period resolution and deadlines
- renewal: monthly plan renewal engine (archive + create + report fan-out)
- reporting: report submission and plan statistics
- planning: plan-facing operations used by the HTTP layer
"""
__all__ = ["calendar", "renewal", "reporting", "planning"]
