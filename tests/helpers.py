"""Test doubles shared by fixtures and test modules."""
from datetime import datetime, timedelta

DAY_ONE = datetime(2026, 10, 19, 9, 30)


class FixedClock:
    """Callable clock the test moves by hand."""

    def __init__(self, start: datetime = DAY_ONE):
        self.now = start

    def __call__(self) -> datetime:
        return self.now

    def advance(self, days: int = 0, hours: int = 0) -> None:
        self.now = self.now + timedelta(days=days, hours=hours)


class FirstLinePicker:
    def pick(self, options):
        return options[0]
