"""Injectable source of "now" and "today".

Routes never call ``datetime.now()`` directly; they depend on ``get_clock`` so
tests can pin the date with ``app.dependency_overrides``.
"""

from datetime import date, datetime, timezone


class Clock:
    def now(self) -> datetime:
        return datetime.now(timezone.utc)

    def today(self) -> date:
        return self.now().date()


class FixedClock(Clock):
    """A clock frozen at a given instant."""

    def __init__(self, instant: datetime):
        if instant.tzinfo is None:
            instant = instant.replace(tzinfo=timezone.utc)
        self._instant = instant

    def now(self) -> datetime:
        return self._instant


_system_clock = Clock()


def get_clock() -> Clock:
    return _system_clock
