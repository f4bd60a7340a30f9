from datetime import datetime, timedelta


class FakeClock:
    """Callable clock; time only moves when a test advances it"""

    def __init__(self, start: datetime) -> None:
        self.now = start

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **delta: float) -> datetime:
        self.now += timedelta(**delta)
        return self.now
