"""Adapter: SystemClock implements ClockPort with the real clock."""

from __future__ import annotations

import time
from datetime import datetime


class SystemClock:
    """Concrete ClockPort backed by the time module."""

    def monotonic(self) -> float:
        return time.monotonic()

    def sleep(self, seconds: float) -> None:
        if seconds > 0:
            time.sleep(seconds)

    def timestamp(self) -> str:
        return datetime.now().strftime("%Y-%m-%d %H:%M:%S")
