from __future__ import annotations

import threading
from typing import Callable


Callback = Callable[[], None]
Scheduler = Callable[[float, Callback], None]


def immediate(delay_s: float, callback: Callback) -> None:
    """Run ``callback`` right away, ignoring the delay."""
    callback()


def timer(delay_s: float, callback: Callback) -> None:
    """Run ``callback`` on a daemon ``threading.Timer`` after ``delay_s``."""
    t = threading.Timer(delay_s, callback)
    t.daemon = True
    t.start()


def for_delay(delay_ms: int) -> Scheduler:
    """Pick the scheduler for a configured opponent delay."""
    return timer if delay_ms > 0 else immediate
