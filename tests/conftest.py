import os
import sys
from typing import Callable, List, Tuple

import pytest


# Ensure the repository's src/ is on sys.path for `from pawchess...` imports
REPO_ROOT = os.path.abspath(os.path.join(os.path.dirname(__file__), os.pardir))
SRC_PATH = os.path.abspath(os.path.join(REPO_ROOT, "src"))
if SRC_PATH not in sys.path:
    sys.path.insert(0, SRC_PATH)


class ManualScheduler:
    """Scheduler that queues callbacks until the test runs them."""

    def __init__(self) -> None:
        self.pending: List[Tuple[float, Callable[[], None]]] = []

    def __call__(self, delay_s: float, callback: Callable[[], None]) -> None:
        self.pending.append((delay_s, callback))

    def run_all(self) -> int:
        ran = 0
        while self.pending:
            _, cb = self.pending.pop(0)
            cb()
            ran += 1
        return ran


@pytest.fixture
def manual_scheduler() -> ManualScheduler:
    return ManualScheduler()
