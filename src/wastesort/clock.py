"""Wall-clock helper; components take it as an injectable callable."""

import time
from collections.abc import Callable

Clock = Callable[[], int]


def now_ms() -> int:
    """Current time in epoch milliseconds."""
    return int(time.time() * 1000)
