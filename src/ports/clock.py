"""Time source for event timestamps, post dates and token expiry."""

from datetime import datetime
from typing import Protocol


class ClockPort(Protocol):
    def now(self) -> datetime:
        """Timezone-aware UTC 'now'."""
        ...
