"""Toast de-duplication for realtime updates."""

import time
from collections import deque
from typing import Callable, Optional


class ToastDebouncer:
    """
    Show at most one toast per distinct message per window.

    A burst of identical events (several tabs, a bulk update) produces a
    single toast; a different message is shown immediately. Messages are
    forgotten once their window has passed, and only the most recent
    ``history`` toasts are kept in ``shown``.
    """

    def __init__(
        self,
        window: float = 2.0,
        clock: Optional[Callable[[], float]] = None,
        history: int = 50,
    ) -> None:
        self.window = window
        self._clock = clock or time.monotonic
        self._recent: dict[str, float] = {}
        self.shown: deque[str] = deque(maxlen=history)

    def _evict(self, now: float) -> None:
        expired = [message for message, at in self._recent.items() if now - at >= self.window]
        for message in expired:
            del self._recent[message]

    @property
    def pending(self) -> frozenset[str]:
        """Messages currently suppressed."""
        self._evict(self._clock())
        return frozenset(self._recent)

    def show(self, message: str) -> bool:
        """Record ``message`` as shown unless it was shown within the window."""
        now = self._clock()
        self._evict(now)
        if message in self._recent:
            return False

        self._recent[message] = now
        self.shown.append(message)
        return True
