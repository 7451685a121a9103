"""Cancelable single-shot deferred call."""

from typing import Callable, Optional
from PyQt6.QtCore import QTimer


class DeferredCall:
    """
    Single-shot call fired once after delay_ms, unless cancelled first.

    Scheduling again while pending restarts the delay, so a burst of
    schedule() calls (e.g. a mount/unmount/remount cycle) collapses into one
    invocation.

    Usage:
        self._initial_query = DeferredCall(delay_ms=199, handler=self._start_fetch)
        self._initial_query.schedule()
        ...
        self._initial_query.cancel()  # on teardown
    """

    def __init__(self, delay_ms: int, handler: Callable[[], None]):
        self._delay_ms = delay_ms
        self._handler = handler
        self._timer: Optional[QTimer] = None

    @property
    def pending(self) -> bool:
        return self._timer is not None and self._timer.isActive()

    def schedule(self):
        """Arm the call, restarting the delay if already armed."""
        if self._timer is not None:
            self._timer.stop()

        self._timer = QTimer()
        self._timer.setSingleShot(True)
        self._timer.timeout.connect(self._fire)
        self._timer.start(self._delay_ms)

    def cancel(self):
        """Cancel pending call."""
        if self._timer is not None:
            self._timer.stop()
            self._timer = None

    def force(self):
        """Cancel timer and fire handler immediately."""
        self.cancel()
        self._handler()

    def _fire(self):
        self._timer = None
        self._handler()
