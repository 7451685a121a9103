"""Run a coroutine function on a worker thread and report back through signals."""

import asyncio
from typing import Any, Awaitable, Callable, Tuple

from PyQt6.QtCore import QThread, pyqtSignal

# Wait time per worker when a controller is torn down
CLEANUP_WAIT_MS = 200


class BackgroundTask(QThread):
    """
    Awaits ``target(*args)`` on its own event loop in a worker thread.

    Used when no asyncio loop runs in the GUI thread: the coroutine gets a
    private loop, and its outcome is delivered to the GUI thread by queued
    signals.

    Usage:
        task = BackgroundTask(target=fetch_page, args=(request,))
        task.result_ready.connect(on_result)
        task.error_occurred.connect(on_error)  # Receives Exception, not str
        task.start()

        # Later:
        task.cancel()  # signals won't emit after this
    """

    result_ready = pyqtSignal(object)
    error_occurred = pyqtSignal(Exception)

    def __init__(self, target: Callable[..., Awaitable[Any]], args: Tuple = (), parent=None):
        super().__init__(parent)
        self._target = target
        self._args = args
        self.cancelled = False

    def run(self):
        """Execute target on a private loop, respecting cancellation."""
        try:
            result = asyncio.run(self._await_target())
            if not self.cancelled:
                self.result_ready.emit(result)
        except Exception as e:
            if not self.cancelled:
                self.error_occurred.emit(e)

    async def _await_target(self):
        return await self._target(*self._args)

    def cancel(self):
        """Cancel task; the worker finishes but reports nothing."""
        self.cancelled = True
