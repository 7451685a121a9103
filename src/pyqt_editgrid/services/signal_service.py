"""
Signal blocking for programmatic control updates.

Row forms push initial and reset values into bound controls; those writes must
not be mistaken for user edits, so they happen with the control's signals
blocked.
"""

from contextlib import contextmanager
from typing import Any, Callable, Optional
from PyQt6.QtWidgets import QWidget
import logging

from pyqt_editgrid.protocols import ValueSettable

logger = logging.getLogger(__name__)


class SignalService:
    """
    Context managers for widget signal blocking.

    Examples:
        with SignalService.block_signals(line_edit):
            line_edit.set_value("a")

        SignalService.update_widget_value(combo, 3)
    """

    @staticmethod
    @contextmanager
    def block_signals(*widgets: QWidget):
        """Context manager for blocking widget signals."""
        for widget in widgets:
            if widget is not None:
                widget.blockSignals(True)

        try:
            yield
        finally:
            for widget in widgets:
                if widget is not None:
                    widget.blockSignals(False)

    @staticmethod
    def update_widget_value(widget: QWidget, value: Any, setter: Optional[Callable] = None) -> None:
        """Update widget value with signals blocked."""
        with SignalService.block_signals(widget):
            if setter:
                setter(widget, value)
            elif isinstance(widget, ValueSettable):
                widget.set_value(value)
            else:
                raise ValueError(f"Cannot set a value on {type(widget).__name__}: not ValueSettable")
        logger.debug(f"Set {type(widget).__name__} to {value!r} with signals blocked")
