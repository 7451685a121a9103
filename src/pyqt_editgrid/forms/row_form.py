"""
Per-row edit buffer.

Every rendered row owns one RowForm: an independent field-group scope seeded
from the row's values when the row first renders. Controls for the row's
editable cells are bound to it by field name.
"""

import logging
from typing import Any, Dict, Optional

from PyQt6.QtWidgets import QWidget

from pyqt_editgrid.protocols import ValueSettable
from pyqt_editgrid.services.signal_service import SignalService
from pyqt_editgrid.types import Row

logger = logging.getLogger(__name__)


class RowForm:
    """
    Edit buffer for one row.

    ``record`` is the row object the buffer was created for; a buffer is never
    carried over to a different row object.
    """

    def __init__(self, index: int, record: Row):
        self.index = index
        self.record = record
        self.initial_values: Dict[str, Any] = dict(record)
        self.values: Dict[str, Any] = dict(record)
        self.widgets: Dict[str, QWidget] = {}

    def belongs_to(self, record: Row) -> bool:
        return self.record is record

    def bind(self, field: str, widget: QWidget) -> None:
        """Bind ``widget`` as the control of ``field`` and seed it with the buffered value."""
        self.widgets[field] = widget
        if isinstance(widget, ValueSettable):
            SignalService.update_widget_value(widget, self.values.get(field))

    def unbind_all(self) -> None:
        """Forget controls from the previous render pass."""
        self.widgets.clear()

    def get_field_value(self, field: str) -> Any:
        return self.values.get(field)

    def get_fields_value(self) -> Dict[str, Any]:
        return dict(self.values)

    def set_field_value(self, field: str, value: Any, widget: Optional[QWidget] = None) -> None:
        """Record ``value`` for ``field``; push it to the bound control unless it came from it."""
        self.values[field] = value
        bound = self.widgets.get(field)
        if bound is not None and bound is not widget and isinstance(bound, ValueSettable):
            SignalService.update_widget_value(bound, value)

    def is_field_touched(self, field: str) -> bool:
        return self.values.get(field) != self.initial_values.get(field)

    def reset_fields(self) -> None:
        """Return buffered values and bound controls to the initial values."""
        self.values = dict(self.initial_values)
        for field, widget in self.widgets.items():
            if isinstance(widget, ValueSettable):
                SignalService.update_widget_value(widget, self.values.get(field))
        logger.debug(f"Reset row form {self.index} ({len(self.widgets)} bound controls)")

    def __repr__(self) -> str:
        return f"RowForm(index={self.index}, fields={sorted(self.values)})"
