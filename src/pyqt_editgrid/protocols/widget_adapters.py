"""
Widget adapters that wrap Qt widgets to implement the cell ABCs.

Normalizes Qt's inconsistent APIs:
- QLineEdit.text() vs QComboBox.currentData()
- QLineEdit.setText() vs QComboBox.setCurrentIndex()
- textChanged/editingFinished vs currentIndexChanged

All adapters implement consistent interface via ABCs:
- get_value() / set_value()
- set_placeholder()
- connect_change_signal() / connect_commit_signal()
"""

import logging
import re
from abc import ABCMeta
from typing import Any, Callable, Optional, Sequence

from PyQt6.QtWidgets import QComboBox, QLineEdit, QListView
from PyQt6.QtCore import QObject

from pyqt_editgrid.types import SelectOption
from .widget_protocols import (
    ValueGettable, ValueSettable, PlaceholderCapable,
    ChangeSignalEmitter, CommitSignalEmitter
)

logger = logging.getLogger(__name__)

# Metaclass that combines Qt's metaclass with ABCMeta
_QtMetaclass = type(QObject)


class PyQtWidgetMeta(_QtMetaclass, ABCMeta):
    """Metaclass for PyQt widgets that need ABC support."""
    pass


def default_filter_option(search: Optional[str], option: SelectOption) -> bool:
    """
    Accept an option when ``search`` matches its label or its value.

    Matching is a case-sensitive regex search; text that does not compile as a
    pattern is searched for literally. Empty or absent search text accepts
    every option.
    """
    if not search:
        return True
    try:
        pattern = re.compile(search)
    except re.error:
        pattern = re.compile(re.escape(search))
    if option.label and pattern.search(str(option.label)):
        return True
    return bool(option.value) and pattern.search(str(option.value)) is not None


class LineEditAdapter(QLineEdit, ValueGettable, ValueSettable, PlaceholderCapable,
                      ChangeSignalEmitter, CommitSignalEmitter, metaclass=PyQtWidgetMeta):
    """
    Adapter for QLineEdit implementing the cell ABCs.

    - .text() → .get_value()
    - .setText() → .set_value()
    - .textChanged → .connect_change_signal()
    - .editingFinished → .connect_commit_signal()
    """

    _widget_id = "line_edit"

    def get_value(self) -> Any:
        """Implement ValueGettable ABC."""
        return self.text()

    def set_value(self, value: Any) -> None:
        """Implement ValueSettable ABC."""
        self.setText("" if value is None else str(value))

    def set_placeholder(self, text: str) -> None:
        """Implement PlaceholderCapable ABC."""
        self.setPlaceholderText(text)

    def connect_change_signal(self, callback: Callable[[Any], None]) -> None:
        """Implement ChangeSignalEmitter ABC."""
        self.textChanged.connect(lambda text: callback(text))

    def connect_commit_signal(self, callback: Callable[[Any], None]) -> None:
        """Implement CommitSignalEmitter ABC."""
        self.editingFinished.connect(lambda: callback(self.get_value()))


class ComboBoxAdapter(QComboBox, ValueGettable, ValueSettable, PlaceholderCapable,
                      ChangeSignalEmitter, metaclass=PyQtWidgetMeta):
    """
    Adapter for QComboBox implementing the cell ABCs.

    Stores option values in itemData, labels as display text. With search
    enabled the combo is editable and typed text hides options rejected by
    the filter predicate.
    """

    _widget_id = "combo_box"

    def __init__(self, parent=None):
        super().__init__(parent)
        self._options: list = []
        self._filter_option: Callable[[Optional[str], SelectOption], bool] = default_filter_option

    def set_options(self, options: Sequence[SelectOption]) -> None:
        self.clear()
        self._options = list(options)
        for option in self._options:
            self.addItem(str(option.label), option.value)
        self.setCurrentIndex(-1)

    def enable_search(self, filter_option: Optional[Callable[[Optional[str], SelectOption], bool]] = None) -> None:
        """Make the combo searchable, filtering options with ``filter_option``."""
        if filter_option is not None:
            self._filter_option = filter_option
        self.setEditable(True)
        self.setInsertPolicy(QComboBox.InsertPolicy.NoInsert)
        self.lineEdit().textEdited.connect(self.apply_filter)

    def apply_filter(self, search: Optional[str]) -> int:
        """Hide options the predicate rejects. Returns the number still visible."""
        view = self.view()
        visible = 0
        for row, option in enumerate(self._options):
            accepted = self._filter_option(search, option)
            if isinstance(view, QListView):
                view.setRowHidden(row, not accepted)
            visible += int(accepted)
        logger.debug(f"Filter {search!r}: {visible}/{len(self._options)} options visible")
        return visible

    def current_option(self) -> Optional[SelectOption]:
        index = self.currentIndex()
        if index < 0 or index >= len(self._options):
            return None
        return self._options[index]

    def get_value(self) -> Any:
        """Implement ValueGettable ABC."""
        if self.currentIndex() < 0:
            return None
        return self.itemData(self.currentIndex())

    def set_value(self, value: Any) -> None:
        """Implement ValueSettable ABC."""
        for i in range(self.count()):
            if self.itemData(i) == value:
                self.setCurrentIndex(i)
                return
        # Value not found - clear selection
        self.setCurrentIndex(-1)

    def set_placeholder(self, text: str) -> None:
        """Implement PlaceholderCapable ABC."""
        self.setPlaceholderText(text)

    def connect_change_signal(self, callback: Callable[[Any], None]) -> None:
        """Implement ChangeSignalEmitter ABC."""
        self.currentIndexChanged.connect(lambda _index: callback(self.get_value()))
