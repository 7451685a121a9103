"""
Cell binding engine.

Decides which control an editable cell renders and wires its events into two
channels:

- soft update: every change writes the value straight into the live row
  record (and the row form). No change notification is emitted; readers of the
  row must tolerate fields changing between renders.
- hard update: on commit (editing finished for text inputs, every change for
  selections) a FieldCommit is emitted for the host to persist or validate.

Host callbacks on a control's config always run first and cannot suppress
either channel.
"""

import logging
from typing import Any, Callable, Mapping, Optional, Type, TypeVar

from PyQt6.QtCore import QObject, pyqtSignal
from PyQt6.QtWidgets import QWidget

from pyqt_editgrid.config import EditGridConfig, get_grid_config
from pyqt_editgrid.exceptions import DescriptorError
from pyqt_editgrid.forms.row_form import RowForm
from pyqt_editgrid.protocols import ChangeSignalEmitter, ComboBoxAdapter, LineEditAdapter
from pyqt_editgrid.types import ColumnDef, FieldCommit, InputConfig, Row, SelectConfig

logger = logging.getLogger(__name__)

C = TypeVar('C')


def resolve_control_config(descriptor: Any, config_type: Type[C], form: RowForm,
                           record: Row, index: int) -> Optional[C]:
    """
    Resolve a static config or a ``(form, record, index)`` factory.

    None means the cell is not editable for this row.
    """
    if descriptor is None:
        return None
    if isinstance(descriptor, config_type):
        return descriptor
    if isinstance(descriptor, Mapping):
        return config_type(**descriptor)
    if not callable(descriptor):
        raise DescriptorError(
            f"Expected {config_type.__name__}, mapping or factory, got {type(descriptor).__name__}"
        )

    resolved = descriptor(form, record, index)
    if resolved is None or isinstance(resolved, config_type):
        return resolved
    if isinstance(resolved, Mapping):
        return config_type(**resolved)
    raise DescriptorError(
        f"Factory for a {config_type.__name__} returned {type(resolved).__name__}"
    )


class CellBindingEngine(QObject):
    """Builds cell controls and reconciles their edits into row records."""

    field_committed = pyqtSignal(object)  # FieldCommit

    def __init__(
        self,
        on_field_change: Optional[Callable[[FieldCommit], None]] = None,
        config: Optional[EditGridConfig] = None,
        parent=None
    ):
        super().__init__(parent)
        self._on_field_change = on_field_change
        self._config = config or get_grid_config()

    def backup_key(self, field: str) -> str:
        return f"{field}{self._config.backup_suffix}"

    def ensure_backup(self, record: Row, field: str) -> None:
        """Capture the pre-edit value of ``field`` once per row."""
        key = self.backup_key(field)
        if key not in record:
            record[key] = record.get(field)

    def bind_cell(self, column: ColumnDef, record: Row, index: int, form: RowForm) -> Optional[QWidget]:
        """
        Return the control for this cell, or None for a plain read-only cell.

        Columns without an edit descriptor are always plain. For editable
        columns the backup field is captured before any control exists.
        """
        edit = column.edit
        if edit is None:
            return None
        if not column.data_index:
            raise DescriptorError(f"Editable column {column.title!r} has no data_index")

        field = column.data_index
        self.ensure_backup(record, field)

        if edit.render is not None:
            widget = edit.render(form, record, index)
            if widget is not None:
                return self._bind_rendered(widget, field, record, form)

        input_config = resolve_control_config(edit.input, InputConfig, form, record, index)
        if input_config is not None:
            return self._bind_input(input_config, field, record, index, form)

        select_config = resolve_control_config(edit.select, SelectConfig, form, record, index)
        if select_config is not None:
            return self._bind_select(select_config, field, record, index, form)

        return None

    # ------------------------------------------------------------------
    # Update channels
    # ------------------------------------------------------------------

    def soft_update(self, record: Row, field: str, value: Any, form: RowForm,
                    source: Optional[QWidget] = None) -> None:
        """Write ``value`` into the live record without notifying anyone."""
        record[field] = value
        form.set_field_value(field, value, widget=source)

    def hard_update(self, field: str, value: Any, index: int) -> FieldCommit:
        """Announce a committed edit."""
        commit = FieldCommit(field=field, value=value, row_index=index)
        logger.debug(f"Commit row {index}.{field} = {value!r}")
        if self._on_field_change is not None:
            self._on_field_change(commit)
        self.field_committed.emit(commit)
        return commit

    # ------------------------------------------------------------------
    # Control builders
    # ------------------------------------------------------------------

    def _bind_rendered(self, widget: QWidget, field: str, record: Row, form: RowForm) -> QWidget:
        form.bind(field, widget)
        if isinstance(widget, ChangeSignalEmitter):
            widget.connect_change_signal(
                lambda value: self.soft_update(record, field, value, form, widget)
            )
        return widget

    def _bind_input(self, config: InputConfig, field: str, record: Row, index: int,
                    form: RowForm) -> LineEditAdapter:
        widget = LineEditAdapter()
        widget.set_placeholder(config.placeholder or self._config.input_placeholder)
        widget.setClearButtonEnabled(config.allow_clear)
        widget.setReadOnly(config.read_only)
        if config.max_length is not None:
            widget.setMaxLength(config.max_length)
        form.bind(field, widget)

        def on_change(value):
            if config.on_change is not None:
                config.on_change(value)
            self.soft_update(record, field, value, form, widget)

        def on_blur(value):
            if config.on_blur is not None:
                config.on_blur(value)
            self.hard_update(field, value, index)

        widget.connect_change_signal(on_change)
        widget.connect_commit_signal(on_blur)
        return widget

    def _bind_select(self, config: SelectConfig, field: str, record: Row, index: int,
                     form: RowForm) -> ComboBoxAdapter:
        widget = ComboBoxAdapter()
        widget.set_options(config.options)
        widget.set_placeholder(config.placeholder or self._config.select_placeholder)
        if config.show_search:
            widget.enable_search(config.filter_option)
        form.bind(field, widget)

        def on_change(value):
            if config.on_change is not None:
                config.on_change(value, widget.current_option())
            self.soft_update(record, field, value, form, widget)
            self.hard_update(field, value, index)

        widget.connect_change_signal(on_change)
        return widget
