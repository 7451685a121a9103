"""
Editable, server-paged table widget.

Composes the grid engine: QueryController feeds rows, every render pass binds
each row to its RowForm and each editable cell to a control through
CellBindingEngine, and HandleBridge keeps the host's TableHandle current.
Header clicks on sortable columns and the pager buttons are reported as table
changes and re-queried.
"""

import logging
import math
from typing import Any, Callable, List, Mapping, Optional, Sequence

from PyQt6.QtWidgets import (
    QWidget, QVBoxLayout, QHBoxLayout, QTableWidget, QTableWidgetItem,
    QHeaderView, QAbstractItemView, QLabel, QPushButton
)
from PyQt6.QtCore import Qt, pyqtSignal

from pyqt_editgrid.config import EditGridConfig, get_grid_config
from pyqt_editgrid.forms import CellBindingEngine, RowFormRegistry
from pyqt_editgrid.handle import HandleBridge, TableHandle
from pyqt_editgrid.protocols import RowSelectionProvider
from pyqt_editgrid.services import QueryController
from pyqt_editgrid.services.query_controller import PaginationOption, QueryFunction
from pyqt_editgrid.types import ColumnDef, FieldCommit, Pagination, Row

logger = logging.getLogger(__name__)

TableChangeCallback = Callable[[Optional[Pagination], Mapping[str, Any], Mapping[str, Any], Mapping[str, Any]], None]

_NEXT_ORDER = {None: 'ascend', 'ascend': 'descend', 'descend': None}


class EditableTable(QWidget):
    """
    Table whose rows are independent edit scopes over server-queried data.

    Usage:
        handle = TableHandle()
        table = EditableTable(columns, query=fetch_page, handle=handle)
        table.field_committed.connect(save_field)
        ...
        handle.query(payload={"status": "open"})
        handle.reset_forms()
    """

    field_committed = pyqtSignal(object)  # FieldCommit
    query_failed = pyqtSignal(Exception)

    def __init__(
        self,
        columns: Sequence[ColumnDef],
        query: Optional[QueryFunction] = None,
        data_source: Optional[List[Row]] = None,
        pagination: PaginationOption = None,
        handle: Optional[TableHandle] = None,
        row_selection: Optional[Mapping[str, Any]] = None,
        selection_provider: Optional[RowSelectionProvider] = None,
        on_change: Optional[TableChangeCallback] = None,
        on_field_change: Optional[Callable[[FieldCommit], None]] = None,
        config: Optional[EditGridConfig] = None,
        spawn: Optional[Callable] = None,
        parent=None
    ):
        super().__init__(parent)
        self._config = config or get_grid_config()
        self.columns: List[ColumnDef] = list(columns)
        self._on_change = on_change
        self._sorter: Mapping[str, Any] = {}

        self.controller = QueryController(
            query=query, data=data_source, pagination=pagination,
            config=self._config, spawn=spawn, parent=self
        )
        self.registry = RowFormRegistry(config=self._config)
        self.engine = CellBindingEngine(on_field_change=on_field_change, config=self._config, parent=self)
        self.engine.field_committed.connect(self.field_committed)

        self._setup_ui()
        self._setup_connections()

        self.bridge = HandleBridge(
            handle if handle is not None else TableHandle(),
            self.controller, self.registry,
            selection_config=row_selection,
            selection_provider=selection_provider,
        )

        self.render_rows(self.controller.data)
        self._update_pager(self.controller.pagination)
        self.controller.mount()

    @property
    def handle(self) -> TableHandle:
        return self.bridge.handle

    def _setup_ui(self):
        """Set up the table, status label and pager."""
        layout = QVBoxLayout(self)
        layout.setContentsMargins(5, 5, 5, 5)
        layout.setSpacing(5)

        self.status_label = QLabel("No items loaded")
        layout.addWidget(self.status_label)

        self.table_widget = QTableWidget()
        self._configure_table()
        layout.addWidget(self.table_widget, 1)  # Stretch to fill

        pager = QHBoxLayout()
        self.prev_button = QPushButton("<")
        self.page_label = QLabel("")
        self.next_button = QPushButton(">")
        pager.addStretch(1)
        pager.addWidget(self.prev_button)
        pager.addWidget(self.page_label)
        pager.addWidget(self.next_button)
        layout.addLayout(pager)

    def _configure_table(self):
        """Configure table based on column definitions."""
        self.table_widget.setColumnCount(len(self.columns))
        self.table_widget.setHorizontalHeaderLabels([col.title for col in self.columns])
        self.table_widget.setSelectionBehavior(QAbstractItemView.SelectionBehavior.SelectRows)
        # Sorting is the server's job
        self.table_widget.setSortingEnabled(False)

        header = self.table_widget.horizontalHeader()
        for i, col in enumerate(self.columns):
            header.setSectionResizeMode(i, QHeaderView.ResizeMode.Interactive)
            if col.width:
                self.table_widget.setColumnWidth(i, col.width)

    def _setup_connections(self):
        """Connect signals to slots."""
        self.controller.data_changed.connect(self.render_rows)
        self.controller.loading_changed.connect(self._on_loading_changed)
        self.controller.pagination_changed.connect(self._update_pager)
        self.controller.query_failed.connect(self.query_failed)
        self.table_widget.horizontalHeader().sectionClicked.connect(self._on_header_clicked)
        self.prev_button.clicked.connect(lambda: self._go_to_page(-1))
        self.next_button.clicked.connect(lambda: self._go_to_page(1))

    # ------------------------------------------------------------------
    # Rendering
    # ------------------------------------------------------------------

    def render_rows(self, rows: List[Row]):
        """One render pass: bind every row to its form and every cell to its control."""
        self.table_widget.setRowCount(len(rows))

        for index, record in enumerate(rows):
            form = self.registry.obtain(index, record)
            for col, column in enumerate(self.columns):
                widget = self.engine.bind_cell(column, record, index, form)
                if widget is not None:
                    self.table_widget.setCellWidget(index, col, widget)
                    continue
                self.table_widget.removeCellWidget(index, col)
                item = QTableWidgetItem(self.format_value(record.get(column.data_index)))
                item.setFlags(item.flags() & ~Qt.ItemFlag.ItemIsEditable)
                self.table_widget.setItem(index, col, item)

        self.registry.truncate(len(rows))
        self.bridge.sync()
        self._update_status()

    def format_value(self, value: Any) -> str:
        """Display text of a plain cell. Override for custom formatting."""
        return "" if value is None else str(value)

    def _update_status(self):
        if self.controller.loading:
            return
        self.status_label.setText(f"Showing {len(self.controller.data)} rows")

    def _on_loading_changed(self, loading: bool):
        self.table_widget.setEnabled(not loading)
        if loading:
            self.status_label.setText(self._config.loading_text)
        else:
            self._update_status()

    def _update_pager(self, pagination: Optional[Pagination]):
        enabled = pagination is not None
        for widget in (self.prev_button, self.page_label, self.next_button):
            widget.setVisible(enabled)
        if not enabled:
            return

        current = pagination.current or 1
        pages = None
        if pagination.total is not None and pagination.page_size:
            pages = max(1, math.ceil(pagination.total / pagination.page_size))
        self.page_label.setText(f"{current} / {pages}" if pages else str(current))
        self.prev_button.setEnabled(current > 1)
        self.next_button.setEnabled(pages is None or current < pages)

    # ------------------------------------------------------------------
    # Table interactions
    # ------------------------------------------------------------------

    def _go_to_page(self, step: int):
        pagination = self.controller.pagination
        if pagination is None:
            return
        target = Pagination(
            current=max(1, (pagination.current or 1) + step),
            page_size=pagination.page_size,
            total=pagination.total,
        )
        self.emit_table_change(target, extra={'action': 'paginate'})

    def _on_header_clicked(self, section: int):
        column = self.columns[section]
        if not column.sortable:
            return
        previous = self._sorter.get('order') if self._sorter.get('field') == column.data_index else None
        order = _NEXT_ORDER[previous]
        self._sorter = {'field': column.data_index, 'order': order} if order else {}
        self.emit_table_change(self.controller.pagination, sorter=self._sorter, extra={'action': 'sort'})

    def emit_table_change(self, pagination: Optional[Pagination], filters: Optional[Mapping[str, Any]] = None,
                          sorter: Optional[Mapping[str, Any]] = None,
                          extra: Optional[Mapping[str, Any]] = None):
        """Report a table interaction to the host callback, then re-query."""
        filters = filters or {}
        sorter = sorter if sorter is not None else self._sorter
        extra = dict(extra or {}, current_data_source=self.controller.data)
        if self._on_change is not None:
            self._on_change(pagination, filters, sorter, extra)
        return self.controller.schedule(self.controller.table_change_args(pagination, filters, sorter, extra))

    def set_data_source(self, rows: List[Row]):
        """Replace the rows with externally supplied ones."""
        if self.controller.mounted:
            self.controller.set_data(rows)

    # ------------------------------------------------------------------
    # Teardown
    # ------------------------------------------------------------------

    def teardown(self):
        """Stop the initial query and ignore in-flight results."""
        self.controller.unmount()

    def closeEvent(self, event):
        self.teardown()
        super().closeEvent(event)
