"""
pyqt-editgrid: editable, server-paged grids for PyQt6.

Binds a paginated, server-queried data set to per-row edit buffers and keeps
three surfaces consistent: the fetched rows, the row forms, and an imperative
handle exposed to the host.

Architecture:
- Core: Qt utilities (deferred calls)
- Protocols: cell control ABCs, their adapters, row selection provider
- Services: signal blocking, QueryController (paging, loading, stale guards)
- Forms: RowForm, RowFormRegistry, CellBindingEngine (soft/hard updates)
- Handle: TableHandle and HandleBridge
- Widgets: EditableTable

Key Features:
- Soft updates on every keystroke, hard updates on commit
- Write-once backup fields for resetting edits
- Unmount and out-of-order guards on query results
"""

__version__ = "0.1.0"

__all__ = [
    "__version__",
]
