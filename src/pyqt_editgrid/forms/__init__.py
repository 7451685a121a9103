"""
Per-row edit buffers and the cell binding engine.
"""

from .row_form import RowForm
from .row_form_registry import RowFormRegistry, reset_data_source
from .cell_binding import CellBindingEngine, resolve_control_config

__all__ = [
    "RowForm",
    "RowFormRegistry",
    "reset_data_source",
    "CellBindingEngine",
    "resolve_control_config",
]
