"""
Widget protocol definitions and adapters.

ABC-based cell control contracts, their Qt adapters, and the row selection
provider protocol.
"""

from .widget_protocols import (
    ValueGettable,
    ValueSettable,
    PlaceholderCapable,
    ChangeSignalEmitter,
    CommitSignalEmitter,
)
from .widget_adapters import (
    LineEditAdapter,
    ComboBoxAdapter,
    PyQtWidgetMeta,
    default_filter_option,
)
from .row_selection import (
    RowSelectionProvider,
    RowSelectionResult,
    RowSelectionModel,
    register_row_selection_provider,
    get_row_selection_provider,
)

__all__ = [
    "ValueGettable",
    "ValueSettable",
    "PlaceholderCapable",
    "ChangeSignalEmitter",
    "CommitSignalEmitter",
    "LineEditAdapter",
    "ComboBoxAdapter",
    "PyQtWidgetMeta",
    "default_filter_option",
    "RowSelectionProvider",
    "RowSelectionResult",
    "RowSelectionModel",
    "register_row_selection_provider",
    "get_row_selection_provider",
]
