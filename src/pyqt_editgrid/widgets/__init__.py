"""
Grid widgets.

The editable table composing the query controller, row form registry, cell
binding engine and handle bridge.
"""

from .editable_table import EditableTable

__all__ = [
    "EditableTable",
]
