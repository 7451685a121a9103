"""
Registry of per-row edit buffers.

An arena indexed by row position: buffers are created on first render of a
slot, replaced when the slot now holds a different row object, and trailing
slots are dropped after each render pass. Rows are positional because each
fetch replaces the whole page.
"""

import logging
from typing import List, Optional, Sequence

from pyqt_editgrid.config import EditGridConfig, get_grid_config
from pyqt_editgrid.forms.row_form import RowForm
from pyqt_editgrid.types import Row

logger = logging.getLogger(__name__)


def reset_data_source(rows: Sequence[Row], backup_suffix: Optional[str] = None) -> List[Row]:
    """
    Copy every backup field back onto its field, in place.

    Returns the same row objects in a new list.
    """
    suffix = backup_suffix or get_grid_config().backup_suffix
    for row in rows:
        backups = [key for key in row if key.endswith(suffix) and len(key) > len(suffix)]
        for key in backups:
            row[key[:-len(suffix)]] = row[key]
    return list(rows)


class RowFormRegistry:
    """Owns ``forms[index] -> RowForm`` for the rendered rows."""

    def __init__(self, config: Optional[EditGridConfig] = None):
        self._config = config or get_grid_config()
        # Exposed as handle.forms; mutated in place, never rebound
        self.forms: List[RowForm] = []

    def __len__(self) -> int:
        return len(self.forms)

    def __getitem__(self, index: int) -> RowForm:
        return self.forms[index]

    def obtain(self, index: int, record: Row) -> RowForm:
        """Return the buffer for row ``index``, creating a fresh one when needed."""
        if index < len(self.forms):
            form = self.forms[index]
            if form.belongs_to(record):
                form.unbind_all()
                return form
            logger.debug(f"Row {index} holds a different record; replacing its form")
        else:
            self.forms.extend([None] * (index + 1 - len(self.forms)))

        form = RowForm(index, record)
        self.forms[index] = form
        return form

    def truncate(self, count: int) -> None:
        """Drop buffers for slots at or beyond ``count``."""
        if len(self.forms) > count:
            logger.debug(f"Dropping {len(self.forms) - count} stale row form(s)")
            del self.forms[count:]

    def clear(self) -> None:
        del self.forms[:]

    def reset_all(self, rows: Sequence[Row]) -> List[Row]:
        """
        Restore every edited field of ``rows`` to its backup, then reset
        every live buffer's presentation state.
        """
        restored = reset_data_source(rows, self._config.backup_suffix)
        for form in self.forms:
            if form is not None:
                form.reset_fields()
        logger.debug(f"Reset {len(restored)} row(s) and {len(self.forms)} form(s)")
        return restored
