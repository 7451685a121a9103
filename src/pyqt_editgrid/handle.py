"""
Imperative handle for host containers.

The host creates one TableHandle and passes it to the table. The table never
replaces it; HandleBridge re-populates its fields whenever the data set, the
row form registry, or the selection changes, so references the host keeps
always call through to current state.

The host treats ``handle.data`` as read-only and goes through
``handle.query`` / ``handle.reset_forms`` instead of mutating rows.
"""

import logging
from typing import Any, Dict, List, Mapping, Optional

from pyqt_editgrid.exceptions import HandleNotBoundError
from pyqt_editgrid.forms import RowForm, RowFormRegistry
from pyqt_editgrid.protocols import RowSelectionModel, RowSelectionProvider, get_row_selection_provider
from pyqt_editgrid.services import REUSE_PAYLOAD, QueryController
from pyqt_editgrid.types import Row

logger = logging.getLogger(__name__)


class TableHandle:
    """Mutable control surface filled in by the table it is bound to."""

    def __init__(self):
        self.data: List[Row] = []
        self.forms: List[RowForm] = []
        self.selection: Optional[Dict[str, Any]] = None

    def query(self, pagination=None, payload=REUSE_PAYLOAD, changes=None):
        raise HandleNotBoundError("TableHandle.query called before a table bound this handle")

    def reset_forms(self) -> None:
        raise HandleNotBoundError("TableHandle.reset_forms called before a table bound this handle")


class HandleBridge:
    """Keeps a TableHandle pointing at the current controller, registry and selection."""

    def __init__(
        self,
        handle: TableHandle,
        controller: QueryController,
        registry: RowFormRegistry,
        selection_config: Optional[Mapping[str, Any]] = None,
        selection_provider: Optional[RowSelectionProvider] = None,
    ):
        self.handle = handle
        self._controller = controller
        self._registry = registry
        self._selection_config = selection_config
        self._selection_provider = selection_provider or get_row_selection_provider()
        controller.data_changed.connect(lambda _rows: self.sync())
        if isinstance(self._selection_provider, RowSelectionModel):
            self._selection_provider.changed.connect(self.sync)
        self.sync()

    @property
    def selection_enabled(self) -> bool:
        return isinstance(self._selection_config, Mapping) and self._selection_provider is not None

    def sync(self) -> None:
        """Re-populate every handle field from current state."""
        handle = self.handle
        handle.query = self._query
        handle.data = self._controller.data
        handle.forms = self._registry.forms
        handle.reset_forms = self._reset_forms
        if self.selection_enabled:
            result = self._selection_provider(handle.data, self._selection_config)
            handle.selection = {**result.actions, **result.state}

    def _query(self, pagination=None, payload=REUSE_PAYLOAD, changes=None):
        args = self._controller.refresh_args(pagination=pagination, payload=payload, changes=changes)
        return self._controller.schedule(args)

    def _reset_forms(self) -> None:
        rows = self._registry.reset_all(self._controller.data)
        # Re-render so plain cells show the restored values too
        self._controller.set_data(rows)
