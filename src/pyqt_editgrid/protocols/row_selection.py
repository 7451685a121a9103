"""Row selection provider protocol.

Row selection (checkbox/radio state and its actions) is supplied by the host
or a library; the grid only consumes its result. Stateless providers are plain
callables; providers that hold selection state subclass RowSelectionModel and
emit ``changed`` so the table handle re-reads them.
"""

from dataclasses import dataclass, field
from typing import Any, Callable, Dict, Mapping, Optional, Protocol, Sequence

from PyQt6.QtCore import QObject, pyqtSignal

from pyqt_editgrid.types import Row


@dataclass
class RowSelectionResult:
    """Selection state plus the actions that change it."""
    state: Dict[str, Any] = field(default_factory=dict)
    actions: Dict[str, Callable[..., Any]] = field(default_factory=dict)


class RowSelectionProvider(Protocol):
    """Given the current rows and selection config, return state and actions."""

    def __call__(self, rows: Sequence[Row], config: Mapping[str, Any]) -> RowSelectionResult:
        ...


class RowSelectionModel(QObject):
    """
    Base for stateful selection providers.

    Emit ``changed`` whenever the selection state changes.

    Usage:
        class CheckboxSelection(RowSelectionModel):
            def __call__(self, rows, config):
                return RowSelectionResult(state={"selected_keys": self.keys},
                                          actions={"select": self.select})
    """

    changed = pyqtSignal()

    def __call__(self, rows: Sequence[Row], config: Mapping[str, Any]) -> RowSelectionResult:
        raise NotImplementedError


_row_selection_provider: Optional[RowSelectionProvider] = None


def register_row_selection_provider(provider: RowSelectionProvider) -> None:
    """Register a global row selection provider."""
    global _row_selection_provider
    _row_selection_provider = provider


def get_row_selection_provider() -> Optional[RowSelectionProvider]:
    """Get the registered row selection provider."""
    return _row_selection_provider
