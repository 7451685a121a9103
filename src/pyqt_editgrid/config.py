"""Global configuration for editable grids.

Applications set one ``EditGridConfig`` at startup; components read it when
they are constructed.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Optional


class QueryOrdering(Enum):
    """Which response wins when several queries are in flight at once."""
    LAST_ISSUED = 'last_issued'      # results of superseded requests are dropped
    LAST_RESOLVED = 'last_resolved'  # whatever resolves last is applied


@dataclass
class EditGridConfig:
    """Configuration for editable grid behavior.

    Attributes:
        initial_query_delay_ms: Delay before the automatic first query after mount
        default_page_size: Page size used when paging is enabled without one
        backup_suffix: Suffix of the shadow field holding a pre-edit value
        query_ordering: Policy for out-of-order query responses
        input_placeholder: Placeholder of text input cells
        select_placeholder: Placeholder of selection cells
        loading_text: Status text shown while a query is in flight
    """

    initial_query_delay_ms: int = 199
    default_page_size: int = 10
    backup_suffix: str = "_old"
    query_ordering: QueryOrdering = QueryOrdering.LAST_ISSUED
    input_placeholder: str = "Please enter"
    select_placeholder: str = "Please select"
    loading_text: str = "Loading..."


# Global config instance (set by application)
_grid_config: Optional[EditGridConfig] = None


def set_grid_config(config: Optional[EditGridConfig]) -> None:
    """Set the global grid configuration. ``None`` restores the defaults."""
    global _grid_config
    _grid_config = config


def get_grid_config() -> EditGridConfig:
    """Get the current grid configuration, or the defaults if none is set."""
    if _grid_config is None:
        return EditGridConfig()
    return _grid_config
