"""
Service layer for editable grids.

Signal blocking for programmatic control updates and the query/pagination
state machine.
"""

from .signal_service import SignalService
from .query_controller import QueryController, REUSE_PAYLOAD

__all__ = [
    "SignalService",
    "QueryController",
    "REUSE_PAYLOAD",
]
