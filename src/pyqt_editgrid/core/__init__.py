"""
Core PyQt6 utilities.

Small Qt helpers with no grid-specific logic.
"""

from .background_task import BackgroundTask
from .deferred_call import DeferredCall

__all__ = [
    "BackgroundTask",
    "DeferredCall",
]
