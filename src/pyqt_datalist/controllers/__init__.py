"""
Controllers.

The list-rendering pipeline and its visual-state bookkeeping.
"""

from .visual_state import VisualState, VisualStateManager
from .list_controller import ListController, PipelineState

__all__ = [
    "VisualState",
    "VisualStateManager",
    "ListController",
    "PipelineState",
]
