"""
Core utilities.

Pure helpers with no knowledge of data sources or templates.
"""

from .frame_scheduler import FrameScheduler
from .json_path import get_value_for_expr, ROOT_EXPR

__all__ = [
    "FrameScheduler",
    "get_value_for_expr",
    "ROOT_EXPR",
]
