"""
Widgets.

The data-list host widget and the container it renders into.
"""

from .list_container import ListContainer
from .data_list import DataListWidget

__all__ = [
    "ListContainer",
    "DataListWidget",
]
