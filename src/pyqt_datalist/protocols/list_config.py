"""Base configuration for data-list widgets.

Provides hooks for applications to customize fetching and rendering behavior.
"""

from dataclasses import dataclass
from typing import Optional


@dataclass
class DataListConfig:
    """Configuration shared by every data-list widget in the process.

    Applications can subclass this to provide custom configuration.

    Attributes:
        default_items_expr: Expression path used when the host sets none
        component_tag: Tag prefixed to every error message
        container_role: Accessibility role given to the container
        item_role: Accessibility role given to each rendered item
        default_aria_live: Live-region politeness given to the host
        fetch_timeout_s: Timeout for a single HTTP request
        fetch_retries: Extra attempts after a failed HTTP request
        fetch_backoff_s: Base delay for exponential backoff between attempts
        user_agent: User-Agent header sent by the default data source
        auto_resize: Whether hosts accept automatic height changes
    """

    default_items_expr: str = "items"
    component_tag: str = "DATA-LIST"
    container_role: str = "list"
    item_role: str = "listitem"
    default_aria_live: str = "polite"
    fetch_timeout_s: float = 10.0
    fetch_retries: int = 0
    fetch_backoff_s: float = 0.5
    user_agent: str = "pyqt-datalist/0.1"
    auto_resize: bool = True


# Global config instance (set by application)
_list_config: Optional[DataListConfig] = None


def set_list_config(config: Optional[DataListConfig]) -> None:
    """Set the global data-list configuration.

    Args:
        config: DataListConfig instance, or None to restore defaults
    """
    global _list_config
    _list_config = config


def get_list_config() -> DataListConfig:
    """Get the current data-list configuration.

    Returns:
        Current DataListConfig or default if not set
    """
    if _list_config is None:
        return DataListConfig()
    return _list_config
