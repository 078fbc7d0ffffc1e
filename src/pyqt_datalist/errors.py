"""Exception hierarchy for data-list rendering.

Every pipeline failure is tagged with the component name so that messages
surfaced to developer tooling identify which widget produced them.
"""

from typing import Any, Optional

from pyqt_datalist.protocols.list_config import get_list_config


class DataListError(Exception):
    """Base class for all errors raised by pyqt-datalist."""

    def __init__(self, message: str, tag: Optional[str] = None):
        if tag is None:
            tag = get_list_config().component_tag
        self.tag = tag
        super().__init__(f"[{tag}] {message}")


class FetchError(DataListError):
    """Raised when the data source fails (network or parse failure)."""


class ValidationError(DataListError):
    """Raised when the fetched payload is not a list at the expression path."""

    def __init__(self, message: str, expression_path: str, element: Any = None,
                 tag: Optional[str] = None):
        super().__init__(message, tag)
        self.expression_path = expression_path
        self.element = element


class RenderError(DataListError):
    """Raised when template expansion fails."""


class TemplateNotFoundError(RenderError):
    """Raised when no item template can be resolved for a host widget."""


class LayoutDenied(DataListError):
    """Raised by a host that refuses an automatic height change."""
