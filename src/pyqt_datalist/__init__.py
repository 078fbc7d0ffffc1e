"""
pyqt-datalist: data-driven list widgets for PyQt6.

Fetches JSON, expands each item through a template into a widget, and
reconciles the result into a container while keeping loading placeholders
and error fallbacks in step with the outcome.

Architecture:
- Core: frame-batched read/write scheduler, JSON expression paths
- Protocols: DataSource / TemplateRenderer / Scheduler contracts, configuration
- Services: httpx-backed batched JSON source, template registry, per-document scope
- Controllers: the fetch -> render -> reconcile -> reflow pipeline
- Widgets: DataListWidget host and its ListContainer
"""

__version__ = "0.1.0"

from .errors import (
    DataListError,
    FetchError,
    ValidationError,
    RenderError,
    TemplateNotFoundError,
    LayoutDenied,
)

__all__ = [
    "__version__",
    "DataListError",
    "FetchError",
    "ValidationError",
    "RenderError",
    "TemplateNotFoundError",
    "LayoutDenied",
]
