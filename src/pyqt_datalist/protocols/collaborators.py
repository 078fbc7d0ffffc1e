"""Collaborator protocols consumed by the list controller.

The controller never looks services up by name; a DocumentContext hands it
one implementation of each protocol.
"""

from typing import Any, Callable, List, Optional, Protocol, Sequence

from PyQt6.QtWidgets import QWidget


class Scheduler(Protocol):
    """Read/write batching primitive.

    Reads queued for a frame run before any write queued for that frame.
    """

    def schedule_read(self, fn: Callable[[], None]) -> None:
        ...

    def schedule_write(self, fn: Callable[[], None]) -> None:
        ...


class DataSource(Protocol):
    """Fetches the JSON array a host widget should render."""

    async def fetch_items(self, context: Any, host: QWidget, expression_path: str) -> Any:
        """Return the value found at expression_path in the host's document."""
        ...


class TemplateRenderer(Protocol):
    """Expands data items into widgets using the host's template."""

    async def render_all(self, host: QWidget, items: Sequence[Any]) -> List[QWidget]:
        """Return one widget per item, in item order."""
        ...


class ListHost(Protocol):
    """Surface of the host widget the controller drives."""

    def height(self) -> int:
        ...

    def src(self) -> Optional[str]:
        ...

    def items_expr(self) -> Optional[str]:
        ...

    def template(self) -> Any:
        """An ItemTemplate, or the name of one registered for the document."""
        ...

    def has_placeholder(self) -> bool:
        ...

    def has_fallback(self) -> bool:
        ...

    def toggle_placeholder(self, visible: bool) -> None:
        ...

    def toggle_fallback(self, visible: bool) -> None:
        ...

    def attempt_change_height(self, height: int) -> None:
        """Resize to height or raise LayoutDenied."""
        ...
