"""Host widget that renders a fetched JSON list through a template."""

import asyncio
import logging
from typing import Any, Dict, List, Optional, Union

from PyQt6.QtCore import pyqtSignal
from PyQt6.QtWidgets import QVBoxLayout, QWidget

from pyqt_datalist.controllers import ListController
from pyqt_datalist.errors import LayoutDenied
from pyqt_datalist.protocols import get_list_config
from pyqt_datalist.services import DocumentContext, ItemTemplate
from .list_container import ListContainer

logger = logging.getLogger(__name__)


class DataListWidget(QWidget):
    """
    Data-driven list widget.

    Usage:
        context = DocumentContext(base_url="https://example.com/")
        context.templates.register("row", LabelTemplate("{title}"))

        widget = DataListWidget(
            context,
            src="api/items.json",
            template="row",
            placeholder=SpinnerWidget(),
            fallback=QLabel("Could not load items"),
        )
        await widget.layout_callback()   # first render

        widget.set_src("api/other.json") # refreshes in the background
        widget.set_state([{"title": "x"}])  # renders directly, no fetch

    Attributes given in ``attributes`` (e.g. ``{"aria-live": "assertive"}``)
    are applied as dynamic properties before build() and win over defaults.
    """

    content_rendered = pyqtSignal()

    def __init__(
        self,
        context: DocumentContext,
        src: Optional[str] = None,
        items: Optional[str] = None,
        template: Union[str, ItemTemplate, None] = None,
        placeholder: Optional[QWidget] = None,
        fallback: Optional[QWidget] = None,
        attributes: Optional[Dict[str, Any]] = None,
        parent=None,
    ):
        super().__init__(parent)
        self._context = context
        self._src = src
        self._items_expr = items
        self._template = template
        self._placeholder = placeholder
        self._fallback = fallback
        self._attached = False
        for name, value in (attributes or {}).items():
            self.setProperty(name, value)
        self.container: Optional[ListContainer] = None
        self.controller: Optional[ListController] = None
        self.build()

    # Lifecycle -----------------------------------------------------------

    def build(self) -> None:
        """Create the container and apply default accessibility properties."""
        config = get_list_config()
        layout = QVBoxLayout(self)
        layout.setContentsMargins(0, 0, 0, 0)
        layout.setSpacing(0)

        if self._placeholder is not None:
            layout.addWidget(self._placeholder)
            self._placeholder.setVisible(True)

        self.container = ListContainer(self)
        layout.addWidget(self.container)
        if not self.container.property("role"):
            self.container.setProperty("role", config.container_role)
        aria_label = self.property("aria-label")
        if aria_label:
            self.container.setAccessibleName(str(aria_label))

        if self._fallback is not None:
            layout.addWidget(self._fallback)
            self._fallback.setVisible(False)

        if not self.property("aria-live"):
            self.setProperty("aria-live", config.default_aria_live)

        self.container.content_rendered.connect(self.content_rendered)
        self._attached = True
        self.controller = ListController(self, self.container, self._context)

    async def layout_callback(self) -> None:
        """Run the first refresh; raises whatever the cycle raises."""
        await self.controller.refresh()

    def on_attribute_mutation(self, mutations: Dict[str, Any]) -> List[asyncio.Task]:
        """Apply a batch of attribute mutations ("src" and/or "state")."""
        return self.controller.handle_mutations(mutations)

    def detach(self) -> None:
        """Release signal connections. In-flight cycles are left to finish."""
        if not self._attached:
            return
        self.container.content_rendered.disconnect(self.content_rendered)
        self._attached = False

    # Attributes ----------------------------------------------------------

    def src(self) -> Optional[str]:
        return self._src

    def items_expr(self) -> Optional[str]:
        return self._items_expr

    def template(self) -> Union[str, ItemTemplate, None]:
        return self._template

    def set_template(self, template: Union[str, ItemTemplate, None]) -> None:
        self._template = template

    def set_src(self, src: str) -> List[asyncio.Task]:
        return self.mutate(src=src)

    def set_state(self, state: Any) -> List[asyncio.Task]:
        return self.mutate(state=state)

    def mutate(self, **mutations: Any) -> List[asyncio.Task]:
        """Change several attributes in one batch.

        Raises:
            RuntimeError: no asyncio event loop is running; attributes are left unchanged
        """
        self.controller.running_loop()
        if "src" in mutations:
            self._src = mutations["src"]
        if "items" in mutations:
            self._items_expr = mutations["items"]
        return self.on_attribute_mutation(mutations)

    # ListHost surface ----------------------------------------------------

    def has_placeholder(self) -> bool:
        return self._placeholder is not None

    def has_fallback(self) -> bool:
        return self._fallback is not None

    def toggle_placeholder(self, visible: bool) -> None:
        if self._placeholder is not None:
            self._placeholder.setVisible(visible)

    def toggle_fallback(self, visible: bool) -> None:
        if self._fallback is not None:
            self._fallback.setVisible(visible)

    def attempt_change_height(self, height: int) -> None:
        """Grow to height, or raise LayoutDenied when resizing is not allowed."""
        if not get_list_config().auto_resize:
            raise LayoutDenied("Automatic resize is disabled")
        if height > self.maximumHeight():
            raise LayoutDenied(f"Requested height {height} exceeds maximum {self.maximumHeight()}")
        logger.debug(f"DataListWidget: height {self.height()} -> {height}")
        self.setMinimumHeight(height)
        self.resize(self.width(), height)
