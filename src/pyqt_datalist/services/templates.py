"""
Item templates and the default template renderer.

A template turns one JSON item into one widget. Hosts name their template
either by handing over an ItemTemplate instance or by the name it was
registered under in the document's TemplateRegistry.

Example:
    registry = TemplateRegistry()
    registry.register("row", LabelTemplate("{title} ({count})"))

    host.set_template("row")
    widgets = await registry.render_all(host, [{"title": "a", "count": 1}])
"""

from abc import ABC, abstractmethod
from typing import Any, Callable, Dict, List, Mapping, Optional, Sequence
import logging

from PyQt6.QtWidgets import QLabel, QWidget

from pyqt_datalist.errors import TemplateNotFoundError

logger = logging.getLogger(__name__)


class ItemTemplate(ABC):
    """ABC for templates that render one data item to a widget."""

    @abstractmethod
    def render(self, item: Any) -> QWidget:
        """
        Render a single item.

        Args:
            item: Decoded JSON value (object or primitive)

        Returns:
            A new, unparented widget. Ownership passes to the caller.
        """
        pass


class LabelTemplate(ItemTemplate):
    """Renders items as QLabels from a str.format pattern.

    Object items supply their fields as format keys; primitive items are
    available as ``{value}``.
    """

    def __init__(self, pattern: str, object_name: str = "dataListItem"):
        self._pattern = pattern
        self._object_name = object_name

    def render(self, item: Any) -> QWidget:
        fields = item if isinstance(item, Mapping) else {"value": item}
        label = QLabel(self._pattern.format_map(fields))
        label.setObjectName(self._object_name)
        label.setWordWrap(True)
        return label


class CallableTemplate(ItemTemplate):
    """Adapts a plain factory function to the ItemTemplate contract."""

    def __init__(self, factory: Callable[[Any], QWidget]):
        self._factory = factory

    def render(self, item: Any) -> QWidget:
        return self._factory(item)


class TemplateRegistry:
    """Per-document template lookup and default TemplateRenderer."""

    def __init__(self):
        self._templates: Dict[str, ItemTemplate] = {}

    def register(self, name: str, template: ItemTemplate) -> None:
        self._templates[name] = template

    def get(self, name: str) -> Optional[ItemTemplate]:
        return self._templates.get(name)

    def find_template(self, host) -> ItemTemplate:
        """Resolve the template a host widget refers to.

        Raises:
            TemplateNotFoundError: host names no template or an unknown one
        """
        ref = host.template()
        if isinstance(ref, ItemTemplate):
            return ref
        if isinstance(ref, str) and ref in self._templates:
            return self._templates[ref]
        raise TemplateNotFoundError(
            f"Template not found for {type(host).__name__} (template={ref!r})"
        )

    async def render_all(self, host, items: Sequence[Any]) -> List[QWidget]:
        template = self.find_template(host)
        widgets: List[QWidget] = []
        try:
            for item in items:
                widgets.append(template.render(item))
        except Exception:
            for widget in widgets:
                widget.deleteLater()
            raise
        logger.debug(f"TemplateRegistry: rendered {len(widgets)} items with {type(template).__name__}")
        return widgets
