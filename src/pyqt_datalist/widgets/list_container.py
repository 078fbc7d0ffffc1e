"""Container widget whose children are replaced wholesale on every render."""

from typing import List, Optional

from PyQt6.QtCore import Qt, pyqtSignal
from PyQt6.QtWidgets import QVBoxLayout, QWidget


def _explicitly_hidden(widget: QWidget) -> bool:
    return widget.isHidden() and widget.testAttribute(Qt.WidgetAttribute.WA_WState_ExplicitShowHide)


class ListContainer(QWidget):
    """Vertical stack of rendered items.

    Emits ``content_rendered`` after each reconciliation. Children are never
    patched: replace_children() detaches every old child before adding the
    new ones.
    """

    content_rendered = pyqtSignal()

    def __init__(self, parent=None):
        super().__init__(parent)
        self.setObjectName("dataListContainer")
        self._items: List[QWidget] = []
        self._layout = QVBoxLayout(self)
        self._layout.setContentsMargins(0, 0, 0, 0)
        self._layout.setSpacing(0)

    def items(self) -> List[QWidget]:
        return list(self._items)

    def clear(self) -> None:
        for widget in self._items:
            self._layout.removeWidget(widget)
            widget.setParent(None)
            widget.deleteLater()
        self._items = []

    def replace_children(self, widgets: List[QWidget]) -> None:
        self.clear()
        for widget in widgets:
            self._layout.addWidget(widget)
            self._items.append(widget)

    def content_height(self, width: Optional[int] = None) -> int:
        """Height the items need at width, independent of the height currently laid out.

        Items with height-for-width (e.g. word-wrapped labels) are measured at
        the available width; width defaults to the container's own.
        """
        margins = self._layout.contentsMargins()
        if width is None:
            width = self.width()
        inner_width = max(0, width - margins.left() - margins.right())
        height = margins.top() + margins.bottom()
        visible = [w for w in self._items if not _explicitly_hidden(w)]
        for widget in visible:
            hint = widget.sizeHint().expandedTo(widget.minimumSize()).boundedTo(widget.maximumSize())
            item_height = hint.height()
            if widget.hasHeightForWidth():
                item_height = widget.heightForWidth(inner_width)
                item_height = max(widget.minimumHeight(), min(item_height, widget.maximumHeight()))
            height += item_height
        if len(visible) > 1:
            height += self._layout.spacing() * (len(visible) - 1)
        return height
