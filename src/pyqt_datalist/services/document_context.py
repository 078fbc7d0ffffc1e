"""Per-document service scope.

One DocumentContext is created per hosted document and handed to every
data-list widget built inside it. It owns the shared collaborators and
tears them down with the document.
"""

import logging
from typing import Optional

import httpx

from pyqt_datalist.core import FrameScheduler
from pyqt_datalist.protocols import DataSource, Scheduler, TemplateRenderer
from .animation_actions import AnimationActionDispatcher, AnimationRuntime
from .batched_json import BatchedJsonSource
from .templates import TemplateRegistry

logger = logging.getLogger(__name__)


class DocumentContext:
    """
    Explicit dependency scope for one document.

    Usage:
        context = DocumentContext(base_url="https://example.com/app/")
        context.templates.register("row", LabelTemplate("{name}"))
        widget = DataListWidget(context, src="data/items.json", template="row")
        ...
        await context.aclose()

    Any collaborator left as None gets the package default. An animation
    runtime, when given, is wrapped in the document's action dispatcher
    (``context.animation_actions``).
    """

    def __init__(
        self,
        base_url: Optional[str] = None,
        data_source: Optional[DataSource] = None,
        templates: Optional[TemplateRenderer] = None,
        scheduler: Optional[Scheduler] = None,
        animation_runtime: Optional[AnimationRuntime] = None,
    ):
        self.base_url = base_url
        self.data_source = data_source if data_source is not None else BatchedJsonSource()
        self.templates = templates if templates is not None else TemplateRegistry()
        self.scheduler = scheduler if scheduler is not None else FrameScheduler()
        self.animation_runtime = animation_runtime
        self.animation_actions: Optional[AnimationActionDispatcher] = (
            AnimationActionDispatcher(animation_runtime) if animation_runtime is not None else None
        )
        self.closed = False

    def resolve_url(self, src: str) -> str:
        """Resolve a possibly relative src against the document base URL."""
        if not self.base_url:
            return src
        return str(httpx.URL(self.base_url).join(src))

    async def aclose(self) -> None:
        """Release collaborators owned by this document."""
        if self.closed:
            return
        self.closed = True
        aclose = getattr(self.data_source, "aclose", None)
        if aclose is not None:
            await aclose()
        logger.debug("DocumentContext: closed")
