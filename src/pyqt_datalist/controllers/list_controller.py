"""
List-rendering controller.

Drives the fetch -> render -> reconcile -> reflow pipeline for one host
widget and its container.

Pipeline
--------
1. fetch      DataSource.fetch_items(context, host, expr)       -> FetchError
2. validate   value must be a list                              -> ValidationError
3. render     TemplateRenderer.render_all(host, items)           -> RenderError
4. reconcile  replace container children, assign roles, emit content_rendered
5. reflow     scheduled read measures; scheduled write grows the host
6. visuals    placeholder/fallback follow the outcome

Concurrency
-----------
refresh() is re-entrant and nothing is cancelled. Every cycle takes the next
sequence id. A cycle settles when it is applied or when it fails while
current. A result is applied only when its id is greater than the highest
settled id, so a slow early cycle never overwrites a later one, and an early
success landing after a later failure does not hide that failure's fallback.
A failure from a cycle older than the highest settled id leaves the
placeholder and fallback alone.
"""

import asyncio
import logging
from enum import Enum
from typing import Any, Awaitable, Callable, Dict, List, Optional, Sequence, Set

from PyQt6.QtWidgets import QWidget

from pyqt_datalist.errors import FetchError, LayoutDenied, RenderError, ValidationError
from pyqt_datalist.protocols import get_list_config
from .visual_state import VisualStateManager

logger = logging.getLogger(__name__)


class PipelineState(Enum):
    IDLE = "idle"
    FETCHING = "fetching"
    RENDERING = "rendering"
    RECONCILING = "reconciling"
    FAILED_FETCH = "failedFetch"
    FAILED_RENDER = "failedRender"


_CYCLE_ERRORS = (FetchError, ValidationError, RenderError)


class ListController:
    """
    Owns one container and runs render cycles into it.

    Usage:
        controller = ListController(host, container, context)
        await controller.refresh()           # fetch from host.src()
        await controller.render_items([...]) # bypass the data source
    """

    def __init__(self, host, container, context):
        self._host = host
        self._container = container
        self._context = context
        self._data_source = context.data_source
        self._templates = context.templates
        self._scheduler = context.scheduler
        self.visual_state = VisualStateManager(host, self._scheduler)

        self._last_started_seq = 0
        self._highest_applied_seq = 0
        self._highest_settled_seq = 0
        self._tasks: Set[asyncio.Task] = set()
        self.state = PipelineState.IDLE

    @property
    def highest_applied_seq(self) -> int:
        return self._highest_applied_seq

    # Cycles --------------------------------------------------------------

    async def refresh(self, expression_path: Optional[str] = None) -> None:
        """Fetch, render and reconcile.

        Raises:
            FetchError: the data source failed
            ValidationError: no list at the expression path
            RenderError: template expansion failed
        """
        expr = expression_path or self._host.items_expr() or get_list_config().default_items_expr

        async def load(seq: int) -> Sequence[Any]:
            self._set_state(seq, PipelineState.FETCHING)
            try:
                items = await self._data_source.fetch_items(self._context, self._host, expr)
            except Exception as e:
                self._set_state(seq, PipelineState.FAILED_FETCH)
                raise FetchError(f"Error fetching data-list: {e}") from e
            if not isinstance(items, (list, tuple)):
                self._set_state(seq, PipelineState.FAILED_FETCH)
                raise ValidationError(
                    f'Response must contain an array at "{expr}". {self._host!r}',
                    expression_path=expr,
                    element=self._host,
                )
            return items

        await self._run_cycle(load)

    async def render_items(self, items: Sequence[Any]) -> None:
        """Render an externally supplied collection without fetching."""

        async def load(seq: int) -> Sequence[Any]:
            return items

        await self._run_cycle(load)

    async def _run_cycle(self, load: Callable[[int], Awaitable[Sequence[Any]]]) -> None:
        self._last_started_seq += 1
        seq = self._last_started_seq
        logger.debug(f"ListController: cycle {seq} started")
        try:
            items = await load(seq)
            applied = await self._render_and_apply(seq, items)
        except _CYCLE_ERRORS as e:
            self._on_cycle_failed(seq, e)
            raise
        if applied:
            self.visual_state.on_cycle_succeeded()
        self._set_state(seq, PipelineState.IDLE)

    async def _render_and_apply(self, seq: int, items: Sequence[Any]) -> bool:
        self._set_state(seq, PipelineState.RENDERING)
        try:
            widgets = await self._templates.render_all(self._host, list(items))
        except RenderError:
            self._set_state(seq, PipelineState.FAILED_RENDER)
            raise
        except Exception as e:
            self._set_state(seq, PipelineState.FAILED_RENDER)
            raise RenderError(f"Error rendering data-list: {e}") from e

        if seq <= self._highest_settled_seq:
            logger.debug(f"ListController: discarding stale cycle {seq} "
                         f"(settled {self._highest_settled_seq})")
            for widget in widgets:
                widget.deleteLater()
            return False

        self._highest_applied_seq = seq
        self._highest_settled_seq = seq
        self._set_state(seq, PipelineState.RECONCILING)
        self._reconcile(widgets)
        self._schedule_reflow()
        return True

    def _on_cycle_failed(self, seq: int, error: Exception) -> None:
        if seq < self._highest_settled_seq:
            logger.debug(f"ListController: stale cycle {seq} failed, visuals untouched: {error}")
            return
        self._highest_settled_seq = seq
        self.visual_state.on_cycle_failed()
        self._set_state(seq, PipelineState.IDLE)

    def _set_state(self, seq: int, state: PipelineState) -> None:
        # Only the most recently started cycle drives the reported state.
        if seq == self._last_started_seq:
            logger.debug(f"ListController: cycle {seq} {self.state.value} -> {state.value}")
            self.state = state

    # Reconcile & reflow --------------------------------------------------

    def _reconcile(self, widgets: List[QWidget]) -> None:
        item_role = get_list_config().item_role
        for widget in widgets:
            if not widget.property("role"):
                widget.setProperty("role", item_role)
        self._container.replace_children(widgets)
        self._container.content_rendered.emit()

    def _schedule_reflow(self) -> None:
        def measure():
            # The container's own geometry is stale until the host lays out again.
            content_height = self._container.content_height(self._host.width())
            height = self._host.height()
            if content_height > height:
                self._scheduler.schedule_write(lambda: self._change_height(content_height))

        self._scheduler.schedule_read(measure)

    def _change_height(self, height: int) -> None:
        try:
            self._host.attempt_change_height(height)
        except LayoutDenied:
            # List stays scrollable at its current height.
            pass

    # Mutations -----------------------------------------------------------

    def handle_mutations(self, mutations: Dict[str, Any]) -> List[asyncio.Task]:
        """
        React to attribute mutations delivered in one batch.

        "src" triggers refresh(); "state" renders the given collection directly.
        When both arrive together the "state" render is dropped.

        Must be called with a running event loop. Returns the spawned tasks.

        Raises:
            RuntimeError: no asyncio event loop is running
        """
        loop = self.running_loop()
        src = mutations.get("src")
        state = mutations.get("state")
        tasks = []
        if src is not None:
            tasks.append(self._spawn(loop, self.refresh()))
        elif state is not None:
            items = state if isinstance(state, (list, tuple)) else [state]
            tasks.append(self._spawn(loop, self.render_items(items)))
        if src is not None and state is not None:
            logger.warning(f"{get_list_config().component_tag}: [src] and [state] mutated "
                           f"simultaneously. The [state] mutation will be dropped.")
        return tasks

    @staticmethod
    def running_loop() -> asyncio.AbstractEventLoop:
        """Return the running asyncio loop, or fail before any state changes."""
        try:
            return asyncio.get_running_loop()
        except RuntimeError as e:
            raise RuntimeError(
                f"{get_list_config().component_tag}: attribute mutations start background "
                f"render cycles and need a running asyncio event loop; call them from a "
                f"coroutine or await refresh()/render_items() directly"
            ) from e

    def _spawn(self, loop: asyncio.AbstractEventLoop, coro) -> asyncio.Task:
        task = loop.create_task(coro)
        self._tasks.add(task)
        task.add_done_callback(self._on_task_done)
        return task

    def _on_task_done(self, task: asyncio.Task) -> None:
        self._tasks.discard(task)
        if task.cancelled():
            return
        error = task.exception()
        if error is not None:
            logger.error(f"ListController: background render cycle failed: {error}")

    def pending_tasks(self) -> List[asyncio.Task]:
        return list(self._tasks)
