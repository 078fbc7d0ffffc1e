"""Placeholder and fallback visibility for a data-list host."""

from enum import Enum
import logging

logger = logging.getLogger(__name__)


class VisualState(Enum):
    """Mutually exclusive visual states of a host."""
    NORMAL = "normal"
    PLACEHOLDER_SHOWN = "placeholderShown"
    FALLBACK_SHOWN = "fallbackShown"


class VisualStateManager:
    """
    Toggles the host's placeholder and fallback through the scheduler's write phase.

    The fallback flag is updated eagerly, before the write runs, so repeated
    calls within one frame schedule at most one write. Hosts without a
    fallback never get fallback writes.
    """

    def __init__(self, host, scheduler):
        self._host = host
        self._scheduler = scheduler
        self._fallback_shown = False
        self._placeholder_shown = host.has_placeholder()

    @property
    def fallback_shown(self) -> bool:
        return self._fallback_shown

    @property
    def placeholder_shown(self) -> bool:
        return self._placeholder_shown

    @property
    def state(self) -> VisualState:
        if self._fallback_shown:
            return VisualState.FALLBACK_SHOWN
        if self._placeholder_shown:
            return VisualState.PLACEHOLDER_SHOWN
        return VisualState.NORMAL

    def show_fallback(self, visible: bool) -> None:
        if not self._host.has_fallback():
            return
        if visible == self._fallback_shown:
            return
        self._fallback_shown = visible
        logger.debug(f"VisualStateManager: scheduling fallback visible={visible}")
        self._scheduler.schedule_write(lambda: self._host.toggle_fallback(visible))

    def hide_placeholder(self) -> None:
        """Schedule the placeholder hide unconditionally."""
        self._placeholder_shown = False
        self._scheduler.schedule_write(lambda: self._host.toggle_placeholder(False))

    def on_cycle_failed(self) -> None:
        # Placeholder goes first so loading and error are never visible together.
        self.hide_placeholder()
        self.show_fallback(True)

    def on_cycle_succeeded(self) -> None:
        if self._placeholder_shown:
            self.hide_placeholder()
        self.show_fallback(False)
