"""Animation-control actions.

External callers invoke animation operations by name with a bag of named
arguments. Each operation is a member of AnimationAction; its positional
argument names are fixed, and the dispatch table mapping members to runtime
methods is built once when the dispatcher is created.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Callable, Dict, Protocol, Tuple
import logging

from .enum_dispatch_service import EnumDispatchService

logger = logging.getLogger(__name__)


class AnimationAction(Enum):
    """Operations understood by the animation runtime."""
    PLAY = "play"
    PAUSE = "pause"
    TOGGLE_PLAY = "togglePlay"
    GOTO_AND_PLAY = "gotoAndPlay"
    GOTO_AND_PAUSE = "gotoAndPause"
    GOTO_AND_PLAY_N_TIMES = "gotoAndPlayNTimes"

    @property
    def params(self) -> Tuple[str, ...]:
        return ACTION_PARAMS[self]


# Invocation argument names, in the positional order the runtime expects.
ACTION_PARAMS: Dict[AnimationAction, Tuple[str, ...]] = {
    AnimationAction.PLAY: ("id",),
    AnimationAction.PAUSE: ("id",),
    AnimationAction.TOGGLE_PLAY: ("id",),
    AnimationAction.GOTO_AND_PLAY: ("id", "label"),
    AnimationAction.GOTO_AND_PAUSE: ("id", "label"),
    AnimationAction.GOTO_AND_PLAY_N_TIMES: ("id", "label", "count", "eventName"),
}


class AnimationRuntime(Protocol):
    """Per-document animation runtime driven by the dispatcher."""

    def play(self, id: str) -> None: ...

    def pause(self, id: str) -> None: ...

    def toggle_play(self, id: str) -> None: ...

    def goto_and_play(self, id: str, label: str) -> None: ...

    def goto_and_pause(self, id: str, label: str) -> None: ...

    def goto_and_play_n_times(self, id: str, label: str, count: int, event_name: str) -> None: ...


@dataclass
class AnimationInvocation:
    """One external request to run an action."""
    action: AnimationAction
    args: Dict[str, Any] = field(default_factory=dict)

    @classmethod
    def from_name(cls, name: str, args: Dict[str, Any] = None) -> "AnimationInvocation":
        """Build an invocation from an action name such as "gotoAndPlay".

        Raises:
            ValueError: If name is not a known action
        """
        return cls(AnimationAction(name), dict(args or {}))

    def positional_args(self) -> list:
        """Arguments in the runtime's positional order; absent ones are None."""
        return [self.args.get(name) for name in self.action.params]


class AnimationActionDispatcher(EnumDispatchService[AnimationAction]):
    """Routes invocations to an AnimationRuntime."""

    def __init__(self, runtime: AnimationRuntime):
        super().__init__()
        self._runtime = runtime
        self._register_handlers({
            AnimationAction.PLAY: self._forward(runtime.play),
            AnimationAction.PAUSE: self._forward(runtime.pause),
            AnimationAction.TOGGLE_PLAY: self._forward(runtime.toggle_play),
            AnimationAction.GOTO_AND_PLAY: self._forward(runtime.goto_and_play),
            AnimationAction.GOTO_AND_PAUSE: self._forward(runtime.goto_and_pause),
            AnimationAction.GOTO_AND_PLAY_N_TIMES: self._forward(runtime.goto_and_play_n_times),
        }, exhaustive_over=AnimationAction)

    @staticmethod
    def _forward(method: Callable[..., Any]) -> Callable[[AnimationInvocation], Any]:
        def handler(invocation: AnimationInvocation) -> Any:
            return method(*invocation.positional_args())
        return handler

    def _determine_strategy(self, context: AnimationInvocation) -> AnimationAction:
        return context.action

    def invoke(self, invocation: AnimationInvocation) -> Any:
        return self.dispatch(invocation)

    def invoke_by_name(self, name: str, args: Dict[str, Any] = None) -> Any:
        return self.invoke(AnimationInvocation.from_name(name, args))
