"""
Abstract base class for enum-driven dispatch services.

Pattern:
1. Define an enum with one member per operation
2. Build a dispatch table mapping every member to a handler, once, in __init__
3. Determine the member from the input
4. Dispatch to the handler

Example:
    class Op(Enum):
        START = "start"
        STOP = "stop"

    class OpService(EnumDispatchService[Op]):
        def __init__(self):
            super().__init__()
            self._register_handlers({
                Op.START: self._start,
                Op.STOP: self._stop,
            }, exhaustive_over=Op)

        def _determine_strategy(self, context) -> Op:
            return context.op
"""

from abc import ABC, abstractmethod
from enum import Enum
from typing import Any, Callable, Dict, Generic, Optional, Type, TypeVar
import logging

logger = logging.getLogger(__name__)

StrategyEnum = TypeVar('StrategyEnum', bound=Enum)


class EnumDispatchService(ABC, Generic[StrategyEnum]):
    """
    Base for services dispatching through a table keyed by enum members.

    Subclasses must:
    1. Register handlers in __init__() using _register_handlers()
    2. Implement _determine_strategy() to pick the member for an input
    """

    def __init__(self):
        self._handlers: Dict[StrategyEnum, Callable] = {}

    def _register_handlers(
        self,
        handlers: Dict[StrategyEnum, Callable],
        exhaustive_over: Optional[Type[StrategyEnum]] = None,
    ) -> None:
        """
        Register strategy handlers.

        Args:
            handlers: Mapping from enum member to handler
            exhaustive_over: If given, every member of this enum must have a handler

        Raises:
            ValueError: If handlers is empty or misses a member of exhaustive_over
        """
        if not handlers:
            raise ValueError(f"{self.__class__.__name__}: Handler registry cannot be empty")
        if exhaustive_over is not None:
            missing = [member for member in exhaustive_over if member not in handlers]
            if missing:
                raise ValueError(
                    f"{self.__class__.__name__}: No handler for {[m.value for m in missing]}"
                )
        self._handlers = dict(handlers)
        logger.debug(f"{self.__class__.__name__}: Registered {len(handlers)} handlers")

    @abstractmethod
    def _determine_strategy(self, context: Any) -> StrategyEnum:
        """Return the enum member that handles context."""
        pass

    def dispatch(self, context: Any) -> Any:
        """
        Dispatch context to the handler of its strategy.

        Raises:
            KeyError: If the strategy has no registered handler
        """
        strategy = self._determine_strategy(context)
        if strategy not in self._handlers:
            raise KeyError(
                f"{self.__class__.__name__}: No handler registered for strategy {strategy}. "
                f"Available strategies: {list(self._handlers.keys())}"
            )
        logger.debug(f"{self.__class__.__name__}: Dispatching to {strategy.value} handler")
        return self._handlers[strategy](context)

    def get_registered_strategies(self) -> list[StrategyEnum]:
        return list(self._handlers.keys())

    def has_strategy(self, strategy: StrategyEnum) -> bool:
        return strategy in self._handlers
