"""
Service layer.

Default collaborator implementations, the per-document scope that owns them,
and the animation action dispatcher.
"""

from .batched_json import BatchedJsonSource
from .templates import ItemTemplate, LabelTemplate, CallableTemplate, TemplateRegistry
from .document_context import DocumentContext
from .enum_dispatch_service import EnumDispatchService
from .animation_actions import (
    AnimationAction,
    AnimationInvocation,
    AnimationActionDispatcher,
    AnimationRuntime,
    ACTION_PARAMS,
)

__all__ = [
    "BatchedJsonSource",
    "ItemTemplate",
    "LabelTemplate",
    "CallableTemplate",
    "TemplateRegistry",
    "DocumentContext",
    "EnumDispatchService",
    "AnimationAction",
    "AnimationInvocation",
    "AnimationActionDispatcher",
    "AnimationRuntime",
    "ACTION_PARAMS",
]
