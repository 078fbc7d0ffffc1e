"""
Collaborator protocols and configuration.

Structural contracts for the data source, template renderer, scheduler and
host widget, plus the process-wide configuration hook.
"""

from .collaborators import DataSource, TemplateRenderer, Scheduler, ListHost
from .list_config import DataListConfig, set_list_config, get_list_config

__all__ = [
    "DataSource",
    "TemplateRenderer",
    "Scheduler",
    "ListHost",
    "DataListConfig",
    "set_list_config",
    "get_list_config",
]
