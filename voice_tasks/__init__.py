"""
voice-tasks: rule-based conversion of spoken or typed task sentences into task drafts and query filters.
"""

from .core.interpret import UtteranceInterpreter, interpret
from .core.query import QueryInterpreter, apply_query, interpret_query
from .core.types import FilterSpec, TaskDraft, TaskFilter

__version__ = "0.1.0"

__all__ = [
    "FilterSpec",
    "QueryInterpreter",
    "TaskDraft",
    "TaskFilter",
    "UtteranceInterpreter",
    "apply_query",
    "interpret",
    "interpret_query",
]
