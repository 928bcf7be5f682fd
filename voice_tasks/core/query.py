"""
Query utterance interpretation.

Turns questions and commands such as "show today's high priority tasks" or "I have 15 minutes"
into a FilterSpec. Rules are evaluated in a fixed order and the first rule that produces a
result wins; an utterance no rule understands yields the "unknown" variant rather than an error.
"""

import logging
import re
from datetime import datetime
from typing import Callable, Iterable, List, Optional, Tuple

from .debug_log import get_trace_logger
from .lexicon import Lexicons, default_lexicons
from .timing import timer
from .types import DEFAULT_PRIORITY, FilterSpec, TaskDraft

logger = logging.getLogger(__name__)

# Runs longer than nine digits are not a time budget
MINUTES_PATTERN = re.compile(r"(?<!\d)(\d{1,9})\s*minutes?")
TIME_BUDGET_WORDS = ("have", "finish")

QueryRule = Callable[[str, datetime], Optional[FilterSpec]]


class QueryInterpreter:
    """
    Interprets query utterances into FilterSpec results.

    Rules, in order:
    1. today: filter on today's date, plus priority when one other than Medium is named
    2. time budget: "<N> minutes" together with "have" or "finish"
    3. classification: filter on a named priority and/or category
    4. unknown
    """

    def __init__(self, lexicons: Optional[Lexicons] = None):
        self.lexicons = lexicons or default_lexicons()
        self.rules: List[Tuple[str, QueryRule]] = [
            ("today", self._today_rule),
            ("time_budget", self._time_budget_rule),
            ("classification", self._classification_rule),
        ]

    @timer
    def interpret(self, text: str, now: Optional[datetime] = None) -> FilterSpec:
        """
        Interpret a query utterance.

        Args:
            text: Raw spoken or typed query
            now: Reference moment for "today", datetime.now() when None

        Returns:
            FilterSpec; type "unknown" when no rule matched
        """
        now = now or datetime.now()
        lowered = text.lower()

        matched_rule = None
        spec = FilterSpec.unknown()
        for name, rule in self.rules:
            result = rule(lowered, now)
            if result is not None:
                matched_rule, spec = name, result
                break

        logger.debug("Query %r matched rule %s: %s", text, matched_rule, spec)
        get_trace_logger().log_interpretation(
            "query",
            text,
            stages={"rule": matched_rule, "now": now.isoformat()},
            result=spec.model_dump(mode="json", by_alias=True),
        )
        return spec

    def _priority(self, text: str) -> Optional[str]:
        """Named priority, or None when it is absent or the default."""
        priority = self.lexicons.classify_priority(text) or DEFAULT_PRIORITY
        return priority if priority != DEFAULT_PRIORITY else None

    def _today_rule(self, text: str, now: datetime) -> Optional[FilterSpec]:
        if "today" not in text and "today's" not in text:
            return None
        return FilterSpec.for_filter(date=now.strftime("%Y-%m-%d"), priority=self._priority(text))

    def _time_budget_rule(self, text: str, now: datetime) -> Optional[FilterSpec]:
        match = MINUTES_PATTERN.search(text)
        if not match or not any(word in text for word in TIME_BUDGET_WORDS):
            return None
        return FilterSpec.time_based(int(match.group(1)))

    def _classification_rule(self, text: str, now: datetime) -> Optional[FilterSpec]:
        priority = self._priority(text)
        category = self.lexicons.classify_category(text)
        if priority is None and category is None:
            return None
        return FilterSpec.for_filter(priority=priority, category=category)


def apply_query(spec: FilterSpec, tasks: Iterable[TaskDraft]) -> List[TaskDraft]:
    """
    Select the tasks a query result refers to.

    Args:
        spec: Interpreted query
        tasks: Candidate tasks

    Returns:
        Matching tasks in their original order. Time-based queries return every task since
        tasks carry no duration; unknown queries return nothing.
    """
    if spec.type == "filter" and spec.filter is not None:
        return [task for task in tasks if spec.filter.matches(task)]
    if spec.type == "time-based":
        return list(tasks)
    return []


_default_interpreter: Optional[QueryInterpreter] = None


def interpret_query(text: str, now: Optional[datetime] = None) -> FilterSpec:
    """Convenience function to interpret a query with the builtin lexicons."""
    global _default_interpreter
    if _default_interpreter is None:
        _default_interpreter = QueryInterpreter()
    return _default_interpreter.interpret(text, now)
