"""
Task-creation utterance interpretation.

This module turns a sentence such as "urgent meeting tomorrow at 3pm remind me 10 minutes before"
into a TaskDraft. Extraction is rule based and deterministic: lexicon lookups for priority,
category and reminders, date arithmetic for due dates, and progressive stripping of the
matched phrases to leave the task name. A missed rule always degrades to a default value.
"""

import logging
import re
from datetime import datetime
from typing import Optional, Tuple

from .dates import apply_time_of_day, parse_absolute_date, parse_time_of_day, shift_days
from .debug_log import get_trace_logger
from .lexicon import Lexicons, default_lexicons, phrase_pattern
from .text import (
    capitalize_first,
    collapse_whitespace,
    remove_first,
    remove_phrases,
    remove_reminder_requests,
    strip_filler_prefix,
    strip_politeness_suffix,
)
from .timing import timer
from .types import DEFAULT_PRIORITY, PLACEHOLDER_NAME, TaskDraft

logger = logging.getLogger(__name__)

REMINDER_REQUEST_PATTERN = re.compile(r"remind me (\d{1,9}) minutes before", re.IGNORECASE)


def is_complete_name(name: str) -> bool:
    """A draft is complete once it carries a real name; the due date is not required."""
    return name != "" and name != PLACEHOLDER_NAME


class UtteranceInterpreter:
    """
    Interprets task-creation utterances into TaskDraft records.

    The pipeline runs:
    1. Priority and category classification on the whole utterance
    2. Due date extraction (relative day + time of day, or absolute "on <Month> <day>")
    3. Reminder extraction on the whole utterance
    4. Name cleanup on whatever text the date stage left behind, repeated until stable
    """

    def __init__(self, lexicons: Optional[Lexicons] = None):
        """
        Initialize the interpreter.

        Args:
            lexicons: Keyword tables to use, builtin tables when None
        """
        self.lexicons = lexicons or default_lexicons()

    @timer
    def interpret(self, text: str, now: Optional[datetime] = None) -> TaskDraft:
        """
        Interpret a task-creation utterance.

        Args:
            text: Raw spoken or typed text
            now: Reference moment for date arithmetic, datetime.now() when None

        Returns:
            TaskDraft built from the utterance
        """
        now = now or datetime.now()
        lowered = text.lower()

        priority = self.extract_priority(lowered)
        category = self.extract_category(lowered)
        due_date, remaining = self.extract_due_date(lowered, now)
        reminder_minutes = self.extract_reminder(lowered)
        name = self.settle_name(self.extract_name(remaining), now)

        draft = TaskDraft(
            name=name,
            due_date=due_date,
            priority=priority,
            category=category,
            reminder_minutes=reminder_minutes,
            is_complete=is_complete_name(name),
        )
        logger.debug("Interpreted %r as %s", text, draft)

        get_trace_logger().log_interpretation(
            "utterance",
            text,
            stages={"remaining_after_dates": remaining, "now": now.isoformat()},
            result=draft.model_dump(mode="json", by_alias=True),
        )
        return draft

    def extract_priority(self, text: str) -> str:
        return self.lexicons.classify_priority(text) or DEFAULT_PRIORITY

    def extract_category(self, text: str) -> Optional[str]:
        return self.lexicons.classify_category(text)

    def extract_due_date(self, text: str, now: datetime) -> Tuple[Optional[datetime], str]:
        """
        Extract the due date and strip the phrases that expressed it.

        Args:
            text: Lowercased utterance
            now: Reference moment

        Returns:
            Tuple of (due date or None, remaining text)
        """
        relative = self.lexicons.match_offset(self.lexicons.relative_dates, text)
        if relative is not None:
            phrase, days = relative
            due_date = shift_days(now, days)
            remaining = phrase_pattern(phrase).sub("", text, count=1).strip()

            time_of_day = parse_time_of_day(remaining)
            if time_of_day is not None:
                due_date = apply_time_of_day(due_date, time_of_day)
                remaining = remove_first(remaining, time_of_day.matched)
            return due_date, remaining

        absolute = parse_absolute_date(text, now)
        if absolute is not None:
            return absolute.value, remove_first(text, absolute.matched)

        return None, text

    def extract_reminder(self, text: str) -> Optional[int]:
        """Return reminder lead time in minutes from a known phrase or "remind me N minutes before"."""
        known = self.lexicons.match_offset(self.lexicons.reminders, text)
        if known is not None:
            return known[1]

        match = REMINDER_REQUEST_PATTERN.search(text)
        if match:
            return int(match.group(1))
        return None

    def settle_name(self, name: str, now: datetime) -> str:
        """
        Repeat date extraction and cleanup on the name until it stops changing.

        One pass can expose new matches, e.g. "important make dinner" leaves "make dinner"
        once the trigger is gone, and "today call today" keeps a second "today". A settled
        name interprets to itself. Each pass only removes text, so the loop ends.
        """
        while name != PLACEHOLDER_NAME:
            _, remaining = self.extract_due_date(name.lower(), now)
            cleaned = self.extract_name(remaining)
            if cleaned == name:
                break
            name = cleaned
        return name

    def extract_name(self, text: str) -> str:
        """
        Clean the remaining text into a display name.

        Args:
            text: Lowercased text left after date extraction

        Returns:
            Capitalized name, or the "New Task" placeholder when nothing is left
        """
        name = strip_filler_prefix(text)
        name = strip_politeness_suffix(name)
        name = remove_phrases(name, self.lexicons.trigger_phrases(self.lexicons.priority, self.lexicons.category))
        name = remove_reminder_requests(name, [phrase for phrase, _ in self.lexicons.reminders])
        name = collapse_whitespace(name)

        if not name:
            return PLACEHOLDER_NAME
        return capitalize_first(name)


_default_interpreter: Optional[UtteranceInterpreter] = None


def interpret(text: str, now: Optional[datetime] = None) -> TaskDraft:
    """
    Convenience function to interpret an utterance with the builtin lexicons.

    Args:
        text: Raw spoken or typed text
        now: Reference moment, datetime.now() when None

    Returns:
        TaskDraft
    """
    global _default_interpreter
    if _default_interpreter is None:
        _default_interpreter = UtteranceInterpreter()
    return _default_interpreter.interpret(text, now)
