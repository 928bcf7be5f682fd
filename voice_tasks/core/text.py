"""
Text cleanup helpers used to turn what is left of an utterance into a task name.
"""

import re
from typing import Iterable

from .lexicon import phrase_pattern

FILLER_PREFIX_PATTERN = re.compile(r"^(add|create|new|make)\s+(a\s+)?(task\s+)?(to\s+)?", re.IGNORECASE)
POLITENESS_SUFFIX_PATTERN = re.compile(r"\s*\b(please|thanks|thank you)$", re.IGNORECASE)
WHITESPACE_RUN_PATTERN = re.compile(r"\s{2,}")


def remove_first(text: str, phrase: str) -> str:
    """Remove the first occurrence of phrase from text and trim the result."""
    return text.replace(phrase, "", 1).strip()


def strip_filler_prefix(text: str) -> str:
    """Drop a leading "add a task to" style command prefix."""
    return FILLER_PREFIX_PATTERN.sub("", text.strip(), count=1)


def strip_politeness_suffix(text: str) -> str:
    """Drop a trailing "please" / "thanks" / "thank you"."""
    return POLITENESS_SUFFIX_PATTERN.sub("", text.strip(), count=1)


def remove_phrases(text: str, phrases: Iterable[str]) -> str:
    """Remove every whole-word occurrence of each phrase, ignoring case."""
    for phrase in phrases:
        text = phrase_pattern(phrase).sub("", text)
    return text


def remove_reminder_requests(text: str, reminder_phrases: Iterable[str]) -> str:
    """Remove "remind me <phrase> before" for each known reminder phrase."""
    for phrase in reminder_phrases:
        text = re.sub(rf"remind me {re.escape(phrase)} before", "", text, flags=re.IGNORECASE)
    return text


def collapse_whitespace(text: str) -> str:
    return WHITESPACE_RUN_PATTERN.sub(" ", text).strip()


def capitalize_first(text: str) -> str:
    """Upper-case the first character only, leaving the rest untouched."""
    return text[:1].upper() + text[1:]
