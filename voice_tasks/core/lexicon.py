"""
Keyword lexicons for task and query interpretation.

This module provides the ordered keyword tables used to classify utterances: priority and
category tables map a canonical label to trigger phrases, relative-date and reminder tables
map a phrase to a number. Declaration order is the tie-break rule, so every lookup scans
tables in order and the first hit wins. Supports builtin tables and a JSON override file.
"""

import json
import logging
import re
from functools import lru_cache
from pathlib import Path
from typing import Any, Dict, Iterable, List, Mapping, Optional, Tuple, Union

from pydantic import BaseModel, ConfigDict, field_validator

from .config import config

logger = logging.getLogger(__name__)

LabelTable = Tuple[Tuple[str, Tuple[str, ...]], ...]
OffsetTable = Tuple[Tuple[str, int], ...]

TABLE_NAMES = ("priority", "category", "relative_dates", "reminders")
PRIORITY_LABELS = ("High", "Medium", "Low")

PRIORITY_KEYWORDS: Dict[str, List[str]] = {
    "High": ["urgent", "important", "asap", "critical", "high priority"],
    "Medium": ["medium", "moderate", "normal"],
    "Low": ["low", "minor", "whenever"],
}

CATEGORY_KEYWORDS: Dict[str, List[str]] = {
    "Family": ["family", "home", "kids", "spouse", "parents"],
    "Personal": ["personal", "self", "me", "myself"],
    "Office": ["work", "office", "job", "meeting", "project", "client"],
}

# "Other" is offered as a manual choice but has no trigger phrases
CATEGORY_CHOICES = ("Family", "Personal", "Office", "Other")

RELATIVE_DATE_KEYWORDS: Dict[str, int] = {
    "today": 0,
    "tomorrow": 1,
    "in 2 days": 2,
    "in 3 days": 3,
    "next week": 7,
}

REMINDER_KEYWORDS: Dict[str, int] = {
    "5 minutes": 5,
    "10 minutes": 10,
    "20 minutes": 20,
    "25 minutes": 25,
}

# Assistant-directed clause; its words say nothing about the task itself
REMINDER_CLAUSE_PATTERN = re.compile(r"\bremind me\b(?:\s+\d+\s+minutes?\s+before)?")


@lru_cache(maxsize=512)
def phrase_pattern(phrase: str) -> re.Pattern:
    """Compile a case-insensitive pattern matching phrase as whole words."""
    return re.compile(rf"(?<![\w]){re.escape(phrase)}(?![\w])", re.IGNORECASE)


def contains_phrase(text: str, phrase: str) -> bool:
    """
    Check if phrase occurs in text as whole words, ignoring case.

    Args:
        text: Text to search
        phrase: Trigger phrase (may contain spaces)

    Returns:
        True if the phrase is present
    """
    return bool(phrase) and phrase_pattern(phrase).search(text) is not None


class Lexicons(BaseModel):
    """
    Immutable set of the four keyword tables.

    Tables are stored as tuples of (key, value) pairs to keep declaration order and
    immutability; plain mappings are accepted on construction.
    """

    model_config = ConfigDict(frozen=True)

    priority: LabelTable
    category: LabelTable
    relative_dates: OffsetTable
    reminders: OffsetTable

    @field_validator("priority", "category", mode="before")
    @classmethod
    def _label_table(cls, value: Any) -> Any:
        if isinstance(value, Mapping):
            return tuple((label, tuple(triggers)) for label, triggers in value.items())
        return value

    @field_validator("relative_dates", "reminders", mode="before")
    @classmethod
    def _offset_table(cls, value: Any) -> Any:
        if isinstance(value, Mapping):
            return tuple(value.items())
        return value

    def match_label(self, table: LabelTable, text: str) -> Optional[str]:
        """
        Return the first label whose trigger phrases occur in text.

        Args:
            table: One of the label tables (priority or category)
            text: Lowercased input text

        Returns:
            The winning label, or None if nothing matched
        """
        for label, triggers in table:
            if any(contains_phrase(text, trigger) for trigger in triggers):
                return label
        return None

    def match_offset(self, table: OffsetTable, text: str) -> Optional[Tuple[str, int]]:
        """
        Return the first (phrase, number) pair whose phrase occurs in text.

        A phrase starting with a digit does not match when glued to a preceding digit,
        so "5 minutes" is not found inside "25 minutes".
        """
        for phrase, value in table:
            if contains_phrase(text, phrase):
                return phrase, value
        return None

    def trigger_phrases(self, *tables: LabelTable) -> List[str]:
        """Flatten the trigger phrases of the given label tables, in declaration order."""
        phrases = []
        for table in tables:
            for _, triggers in table:
                phrases.extend(triggers)
        return phrases

    def classify_priority(self, text: str) -> Optional[str]:
        return self.match_label(self.priority, strip_reminder_clause(text))

    def classify_category(self, text: str) -> Optional[str]:
        return self.match_label(self.category, strip_reminder_clause(text))

    def as_dict(self) -> Dict[str, Dict[str, Any]]:
        """Return the tables as ordered plain dictionaries (for display and JSON)."""
        return {
            "priority": {label: list(triggers) for label, triggers in self.priority},
            "category": {label: list(triggers) for label, triggers in self.category},
            "relative_dates": dict(self.relative_dates),
            "reminders": dict(self.reminders),
        }


def strip_reminder_clause(text: str) -> str:
    """Remove "remind me [N minutes before]" so it does not feed classification."""
    return REMINDER_CLAUSE_PATTERN.sub(" ", text)


@lru_cache(maxsize=1)
def default_lexicons() -> Lexicons:
    """Return the builtin keyword tables."""
    return Lexicons(
        priority=PRIORITY_KEYWORDS,
        category=CATEGORY_KEYWORDS,
        relative_dates=RELATIVE_DATE_KEYWORDS,
        reminders=REMINDER_KEYWORDS,
    )


def _validate_label_table(value: Any) -> Dict[str, List[str]]:
    validated = {}
    if not isinstance(value, dict):
        return validated
    for key, triggers in value.items():
        if isinstance(key, str) and isinstance(triggers, list) and all(isinstance(t, str) for t in triggers):
            validated[key] = [t.lower() for t in triggers if t.strip()]
    return validated


def _validate_offset_table(value: Any) -> Dict[str, int]:
    validated = {}
    if not isinstance(value, dict):
        return validated
    for key, number in value.items():
        # bool is an int subclass; reject it explicitly
        if isinstance(key, str) and key.strip() and isinstance(number, int) and not isinstance(number, bool) and number >= 0:
            validated[key.lower()] = number
    return validated


def load_lexicon_file(path: Union[str, Path]) -> Dict[str, Dict[str, Any]]:
    """
    Load a JSON lexicon override file if present, else {}.

    Expected shape:
        {"priority": {"High": ["..."]}, "category": {...}, "relative_dates": {"...": 1}, "reminders": {"...": 5}}

    Unknown tables and invalid entries are dropped. A missing or unreadable file yields {}.

    Args:
        path: Path to the JSON file

    Returns:
        Dictionary of validated tables present in the file
    """
    lexicon_path = Path(path)
    if not lexicon_path.exists():
        return {}

    try:
        with open(lexicon_path, "r", encoding="utf-8") as f:
            data = json.load(f)
    except (OSError, ValueError) as e:
        logger.warning("Ignoring lexicon file %s: %s", lexicon_path, e)
        return {}

    if not isinstance(data, dict):
        logger.warning("Ignoring lexicon file %s: top level must be an object", lexicon_path)
        return {}

    validated: Dict[str, Dict[str, Any]] = {}
    if "priority" in data:
        priority = _validate_label_table(data["priority"])
        unknown = [label for label in priority if label not in PRIORITY_LABELS]
        if unknown:
            logger.warning("Ignoring unknown priority labels in %s: %s", lexicon_path, ", ".join(unknown))
        validated["priority"] = {label: triggers for label, triggers in priority.items() if label in PRIORITY_LABELS}
    if "category" in data:
        validated["category"] = _validate_label_table(data["category"])
    for name in ("relative_dates", "reminders"):
        if name in data:
            validated[name] = _validate_offset_table(data[name])
    return validated


def merge_lexicons(builtin: Lexicons, override: Mapping[str, Mapping[str, Any]]) -> Lexicons:
    """
    Merge builtin tables with override tables. Override wins for conflicts.

    Labels present in both keep their builtin position but take the override value;
    new labels are appended after the builtin ones.

    Args:
        builtin: Builtin lexicons
        override: Validated override tables, as returned by load_lexicon_file()

    Returns:
        Merged Lexicons
    """
    merged = builtin.as_dict()
    for name in TABLE_NAMES:
        table = override.get(name)
        if table:
            merged[name].update(table)
    return Lexicons(**merged)


def get_lexicons() -> Lexicons:
    """
    Return the effective lexicons: builtin tables merged with VT_LEXICON_FILE, if set.

    Raises:
        ConfigError: If VT_LEXICON_FILE names a missing file
    """
    lexicon_file = config.lexicon_file
    if lexicon_file is None:
        return default_lexicons()
    return merge_lexicons(default_lexicons(), load_lexicon_file(lexicon_file))


def iter_tables(lexicons: Lexicons) -> Iterable[Tuple[str, Dict[str, Any]]]:
    """Yield (table name, table) pairs in display order."""
    tables = lexicons.as_dict()
    for name in TABLE_NAMES:
        yield name, tables[name]
