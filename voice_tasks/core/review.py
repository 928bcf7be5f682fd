"""
Follow-up helpers for task drafts.

A draft counts as complete once it has a name, but a caller creating the task still wants
the user to fill in anything else that is missing before saving it.
"""

from typing import List

from .types import DEFAULT_PRIORITY, PLACEHOLDER_NAME, TaskDraft


def missing_fields(draft: TaskDraft) -> List[str]:
    """
    List the fields a user should be asked to fill in.

    Args:
        draft: Interpreted task draft

    Returns:
        Field labels, e.g. ["Due date"]; empty when nothing is missing
    """
    missing = []
    if draft.name == PLACEHOLDER_NAME or not draft.name:
        missing.append("Task name")
    if draft.due_date is None:
        missing.append("Due date")
    return missing


def recognized_summary(draft: TaskDraft) -> str:
    """Describe which parts of the utterance were understood."""
    recognized = []
    if draft.name and draft.name != PLACEHOLDER_NAME:
        recognized.append(f"Task: {draft.name}")
    if draft.due_date is not None:
        recognized.append("Date")
    if draft.priority != DEFAULT_PRIORITY:
        recognized.append("Priority")
    if draft.category:
        recognized.append("Category")
    if draft.reminder_minutes:
        recognized.append("Reminder")
    return ", ".join(recognized) if recognized else "Nothing clear"
