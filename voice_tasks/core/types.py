"""
Type definitions for voice-tasks.

This module defines the structured records produced by the interpreters: the task draft
built from a task-creation utterance and the filter spec built from a query utterance.
Field names are snake_case in Python and camelCase on the wire (dump with by_alias=True).
"""

from datetime import datetime, timedelta
from typing import Literal, Optional

from pydantic import BaseModel, ConfigDict, Field

Priority = Literal["Low", "Medium", "High"]
QueryType = Literal["filter", "time-based", "unknown"]

DEFAULT_PRIORITY: Priority = "Medium"
PLACEHOLDER_NAME = "New Task"


class TaskDraft(BaseModel):
    """
    Partially populated task record extracted from a task-creation utterance.

    Attributes:
        name: Display name, "New Task" when nothing could be extracted
        description: Reserved free text, not populated by extraction
        due_date: Absolute due timestamp (local time)
        priority: Low, Medium or High
        category: Category label such as Family, Personal or Office
        reminder_minutes: Lead time before the due date
        is_complete: True when the name is a real name rather than the placeholder
    """

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    name: str = Field(..., description="Task display name")
    description: Optional[str] = Field(default=None, description="Free text description")
    due_date: Optional[datetime] = Field(default=None, alias="dueDate", description="Due timestamp")
    priority: Priority = Field(default=DEFAULT_PRIORITY, description="Task priority")
    category: Optional[str] = Field(default=None, description="Category label")
    reminder_minutes: Optional[int] = Field(default=None, alias="reminderMinutes", ge=0, description="Minutes of lead time")
    is_complete: bool = Field(..., alias="isComplete", description="Whether the draft has a usable name")

    def reminder_time(self) -> Optional[datetime]:
        """Return the moment a reminder for this task should fire, None if it has none or it is out of range."""
        if self.due_date is None or self.reminder_minutes is None:
            return None
        try:
            return self.due_date - timedelta(minutes=self.reminder_minutes)
        except OverflowError:
            # outside the datetime range
            return None


class TaskFilter(BaseModel):
    """
    Criteria for listing tasks. Every criterion is optional.
    """

    model_config = ConfigDict(frozen=True)

    priority: Optional[Priority] = Field(default=None, description="Required priority")
    category: Optional[str] = Field(default=None, description="Required category")
    date: Optional[str] = Field(default=None, pattern=r"^\d{4}-\d{2}-\d{2}$", description="Calendar day as yyyy-MM-dd")

    def matches(self, task: TaskDraft) -> bool:
        """
        Check whether a task satisfies this filter.

        Tasks without a due date are not excluded by the date criterion.
        """
        if self.priority and task.priority != self.priority:
            return False
        if self.category and task.category != self.category:
            return False
        if self.date and task.due_date is not None:
            if task.due_date.date().isoformat() != self.date:
                return False
        return True


class FilterSpec(BaseModel):
    """
    Result of interpreting a query utterance.

    Exactly one shape is populated depending on type:
    - filter: the filter field holds the criteria
    - time-based: time_available holds the minutes the user has
    - unknown: no payload
    """

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    type: QueryType = Field(..., description="Result variant")
    filter: Optional[TaskFilter] = Field(default=None, description="Filter criteria")
    time_available: Optional[int] = Field(default=None, alias="timeAvailable", ge=0, description="Available minutes")

    @classmethod
    def for_filter(cls, priority: Optional[str] = None, category: Optional[str] = None, date: Optional[str] = None) -> "FilterSpec":
        return cls(type="filter", filter=TaskFilter(priority=priority, category=category, date=date))

    @classmethod
    def time_based(cls, minutes: int) -> "FilterSpec":
        return cls(type="time-based", time_available=minutes)

    @classmethod
    def unknown(cls) -> "FilterSpec":
        return cls(type="unknown")
