from __future__ import annotations

from datetime import datetime
from typing import Annotated, Optional

from pydantic import AfterValidator, BaseModel, ConfigDict, Field

from ..databases.database import as_utc
from ..models.task import TaskPriority, TaskStatus

TITLE_MAX_LENGTH = 200


def _clean_title(value: Optional[str]) -> Optional[str]:
    if value is None:
        return value
    value = value.strip()
    if not value:
        raise ValueError("Title is required")
    return value


Title = Annotated[str, Field(max_length=TITLE_MAX_LENGTH), AfterValidator(_clean_title)]

# Offsets from the client are kept by converting to UTC; naive input is read as UTC
UTCDatetime = Annotated[datetime, AfterValidator(as_utc)]


class TaskBase(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    description: Optional[str] = None
    # Free-form on input; normalized through TaskStatus.parse / TaskPriority.parse
    status: Optional[str] = None
    priority: Optional[str] = None
    due_date: Optional[UTCDatetime] = Field(default=None, alias="dueDate")


class TaskCreate(TaskBase):
    title: Title


class TaskUpdate(TaskBase):
    """Partial update: only fields present in the request body are applied."""

    title: Optional[Title] = None


class Task(BaseModel):
    model_config = ConfigDict(from_attributes=True, populate_by_name=True)

    id: int
    title: str
    description: Optional[str] = None
    status: TaskStatus
    priority: TaskPriority
    due_date: Optional[datetime] = Field(default=None, alias="dueDate")
    created_at: datetime = Field(alias="createdAt")
    updated_at: datetime = Field(alias="updatedAt")
    user_id: int = Field(alias="userId")


class TaskPage(BaseModel):
    tasks: list[Task]
    total: int
    page: int
    pages: int
