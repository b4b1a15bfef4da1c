from __future__ import annotations

import enum
from datetime import datetime, timezone
from typing import Optional

from sqlalchemy import Column, Enum, ForeignKey, Integer, String, Text

from ..databases.database import Base, UTCDateTime


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


class TaskStatus(str, enum.Enum):
    todo = "todo"
    in_progress = "in_progress"
    completed = "completed"

    @classmethod
    def parse(cls, value: Optional[str], default: Optional["TaskStatus"] = None) -> Optional["TaskStatus"]:
        """Map loose client input onto a status; unknown or empty input gives ``default``."""
        if isinstance(value, cls):
            return value
        if not value:
            return default
        key = str(value).strip().lower().replace("-", "_")
        try:
            return cls(key)
        except ValueError:
            return default


class TaskPriority(str, enum.Enum):
    low = "low"
    medium = "medium"
    high = "high"

    @classmethod
    def parse(cls, value: Optional[str], default: Optional["TaskPriority"] = None) -> Optional["TaskPriority"]:
        if isinstance(value, cls):
            return value
        if not value:
            return default
        try:
            return cls(str(value).strip().lower())
        except ValueError:
            return default


# Модель задачи
class Task(Base):
    __tablename__ = "tasks"
    id = Column(Integer, primary_key=True)
    title = Column(String(200), nullable=False)
    description = Column(Text, nullable=True)
    status = Column(Enum(TaskStatus, name="task_status"), nullable=False, default=TaskStatus.todo)
    priority = Column(Enum(TaskPriority, name="task_priority"), nullable=False, default=TaskPriority.medium)
    due_date = Column(UTCDateTime(), nullable=True)
    created_at = Column(UTCDateTime(), nullable=False, default=utcnow)
    updated_at = Column(UTCDateTime(), nullable=False, default=utcnow, onupdate=utcnow)
    user_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)  # Связь с пользователем
