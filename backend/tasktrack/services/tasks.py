"""Owner-scoped task queries and mutations."""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass
from typing import Any, Optional

from sqlalchemy import func, select
from sqlalchemy.orm import Session

from ..databases.database import MAX_DB_INT
from ..models.task import Task, TaskPriority, TaskStatus
from ..schemas.task import TaskCreate, TaskUpdate

logger = logging.getLogger(__name__)

DEFAULT_PAGE = 1
DEFAULT_LIMIT = 10


@dataclass
class TaskPage:
    items: list[Task]
    total: int
    page: int
    pages: int


def coerce_positive_int(raw: Any, default: int, maximum: Optional[int] = None) -> int:
    """Parse a query value; absent, non-numeric, non-positive or above-``maximum`` values give ``default``."""
    try:
        value = int(raw)
    except (TypeError, ValueError):
        return default
    if value < 1 or (maximum is not None and value > maximum):
        return default
    return value


def get_task(db: Session, task_id: int) -> Optional[Task]:
    return db.get(Task, task_id)


def list_tasks(
    db: Session,
    user_id: int,
    page: Any = None,
    limit: Any = None,
    status: Optional[str] = None,
    search: Optional[str] = None,
    *,
    max_limit: int = 100,
) -> TaskPage:
    limit = min(coerce_positive_int(limit, DEFAULT_LIMIT), max_limit)
    # the row offset has to fit the store's integer type
    page = coerce_positive_int(page, DEFAULT_PAGE, maximum=MAX_DB_INT // limit)

    conditions = [Task.user_id == user_id]
    if status:
        conditions.append(Task.status == TaskStatus.parse(status, TaskStatus.todo))
    if search:
        conditions.append(func.lower(Task.title).contains(search.lower(), autoescape=True))

    total = db.scalar(select(func.count()).select_from(Task).where(*conditions)) or 0
    items = db.scalars(
        select(Task)
        .where(*conditions)
        .order_by(Task.created_at.desc(), Task.id.desc())
        .offset((page - 1) * limit)
        .limit(limit)
    ).all()

    return TaskPage(items=list(items), total=total, page=page, pages=math.ceil(total / limit))


def create_task(db: Session, user_id: int, data: TaskCreate) -> Task:
    task = Task(
        title=data.title,
        description=data.description or None,
        status=TaskStatus.parse(data.status, TaskStatus.todo),
        priority=TaskPriority.parse(data.priority, TaskPriority.medium),
        due_date=data.due_date,
        user_id=user_id,
    )
    db.add(task)
    db.commit()
    db.refresh(task)
    logger.info("User %s created task %s", user_id, task.id)
    return task


def update_task(db: Session, task: Task, data: TaskUpdate) -> Task:
    changes = data.model_dump(exclude_unset=True)

    if changes.get("title") is not None:
        task.title = changes["title"]
    if "description" in changes:
        task.description = changes["description"] or None
    if "due_date" in changes:
        task.due_date = changes["due_date"]
    if changes.get("status"):
        task.status = TaskStatus.parse(changes["status"], task.status)
    if changes.get("priority"):
        task.priority = TaskPriority.parse(changes["priority"], task.priority)

    db.commit()
    db.refresh(task)
    return task


def delete_task(db: Session, task: Task) -> None:
    task_id, user_id = task.id, task.user_id
    db.delete(task)
    db.commit()
    logger.info("User %s deleted task %s", user_id, task_id)


def toggle_task(db: Session, task: Task) -> Task:
    # in_progress goes straight to completed
    if task.status == TaskStatus.completed:
        task.status = TaskStatus.todo
    else:
        task.status = TaskStatus.completed
    db.commit()
    db.refresh(task)
    return task
