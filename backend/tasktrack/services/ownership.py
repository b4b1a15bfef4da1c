from __future__ import annotations

import logging

from fastapi import Depends, Path
from sqlalchemy.orm import Session

from ..databases.database import MAX_DB_INT, get_db
from ..errors import Forbidden, NotFound, ValidationFailed
from ..models.task import Task
from ..utils.dependencies import Identity, get_current_identity
from . import tasks as task_ops

logger = logging.getLogger(__name__)


def authorize(db: Session, identity: Identity, task_id: int) -> Task:
    """Load a task and make sure ``identity`` owns it.

    A missing task is NotFound and somebody else's task is Forbidden, so a
    non-owner can tell that the id exists.
    """
    task = task_ops.get_task(db, task_id)
    if task is None:
        raise NotFound("Task not found")
    if task.user_id != identity.user_id:
        logger.warning("User %s denied access to task %s", identity.user_id, task_id)
        raise Forbidden()
    return task


def parse_task_id(raw: str) -> int:
    try:
        task_id = int(raw)
    except (TypeError, ValueError):
        raise ValidationFailed("Invalid task id")
    if task_id < 1 or task_id > MAX_DB_INT:
        raise ValidationFailed("Invalid task id")
    return task_id


def get_owned_task(
    task_id: str = Path(...),
    db: Session = Depends(get_db),
    identity: Identity = Depends(get_current_identity),
) -> Task:
    return authorize(db, identity, parse_task_id(task_id))
