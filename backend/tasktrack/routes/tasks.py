from typing import Optional

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session

from ..config import Settings
from ..databases.database import get_db
from ..models.task import Task as TaskModel
from ..schemas.task import Task, TaskCreate, TaskPage, TaskUpdate
from ..schemas.user import Message
from ..services import tasks as task_ops
from ..services.ownership import get_owned_task
from ..utils.dependencies import Identity, get_current_identity, get_settings_dep

router = APIRouter(prefix="/tasks", tags=["tasks"])


@router.post("", response_model=Task, status_code=status.HTTP_201_CREATED)
@router.post("/", response_model=Task, status_code=status.HTTP_201_CREATED, include_in_schema=False)
def create_task(
        task: TaskCreate,
        db: Session = Depends(get_db),
        identity: Identity = Depends(get_current_identity)
):
    return task_ops.create_task(db, identity.user_id, task)


@router.get("", response_model=TaskPage)
@router.get("/", response_model=TaskPage, include_in_schema=False)
def get_all_tasks(
        page: Optional[str] = Query(default=None),
        limit: Optional[str] = Query(default=None),
        status: Optional[str] = Query(default=None),
        search: Optional[str] = Query(default=None),
        db: Session = Depends(get_db),
        identity: Identity = Depends(get_current_identity),
        settings: Settings = Depends(get_settings_dep),
):
    result = task_ops.list_tasks(
        db, identity.user_id, page, limit, status, search,
        max_limit=settings.max_page_size,
    )
    return TaskPage(
        tasks=[Task.model_validate(t) for t in result.items],
        total=result.total,
        page=result.page,
        pages=result.pages,
    )


@router.get("/{task_id}", response_model=Task)
def get_task(task: TaskModel = Depends(get_owned_task)):
    return task


@router.patch("/{task_id}", response_model=Task)
@router.put("/{task_id}", response_model=Task)
def update_task(
        task_data: TaskUpdate,
        task: TaskModel = Depends(get_owned_task),
        db: Session = Depends(get_db),
):
    return task_ops.update_task(db, task, task_data)


@router.delete("/{task_id}", response_model=Message)
def delete_task(
        task: TaskModel = Depends(get_owned_task),
        db: Session = Depends(get_db),
):
    task_ops.delete_task(db, task)
    return Message(message="Task deleted")


@router.patch("/{task_id}/toggle", response_model=Task)
def toggle_task(
        task: TaskModel = Depends(get_owned_task),
        db: Session = Depends(get_db),
):
    return task_ops.toggle_task(db, task)
