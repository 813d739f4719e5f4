# todoapp/routers/task.py
from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session
from typing import Optional

from todoapp.database import get_db
from todoapp.models.task import TaskPriority, TaskStatus
from todoapp.models.user import User
from todoapp.schemas import TaskCreate, TaskFilters, TaskOut, TaskStats, TaskUpdate, envelope
from todoapp.services.task_service import TaskService
from todoapp.utils.auth import get_current_user

router = APIRouter(prefix="/tasks", tags=["Tasks"])


@router.post("", status_code=status.HTTP_201_CREATED)
def create_task(
    payload: TaskCreate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    task = TaskService(db).create(payload, current_user.id)
    return envelope({"task": TaskOut.model_validate(task)}, "Task created successfully")


@router.get("")
def get_all_tasks(
    status: Optional[TaskStatus] = None,
    priority: Optional[TaskPriority] = None,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    """List tasks visible to the caller

    Admins see every task; everyone else sees only the tasks they own.
    """
    tasks = TaskService(db).list(
        current_user.id,
        current_user.role,
        TaskFilters(status=status, priority=priority),
    )
    return envelope({
        "count": len(tasks),
        "tasks": [TaskOut.model_validate(t) for t in tasks],
    })


@router.get("/stats")
def get_task_stats(
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    stats = TaskService(db).stats(current_user.id, current_user.role)
    return envelope({"stats": TaskStats(**stats)})


@router.get("/{task_id}")
def get_task(
    task_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    task = TaskService(db).get_by_id(task_id, current_user.id, current_user.role)
    return envelope({"task": TaskOut.model_validate(task)})


@router.put("/{task_id}")
def update_task(
    task_id: int,
    payload: TaskUpdate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    task = TaskService(db).update(task_id, payload, current_user.id, current_user.role)
    return envelope({"task": TaskOut.model_validate(task)}, "Task updated successfully")


@router.delete("/{task_id}")
def delete_task(
    task_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    TaskService(db).delete(task_id, current_user.id, current_user.role)
    return envelope(message="Task deleted successfully")
