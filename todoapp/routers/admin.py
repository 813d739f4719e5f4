# todoapp/routers/admin.py
from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session
from typing import Optional

from todoapp.database import get_db
from todoapp.models.task import TaskPriority, TaskStatus
from todoapp.models.user import User, UserRole
from todoapp.schemas import Pagination, RoleUpdate, TaskOut, UserOut, UserSummary, envelope
from todoapp.services.admin_service import AdminService
from todoapp.utils.auth import require_admin

# Every route here is admin-only
router = APIRouter(prefix="/admin", tags=["Admin"], dependencies=[Depends(require_admin)])


@router.get("/users")
def get_all_users(
    search: Optional[str] = None,
    role: Optional[UserRole] = None,
    page: int = Query(1, ge=1),
    limit: int = Query(10, ge=1, le=100),
    db: Session = Depends(get_db),
):
    users, total = AdminService(db).list_users(
        search=search,
        role=role.value if role else None,
        page=page,
        limit=limit,
    )
    return envelope(
        [UserOut.model_validate(u) for u in users],
        pagination=Pagination.build(page, limit, total),
    )


@router.get("/users/{user_id}")
def get_user(user_id: int, db: Session = Depends(get_db)):
    """Get a user together with per-status counts of the tasks they own"""
    detail = AdminService(db).get_user_detail(user_id)
    return envelope({
        "user": UserOut.model_validate(detail["user"]),
        "task_stats": detail["task_stats"],
    })


@router.put("/users/{user_id}/role")
def update_user_role(
    user_id: int,
    payload: RoleUpdate,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_admin),
):
    user = AdminService(db).change_role(user_id, payload.role, current_user.id)
    return envelope(UserOut.model_validate(user), f"User role updated to {user.role}")


@router.delete("/users/{user_id}")
def delete_user(
    user_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_admin),
):
    removed = AdminService(db).delete_user(user_id, current_user.id)
    return envelope({"deleted_tasks": removed}, "User and associated tasks deleted successfully")


@router.get("/tasks")
def get_all_tasks(
    status: Optional[TaskStatus] = None,
    priority: Optional[TaskPriority] = None,
    user_id: Optional[int] = None,
    page: int = Query(1, ge=1),
    limit: int = Query(10, ge=1, le=100),
    db: Session = Depends(get_db),
):
    tasks, total = AdminService(db).list_tasks(
        status=status.value if status else None,
        priority=priority.value if priority else None,
        user_id=user_id,
        page=page,
        limit=limit,
    )
    return envelope(
        [TaskOut.model_validate(t) for t in tasks],
        pagination=Pagination.build(page, limit, total),
    )


@router.get("/tasks/user/{user_id}")
def get_tasks_by_user(user_id: int, db: Session = Depends(get_db)):
    result = AdminService(db).tasks_for_user(user_id)
    return envelope({
        "user": UserSummary.model_validate(result["user"]),
        "tasks": [TaskOut.model_validate(t) for t in result["tasks"]],
    })


@router.get("/stats")
def get_platform_stats(db: Session = Depends(get_db)):
    return envelope(AdminService(db).platform_stats())
