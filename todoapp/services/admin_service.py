# todoapp/services/admin_service.py
import logging
from datetime import datetime, timedelta
from typing import List, Optional, Tuple

from sqlalchemy import func, or_
from sqlalchemy.orm import Session, joinedload

from todoapp.models.task import Task, TaskStatus
from todoapp.models.user import User, UserRole
from todoapp.services.access_policy import Deletion, RoleChange, policy
from todoapp.utils.errors import NotFoundError

logger = logging.getLogger(__name__)

RECENT_SIGNUP_DAYS = 7


class AdminService:
    """User and platform-wide task management for administrators"""

    def __init__(self, db: Session):
        self.db = db

    def _get_user(self, user_id: int) -> User:
        user = self.db.get(User, user_id)
        if not user:
            raise NotFoundError("User not found")
        return user

    def _status_counts(self, owner_id: Optional[int] = None) -> dict:
        query = self.db.query(Task.status, func.count(Task.id))
        if owner_id is not None:
            query = query.filter(Task.owner_id == owner_id)
        counts = {status.value: 0 for status in TaskStatus}
        for status, count in query.group_by(Task.status).all():
            counts[status] = count
        return counts

    def list_users(
        self,
        search: Optional[str] = None,
        role: Optional[str] = None,
        page: int = 1,
        limit: int = 10,
    ) -> Tuple[List[User], int]:
        query = self.db.query(User)

        if search:
            # Literal substring match; % and _ in the input are not wildcards
            query = query.filter(
                or_(
                    User.name.icontains(search, autoescape=True),
                    User.email.icontains(search, autoescape=True),
                )
            )

        if role:
            query = query.filter(User.role == role)

        total = query.count()
        users = (
            query.order_by(User.created_at.desc(), User.id.desc())
            .offset((page - 1) * limit)
            .limit(limit)
            .all()
        )
        return users, total

    def get_user_detail(self, user_id: int) -> dict:
        user = self._get_user(user_id)
        return {"user": user, "task_stats": self._status_counts(owner_id=user.id)}

    def change_role(self, user_id: int, new_role: str, caller_id: int) -> User:
        # Unknown roles are rejected before the record is even looked up
        policy.enforce(policy.validate_role(new_role), caller_id)

        user = self._get_user(user_id)
        policy.enforce(policy.can_modify_user(user, caller_id, RoleChange(new_role)), caller_id)

        user.role = new_role
        self.db.commit()
        self.db.refresh(user)

        logger.info(f"User {user.id} role set to '{new_role}' by admin {caller_id}")
        return user

    def delete_user(self, user_id: int, caller_id: int) -> int:
        """Delete a user and every task they own; returns the number of tasks removed"""
        user = self._get_user(user_id)
        policy.enforce(policy.can_modify_user(user, caller_id, Deletion()), caller_id)

        # Tasks and user go out in the same transaction
        try:
            removed = self.db.query(Task).filter(Task.owner_id == user.id).delete(synchronize_session="fetch")
            self.db.delete(user)
            self.db.commit()
        except Exception:
            self.db.rollback()
            raise

        logger.info(f"User {user_id} deleted by admin {caller_id} along with {removed} task(s)")
        return removed

    def list_tasks(
        self,
        status: Optional[str] = None,
        priority: Optional[str] = None,
        user_id: Optional[int] = None,
        page: int = 1,
        limit: int = 10,
    ) -> Tuple[List[Task], int]:
        query = self.db.query(Task)

        if status:
            query = query.filter(Task.status == status)
        if priority:
            query = query.filter(Task.priority == priority)
        if user_id is not None:
            query = query.filter(Task.owner_id == user_id)

        total = query.count()
        tasks = (
            query.options(joinedload(Task.owner), joinedload(Task.assignee))
            .order_by(Task.created_at.desc(), Task.id.desc())
            .offset((page - 1) * limit)
            .limit(limit)
            .all()
        )
        return tasks, total

    def tasks_for_user(self, user_id: int) -> dict:
        user = self._get_user(user_id)
        tasks = (
            self.db.query(Task)
            .options(joinedload(Task.owner), joinedload(Task.assignee))
            .filter(Task.owner_id == user.id)
            .order_by(Task.created_at.desc(), Task.id.desc())
            .all()
        )
        return {"user": user, "tasks": tasks}

    def platform_stats(self) -> dict:
        role_counts = dict(
            self.db.query(User.role, func.count(User.id)).group_by(User.role).all()
        )
        total_users = self.db.query(User).count()
        recent_cutoff = datetime.utcnow() - timedelta(days=RECENT_SIGNUP_DAYS)
        recent_signups = self.db.query(User).filter(User.created_at >= recent_cutoff).count()

        status_counts = self._status_counts()
        total_tasks = sum(status_counts.values())
        completed = status_counts[TaskStatus.COMPLETED.value]
        completion_rate = round(completed / total_tasks * 100, 2) if total_tasks > 0 else 0

        return {
            "users": {
                "total": total_users,
                "admins": role_counts.get(UserRole.ADMIN.value, 0),
                "regular_users": role_counts.get(UserRole.USER.value, 0),
                "recent_signups": recent_signups,
            },
            "tasks": {
                "total": total_tasks,
                "pending": status_counts[TaskStatus.PENDING.value],
                "in_progress": status_counts[TaskStatus.IN_PROGRESS.value],
                "completed": completed,
                "cancelled": status_counts[TaskStatus.CANCELLED.value],
            },
            "overview": {
                "total_users": total_users,
                "total_tasks": total_tasks,
                "completion_rate": completion_rate,
            },
        }

