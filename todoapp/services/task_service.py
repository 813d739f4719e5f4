# todoapp/services/task_service.py
import logging
from typing import Dict, List, Optional

from sqlalchemy import func
from sqlalchemy.orm import Session, joinedload

from todoapp.models.task import Task, TaskPriority, TaskStatus
from todoapp.models.user import User
from todoapp.schemas.task import TaskCreate, TaskFilters, TaskUpdate
from todoapp.services.access_policy import policy
from todoapp.utils.errors import NotFoundError, ValidationError

logger = logging.getLogger(__name__)

# Fields a patch may never touch
IMMUTABLE_FIELDS = {"id", "owner_id", "owner", "created_at"}


def _value(enum_or_str):
    return enum_or_str.value if hasattr(enum_or_str, "value") else enum_or_str


class TaskService:
    """Task lifecycle operations scoped by the access policy"""

    def __init__(self, db: Session):
        self.db = db

    def _query(self):
        return self.db.query(Task).options(
            joinedload(Task.owner),
            joinedload(Task.assignee),
        )

    def _check_assignee(self, user_id: Optional[int]) -> None:
        if user_id is None:
            return
        if self.db.get(User, user_id) is None:
            raise ValidationError("Assigned user not found")

    def _fetch(self, task_id: int) -> Task:
        task = self._query().filter(Task.id == task_id).first()
        if not task:
            raise NotFoundError("Task not found")
        return task

    def create(self, data: TaskCreate, owner_id: int) -> Task:
        policy.enforce(policy.can_create_task(owner_id), owner_id)
        self._check_assignee(data.assigned_to)

        task = Task(
            title=data.title,
            description=data.description,
            status=_value(data.status),
            priority=_value(data.priority),
            assigned_to=data.assigned_to,
            due_date=data.due_date,
            owner_id=owner_id,
        )
        self.db.add(task)
        self.db.commit()
        self.db.refresh(task)

        logger.info(f"Task {task.id} created by user {owner_id}")
        return task

    def list(self, caller_id: int, caller_role: str, filters: Optional[TaskFilters] = None) -> List[Task]:
        query = self._query()

        owner_scope = policy.task_scope(caller_id, caller_role)
        if owner_scope is not None:
            query = query.filter(Task.owner_id == owner_scope)

        if filters is not None:
            if filters.status:
                query = query.filter(Task.status == _value(filters.status))
            if filters.priority:
                query = query.filter(Task.priority == _value(filters.priority))

        return query.order_by(Task.created_at.desc(), Task.id.desc()).all()

    def get_by_id(self, task_id: int, caller_id: int, caller_role: str) -> Task:
        task = self._fetch(task_id)
        policy.enforce(policy.can_access_task(task, caller_id, caller_role, "read"), caller_id)
        return task

    def update(self, task_id: int, patch: TaskUpdate, caller_id: int, caller_role: str) -> Task:
        task = self._fetch(task_id)
        policy.enforce(policy.can_access_task(task, caller_id, caller_role, "update"), caller_id)

        update_data = patch.model_dump(exclude_unset=True)
        for field in IMMUTABLE_FIELDS:
            update_data.pop(field, None)

        if "title" in update_data and update_data["title"] is None:
            raise ValidationError("Title cannot be empty")
        if "assigned_to" in update_data:
            self._check_assignee(update_data["assigned_to"])

        for field, value in update_data.items():
            if field in ("status", "priority"):
                if value is None:
                    continue
                value = _value(value)
            setattr(task, field, value)

        self.db.commit()
        self.db.refresh(task)

        logger.info(f"Task {task.id} updated by user {caller_id}")
        return task

    def delete(self, task_id: int, caller_id: int, caller_role: str) -> None:
        task = self._fetch(task_id)
        policy.enforce(policy.can_access_task(task, caller_id, caller_role, "delete"), caller_id)

        self.db.delete(task)
        self.db.commit()
        logger.info(f"Task {task_id} deleted by user {caller_id}")

    def _grouped_counts(self, column, owner_scope: Optional[int], categories) -> Dict[str, int]:
        query = self.db.query(column, func.count(Task.id))
        if owner_scope is not None:
            query = query.filter(Task.owner_id == owner_scope)
        counts = {category.value: 0 for category in categories}
        for key, count in query.group_by(column).all():
            counts[key] = count
        return counts

    def stats(self, caller_id: int, caller_role: str) -> dict:
        owner_scope = policy.task_scope(caller_id, caller_role)
        return {
            "by_status": self._grouped_counts(Task.status, owner_scope, TaskStatus),
            "by_priority": self._grouped_counts(Task.priority, owner_scope, TaskPriority),
        }
