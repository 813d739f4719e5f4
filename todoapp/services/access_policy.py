# todoapp/services/access_policy.py
"""Ownership and role rules for tasks and user records.

Every task and admin operation asks this module whether the caller may
proceed. Checks return a ``Decision``; ``enforce`` turns a denial into the
matching domain error.
"""
import logging
from dataclasses import dataclass
from typing import Optional, Union

from todoapp.models.task import Task
from todoapp.models.user import User, UserRole
from todoapp.utils.errors import AppError, AuthorizationError, ValidationError

logger = logging.getLogger(__name__)

VALID_ROLES = {role.value for role in UserRole}

TASK_DENIAL_REASONS = {
    "read": "You do not have access to this task",
    "update": "You can only update your own tasks",
    "delete": "You can only delete your own tasks",
}


@dataclass(frozen=True)
class Decision:
    allow: bool
    reason: Optional[str] = None
    error: type = AuthorizationError

    @classmethod
    def allowed(cls) -> "Decision":
        return cls(True)

    @classmethod
    def denied(cls, reason: str, error: type = AuthorizationError) -> "Decision":
        return cls(False, reason, error)


@dataclass(frozen=True)
class RoleChange:
    new_role: str


@dataclass(frozen=True)
class Deletion:
    pass


UserChange = Union[RoleChange, Deletion]


class AccessPolicy:
    """Single place where task visibility and user self-protection are decided"""

    @staticmethod
    def is_admin(role: str) -> bool:
        return role == UserRole.ADMIN.value

    @staticmethod
    def can_create_task(caller_id: int) -> Decision:
        # Any authenticated user may create tasks they own
        return Decision.allowed()

    @classmethod
    def can_access_task(cls, task: Task, caller_id: int, caller_role: str, action: str = "read") -> Decision:
        if cls.is_admin(caller_role):
            return Decision.allowed()
        if task.owner_id == caller_id:
            return Decision.allowed()
        return Decision.denied(TASK_DENIAL_REASONS.get(action, TASK_DENIAL_REASONS["read"]))

    @classmethod
    def task_scope(cls, caller_id: int, caller_role: str) -> Optional[int]:
        """Owner id that list/stats queries must be restricted to, or None for full visibility"""
        return None if cls.is_admin(caller_role) else caller_id

    @staticmethod
    def validate_role(role: str) -> Decision:
        if role not in VALID_ROLES:
            return Decision.denied('Invalid role. Must be "user" or "admin"', ValidationError)
        return Decision.allowed()

    @classmethod
    def can_modify_user(cls, target_user: User, caller_id: int, change: UserChange) -> Decision:
        if isinstance(change, RoleChange):
            decision = cls.validate_role(change.new_role)
            if not decision.allow:
                return decision
            if target_user.id == caller_id and change.new_role == UserRole.USER.value:
                return Decision.denied("Cannot demote yourself", ValidationError)
        elif isinstance(change, Deletion):
            if target_user.id == caller_id:
                return Decision.denied("Cannot delete yourself", ValidationError)
        return Decision.allowed()

    @staticmethod
    def enforce(decision: Decision, caller_id: Optional[int] = None) -> None:
        if decision.allow:
            return
        logger.warning(f"Access denied for user {caller_id}: {decision.reason}")
        error_cls = decision.error if issubclass(decision.error, AppError) else AuthorizationError
        raise error_cls(decision.reason)


policy = AccessPolicy()
