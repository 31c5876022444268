"""
Caller identity for the perceptor operations.

Views build one :class:`CallerContext` per request and pass it down
explicitly; services never look at ``request.user`` themselves.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Optional

from perceptors.exceptions import ManagerNotFound
from perceptors.services.managers import ManagerService

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class CallerContext:
    user_id: str
    is_admin: bool = False
    # Code of the manager record bound to the caller, if any.
    manager_code: Optional[str] = None


class SecurityService:
    """Answers who is calling, from the authenticated request user."""

    def __init__(self, user):
        self.user = user

    def is_administrator(self) -> bool:
        return bool(getattr(self.user, 'is_administrator', False))

    def current_user_id(self) -> str:
        return self.user.get_username()


def build_caller_context(security: SecurityService, managers: Optional[ManagerService] = None) -> CallerContext:
    """Resolve the caller's identity and, for non-administrators, its manager.

    A caller without a manager record is not rejected here: the failure
    is logged and the caller simply owns nothing, so searches start with
    an empty manager filter and only unassigned perceptors are in scope.
    """
    user_id = security.current_user_id()
    if security.is_administrator():
        return CallerContext(user_id=user_id, is_admin=True)
    managers = managers or ManagerService()
    try:
        manager = managers.manager_for(user_id)
    except ManagerNotFound as exc:
        logger.error('no manager bound to caller %s: %s', user_id, exc)
        return CallerContext(user_id=user_id, is_admin=False)
    return CallerContext(user_id=user_id, is_admin=False, manager_code=manager.code)


def can_access(caller: CallerContext, perceptor) -> bool:
    if caller.is_admin:
        return True
    if perceptor.manager_id is None:
        return True
    return perceptor.manager_id == caller.manager_code
