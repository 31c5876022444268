from typing import Optional

from django.db import DatabaseError

from perceptors.exceptions import CollaboratorUnavailable, ManagerNotFound
from perceptors.models import Manager


class ManagerService:
    """Looks up the staff managers that own perceptors."""

    def manager_for(self, user_id: str) -> Manager:
        """Return the active manager bound to the user with this username."""
        try:
            manager = Manager.objects.select_related('user').filter(user__username=user_id, active=True).first()
        except DatabaseError as exc:
            raise CollaboratorUnavailable() from exc
        if manager is None:
            raise ManagerNotFound(user_id)
        return manager

    def get(self, code: Optional[str]) -> Manager:
        try:
            manager = Manager.objects.filter(code=code, active=True).first() if code else None
        except DatabaseError as exc:
            raise CollaboratorUnavailable() from exc
        if manager is None:
            raise ManagerNotFound(code or '')
        return manager
