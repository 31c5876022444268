"""
Perceptor lifecycle: creation, edition and the status state machine.

    ACTIVE   --deactivate--> INACTIVE
    SEIZED   --deactivate--> INACTIVE   (INACTIVE --deactivate--> INACTIVE is a no-op)
    ACTIVE   --seize-------> SEIZED
    INACTIVE --seize-------> SEIZED
    INACTIVE --reactivate--> ACTIVE
    SEIZED   --reactivate--> ACTIVE

Every single-perceptor operation resolves the perceptor first (404 if
it does not exist, 403 if the caller's scope rejects it) and then works
on the row locked with ``select_for_update`` so concurrent requests on
the same perceptor are serialized.  Each mutation bumps ``version`` and
is recorded in the transition log.
"""
from __future__ import annotations

import logging
from typing import Any, Optional

from django.db import transaction

from perceptors.exceptions import InvalidTransition, PerceptorForbidden, StaleVersion
from perceptors.models import Perceptor, PerceptorId
from perceptors.services.audit import record_transition
from perceptors.services.repository import PerceptorRepository
from perceptors.services.security import CallerContext, can_access

logger = logging.getLogger(__name__)

ACTIVE = Perceptor.STATUS_ACTIVE
INACTIVE = Perceptor.STATUS_INACTIVE
SEIZED = Perceptor.STATUS_SEIZED

# action -> (statuses it may start from, resulting status)
TRANSITIONS: dict[str, tuple[frozenset[str], str]] = {
    # Deactivating an inactive perceptor is accepted as a no-op.
    'deactivate': (frozenset({ACTIVE, SEIZED, INACTIVE}), INACTIVE),
    'seize': (frozenset({ACTIVE, INACTIVE}), SEIZED),
    'reactivate': (frozenset({INACTIVE, SEIZED}), ACTIVE),
}

# form field -> model attribute
FORM_FIELDS = {
    'name': 'name',
    'priority': 'priority',
    'specialty': 'specialty',
    'activity': 'activity',
    'lineOfBusiness': 'line_of_business',
    'details': 'details',
}


def can_transition(current: str, action: str) -> bool:
    """Return True if ``action`` is legal for a perceptor in status ``current``."""
    sources, _ = TRANSITIONS[action]
    return current in sources


def _apply_form(perceptor: Perceptor, data: dict[str, Any]) -> None:
    for key, attr in FORM_FIELDS.items():
        if key in data:
            value = data[key]
            setattr(perceptor, attr, dict(value) if key == 'details' else value)
    if 'manager' in data:
        perceptor.manager_id = data['manager'] or None


class PerceptorLifecycle:
    """Sole writer of perceptor rows and of their ``status``."""

    def __init__(self, repository: Optional[PerceptorRepository] = None):
        self.repository = repository or PerceptorRepository()

    def resolve(self, perceptor_id: PerceptorId, caller: CallerContext) -> Perceptor:
        perceptor = self.repository.find_by_id(perceptor_id)
        self._check_scope(perceptor, caller)
        return perceptor

    def create(self, category: str, data: dict[str, Any], caller: CallerContext) -> Perceptor:
        perceptor = Perceptor(category=category, code=None, status=ACTIVE, version=1)
        _apply_form(perceptor, data)
        with transaction.atomic():
            self.repository.save(perceptor)
            record_transition(perceptor, action='create', from_status=None, operator=caller.user_id)
        logger.info('perceptor %s created by %s', perceptor.perceptor_id, caller.user_id)
        return perceptor

    def update(
        self,
        perceptor_id: PerceptorId,
        data: dict[str, Any],
        caller: CallerContext,
        expected_version: Optional[int] = None,
    ) -> Perceptor:
        """Overwrite the form fields; status, category and code never change here."""
        with transaction.atomic():
            perceptor = self._lock(perceptor_id, caller)
            if expected_version is not None and expected_version != perceptor.version:
                raise StaleVersion()
            if not caller.is_admin:
                # only administrators reassign ownership
                data = {k: v for k, v in data.items() if k != 'manager'}
            _apply_form(perceptor, data)
            perceptor.version += 1
            self.repository.save(perceptor)
            record_transition(perceptor, action='update', from_status=perceptor.status, operator=caller.user_id)
        logger.info('perceptor %s updated by %s (v%s)', perceptor_id, caller.user_id, perceptor.version)
        return perceptor

    def deactivate(self, perceptor_id: PerceptorId, caller: CallerContext) -> Perceptor:
        return self._transition(perceptor_id, 'deactivate', caller)

    def seize(self, perceptor_id: PerceptorId, caller: CallerContext) -> Perceptor:
        return self._transition(perceptor_id, 'seize', caller)

    def reactivate(self, perceptor_id: PerceptorId, caller: CallerContext) -> Perceptor:
        return self._transition(perceptor_id, 'reactivate', caller)

    def _transition(self, perceptor_id: PerceptorId, action: str, caller: CallerContext) -> Perceptor:
        _, target = TRANSITIONS[action]
        with transaction.atomic():
            perceptor = self._lock(perceptor_id, caller)
            current = perceptor.status
            if not can_transition(current, action):
                raise InvalidTransition(f'Cannot {action} a perceptor in status {current}.')
            if current == target:
                logger.info('perceptor %s already %s, %s is a no-op', perceptor_id, target, action)
                return perceptor
            perceptor.status = target
            perceptor.version += 1
            self.repository.save(perceptor)
            record_transition(perceptor, action=action, from_status=current, operator=caller.user_id)
        logger.info('perceptor %s %s -> %s by %s', perceptor_id, current, target, caller.user_id)
        return perceptor

    def _lock(self, perceptor_id: PerceptorId, caller: CallerContext) -> Perceptor:
        perceptor = self.repository.find_for_update(perceptor_id)
        self._check_scope(perceptor, caller)
        return perceptor

    def _check_scope(self, perceptor: Perceptor, caller: CallerContext) -> None:
        if not can_access(caller, perceptor):
            logger.warning(
                'caller %s (manager %s) rejected on perceptor %s owned by %s',
                caller.user_id, caller.manager_code, perceptor.perceptor_id, perceptor.manager_id,
            )
            raise PerceptorForbidden()
