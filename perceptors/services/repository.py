"""
Persistence of perceptors.

The repository is the only place that talks to the ORM for perceptor
rows.  Database failures surface as ``CollaboratorUnavailable``.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from django.conf import settings
from django.db import DatabaseError, transaction
from django.db.models import Max, QuerySet

from perceptors.exceptions import CollaboratorUnavailable, PerceptorNotFound
from perceptors.models import Perceptor, PerceptorId, PerceptorSequence


@dataclass(frozen=True)
class SearchCriteria:
    """Filters of the perceptor search screen; ``category`` is always set by the server."""
    category: str
    manager: Optional[str] = None
    name: Optional[str] = None
    code: Optional[int] = None
    code_from: Optional[int] = None
    code_to: Optional[int] = None
    status: Optional[str] = None
    priority: Optional[str] = None
    specialty: Optional[str] = None


class PerceptorRepository:

    def find_by_id(self, perceptor_id: PerceptorId) -> Perceptor:
        try:
            obj = (
                Perceptor.objects.select_related('manager')
                .filter(category=perceptor_id.category, code=perceptor_id.code)
                .first()
            )
        except DatabaseError as exc:
            raise CollaboratorUnavailable() from exc
        if obj is None:
            raise PerceptorNotFound(perceptor_id)
        return obj

    def find_for_update(self, perceptor_id: PerceptorId) -> Perceptor:
        """Like :meth:`find_by_id` but locks the row; call inside ``transaction.atomic()``."""
        try:
            obj = (
                Perceptor.objects.select_for_update()
                .filter(category=perceptor_id.category, code=perceptor_id.code)
                .first()
            )
        except DatabaseError as exc:
            raise CollaboratorUnavailable() from exc
        if obj is None:
            raise PerceptorNotFound(perceptor_id)
        return obj

    def save(self, perceptor: Perceptor) -> Perceptor:
        """Persist ``perceptor``, assigning its code on the first save."""
        try:
            with transaction.atomic():
                if perceptor.code is None:
                    perceptor.code = self.next_code(perceptor.category)
                perceptor.save()
        except DatabaseError as exc:
            raise CollaboratorUnavailable() from exc
        return perceptor

    def next_code(self, category: str) -> int:
        seq, _ = PerceptorSequence.objects.select_for_update().get_or_create(category=category)
        # Also skip past rows loaded outside the sequence (fixtures, imports).
        highest = Perceptor.objects.filter(category=category).aggregate(m=Max('code'))['m'] or 0
        seq.last_code = max(seq.last_code, highest, settings.PERCEPTOR_CODE_START - 1) + 1
        seq.save(update_fields=['last_code'])
        return seq.last_code

    def search(self, criteria: SearchCriteria) -> QuerySet:
        qs = Perceptor.objects.select_related('manager').filter(category=criteria.category)
        if criteria.manager:
            qs = qs.filter(manager_id=criteria.manager)
        if criteria.name:
            qs = qs.filter(name__icontains=criteria.name)
        if criteria.code is not None:
            qs = qs.filter(code=criteria.code)
        if criteria.code_from is not None:
            qs = qs.filter(code__gte=criteria.code_from)
        if criteria.code_to is not None:
            qs = qs.filter(code__lte=criteria.code_to)
        if criteria.status:
            qs = qs.filter(status=criteria.status)
        if criteria.priority:
            qs = qs.filter(priority=criteria.priority)
        if criteria.specialty:
            qs = qs.filter(specialty=criteria.specialty)
        return qs.order_by('code')
