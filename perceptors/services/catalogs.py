"""
Reference-data catalogs (priorities, specialties, activities, ...).

Lookups go through the Django cache; ``manage.py refresh_caches``
re-warms every catalog.  Screens that only need dropdown data use
:func:`load_catalogs`, which degrades a missing catalog to an empty
list instead of failing the request.
"""
from __future__ import annotations

import logging
from typing import Iterable, NamedTuple

from django.conf import settings
from django.core.cache import cache
from django.db import DatabaseError

from perceptors.exceptions import CatalogNotFound, CollaboratorUnavailable
from perceptors.models import Catalog

logger = logging.getLogger(__name__)

CATALOG_PRIORITIES = 'priority'
CATALOG_STATUSES = 'status'
CATALOG_SPECIALTIES = 'specialty'
CATALOG_ACTIVITIES = 'activity'
CATALOG_LINES_OF_BUSINESS = 'line_of_business'


class CodeLabel(NamedTuple):
    code: str
    label: str


def _cache_key(key: str) -> str:
    return f'catalog:{key}'


class CatalogService:

    def codes_for(self, key: str) -> list[CodeLabel]:
        """Ordered code/label pairs of a catalog; ``CatalogNotFound`` if unknown."""
        ck = _cache_key(key)
        cached = cache.get(ck)
        if cached is not None:
            return cached
        codes = self._load(key)
        cache.set(ck, codes, settings.CATALOG_CACHE_SECONDS)
        return codes

    def contains(self, key: str, code: str) -> bool:
        return any(entry.code == code for entry in self.codes_for(key))

    def invalidate(self, key: str) -> None:
        cache.delete(_cache_key(key))

    def _load(self, key: str) -> list[CodeLabel]:
        try:
            catalog = Catalog.objects.filter(key=key).first()
            if catalog is None:
                raise CatalogNotFound(key)
            return [CodeLabel(e.code, e.label) for e in catalog.entries.order_by('position', 'code')]
        except DatabaseError as exc:
            raise CollaboratorUnavailable() from exc


def load_catalogs(catalogs: CatalogService, keys: Iterable[str]) -> dict[str, list[CodeLabel]]:
    """Dropdown data for a screen.  Unknown catalogs are logged and left empty."""
    data: dict[str, list[CodeLabel]] = {}
    for key in keys:
        try:
            data[key] = catalogs.codes_for(key)
        except CatalogNotFound as exc:
            logger.error('cannot load catalog of values: %s', exc)
            data[key] = []
    return data


def refresh_all(catalogs: CatalogService | None = None) -> list[str]:
    """Drop and reload every stored catalog into the cache; returns the keys refreshed."""
    catalogs = catalogs or CatalogService()
    try:
        keys = list(Catalog.objects.order_by('key').values_list('key', flat=True))
    except DatabaseError as exc:
        raise CollaboratorUnavailable() from exc
    for key in keys:
        catalogs.invalidate(key)
        catalogs.codes_for(key)
    logger.info('refreshed %d catalogs', len(keys))
    return keys
