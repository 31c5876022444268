"""
Two-phase validation of perceptor payloads.

* The structural phase wraps a DRF serializer: presence, formats and
  ranges, no stored state involved.
* The business phase checks what needs collaborators: catalog codes
  must exist and a referenced manager must resolve.

:class:`ValidationPipeline` composes both.  ``check`` is the live
feedback mode and stops after a failing structural phase; ``run`` is
the submit mode and always runs both phases into one report, the
business phase seeing only the fields that passed structurally.
"""
from __future__ import annotations

import logging
from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any, Callable, Iterable, Iterator, Optional

from rest_framework import serializers
from rest_framework.fields import empty

from perceptors.exceptions import CatalogNotFound, ManagerNotFound
from perceptors.services.catalogs import (
    CATALOG_ACTIVITIES,
    CATALOG_LINES_OF_BUSINESS,
    CATALOG_PRIORITIES,
    CATALOG_SPECIALTIES,
    CatalogService,
)
from perceptors.services.managers import ManagerService

logger = logging.getLogger(__name__)

NON_FIELD = 'non_field_errors'


@dataclass(frozen=True)
class ValidationIssue:
    field: str
    code: str
    message: str


class ValidationErrorReport:
    """Ordered (field path, error code, message) triples.  Empty means valid."""

    def __init__(self, issues: Optional[Iterable[ValidationIssue]] = None):
        self._issues: list[ValidationIssue] = list(issues or [])

    @classmethod
    def from_serializer_errors(cls, errors) -> 'ValidationErrorReport':
        return cls(ValidationIssue(path, code, message) for path, code, message in _flatten(errors, ''))

    def add(self, field: str, code: str, message: str) -> None:
        self._issues.append(ValidationIssue(field, code, message))

    def extend(self, other: Iterable[ValidationIssue]) -> None:
        self._issues.extend(other)

    @property
    def has_errors(self) -> bool:
        return bool(self._issues)

    @property
    def is_valid(self) -> bool:
        return not self._issues

    def fields(self) -> list[str]:
        return [i.field for i in self._issues]

    def codes(self) -> list[str]:
        return [i.code for i in self._issues]

    def as_list(self) -> list[dict]:
        return [{'field': i.field, 'code': i.code, 'message': i.message} for i in self._issues]

    def __iter__(self) -> Iterator[ValidationIssue]:
        return iter(self._issues)

    def __len__(self) -> int:
        return len(self._issues)

    def __repr__(self) -> str:
        return f'ValidationErrorReport({self._issues!r})'


def _flatten(errors, prefix: str):
    if isinstance(errors, dict):
        for key, value in errors.items():
            if key == NON_FIELD:
                path = prefix or NON_FIELD
            else:
                path = f'{prefix}.{key}' if prefix else str(key)
            yield from _flatten(value, path)
    elif isinstance(errors, (list, tuple)):
        for index, item in enumerate(errors):
            if isinstance(item, (dict, list, tuple)):
                yield from _flatten(item, f'{prefix}[{index}]')
            else:
                yield prefix or NON_FIELD, getattr(item, 'code', 'invalid'), str(item)
    else:
        yield prefix or NON_FIELD, getattr(errors, 'code', 'invalid'), str(errors)


class StructuralValidator:
    """Runs a serializer over the payload.

    Returns the report and the cleaned values: all validated data when
    the payload is valid, otherwise only the top-level fields that
    validated on their own.
    """

    def __init__(self, serializer_class: type[serializers.Serializer]):
        self.serializer_class = serializer_class

    def __call__(self, payload) -> tuple[ValidationErrorReport, dict[str, Any]]:
        serializer = self.serializer_class(data=payload)
        if serializer.is_valid():
            return ValidationErrorReport(), dict(serializer.validated_data)
        report = ValidationErrorReport.from_serializer_errors(serializer.errors)
        return report, _fields_that_passed(serializer)


def _fields_that_passed(serializer: serializers.Serializer) -> dict[str, Any]:
    values: dict[str, Any] = {}
    if not isinstance(serializer.initial_data, Mapping):
        return values
    for name, field in serializer.fields.items():
        if name in serializer.errors or field.read_only:
            continue
        primitive = field.get_value(serializer.initial_data)
        if primitive is empty:
            continue
        try:
            values[name] = field.run_validation(primitive)
        except serializers.ValidationError:
            continue
    return values


class BusinessValidator:
    """Existence checks against the catalog and manager collaborators."""

    catalog_fields = (
        ('priority', CATALOG_PRIORITIES),
        ('specialty', CATALOG_SPECIALTIES),
        ('activity', CATALOG_ACTIVITIES),
        ('lineOfBusiness', CATALOG_LINES_OF_BUSINESS),
    )

    def __init__(self, catalogs: CatalogService, managers: ManagerService):
        self.catalogs = catalogs
        self.managers = managers

    def __call__(self, data: dict[str, Any], report: ValidationErrorReport) -> None:
        for field, key in self.catalog_fields:
            code = data.get(field)
            if not code:
                continue
            try:
                known = self.catalogs.contains(key, code)
            except CatalogNotFound as exc:
                logger.error('cannot validate %s: %s', field, exc)
                report.add(field, 'catalog_unavailable', f'The {key} catalog is not available.')
                continue
            if not known:
                report.add(field, 'unknown_code', f'"{code}" is not a known {key} code.')

        manager = data.get('manager')
        if manager:
            try:
                self.managers.get(manager)
            except ManagerNotFound:
                report.add('manager', 'unknown_manager', f'Manager "{manager}" does not exist.')


class ValidationPipeline:

    def __init__(
        self,
        structural: Callable[[Any], tuple[ValidationErrorReport, dict[str, Any]]],
        business: Optional[Callable[[dict[str, Any], ValidationErrorReport], None]] = None,
    ):
        self.structural = structural
        self.business = business

    def check(self, payload) -> ValidationErrorReport:
        """Check-only mode: the business phase is skipped once the structure is wrong."""
        report, data = self.structural(payload)
        if report.has_errors or self.business is None:
            return report
        self.business(data, report)
        return report

    def run(self, payload) -> tuple[ValidationErrorReport, dict[str, Any]]:
        """Submit mode: both phases, one report listing every violated field."""
        report, data = self.structural(payload)
        if self.business is not None:
            self.business(data, report)
        return report, data
