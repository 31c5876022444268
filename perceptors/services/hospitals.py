"""
Hospital maintenance operations.

One method per screen action of the hospital maintenance module.  Each
takes the caller's :class:`CallerContext` explicitly and returns an
:class:`OperationResult` instead of filling a shared model map; views
only translate results to HTTP.

The controller is bound to the hospital category ``H``: searches are
forced to it and identifiers of any other category are reported as not
found.
"""
from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any, Optional

from perceptors.exceptions import PerceptorNotFound, ValidationFailed
from perceptors.models import Perceptor, PerceptorId
from perceptors.serializers.perceptor import HospitalSerializer, SearchCriteriaSerializer
from perceptors.services.audit import format_transition, transitions_for
from perceptors.services.catalogs import (
    CATALOG_ACTIVITIES,
    CATALOG_LINES_OF_BUSINESS,
    CATALOG_PRIORITIES,
    CATALOG_SPECIALTIES,
    CATALOG_STATUSES,
    CatalogService,
    load_catalogs,
)
from perceptors.services.lifecycle import PerceptorLifecycle
from perceptors.services.managers import ManagerService
from perceptors.services.repository import PerceptorRepository
from perceptors.services.search import PerceptorSearch, criteria_from
from perceptors.services.security import CallerContext
from perceptors.services.validation import (
    BusinessValidator,
    StructuralValidator,
    ValidationErrorReport,
    ValidationPipeline,
)

ACTION_NEW = 'new'
ACTION_UPDATE = 'update'

SEARCH_CATALOGS = (CATALOG_PRIORITIES, CATALOG_STATUSES)
FORM_CATALOGS = (CATALOG_PRIORITIES, CATALOG_SPECIALTIES, CATALOG_ACTIVITIES, CATALOG_LINES_OF_BUSINESS)

MESSAGES = {
    'create': 'Hospital {id} created.',
    'update': 'Hospital {id} updated.',
    'deactivate': 'Hospital {id} deactivated.',
    'seize': 'Hospital {id} seized.',
    'reactivate': 'Hospital {id} reactivated.',
}


@dataclass
class OperationResult:
    entity: Optional[Perceptor] = None
    entities: list[Perceptor] = field(default_factory=list)
    report: ValidationErrorReport = field(default_factory=ValidationErrorReport)
    message: str = ''
    # 'new' or 'update' on form screens
    action: str = ''
    form: dict[str, Any] = field(default_factory=dict)
    catalogs: dict[str, list] = field(default_factory=dict)
    history: list[dict] = field(default_factory=list)


class HospitalService:

    category = Perceptor.CATEGORY_HOSPITAL

    def __init__(
        self,
        repository: Optional[PerceptorRepository] = None,
        catalogs: Optional[CatalogService] = None,
        managers: Optional[ManagerService] = None,
    ):
        self.repository = repository or PerceptorRepository()
        self.catalogs = catalogs or CatalogService()
        self.managers = managers or ManagerService()
        self.lifecycle = PerceptorLifecycle(self.repository)
        self.searcher = PerceptorSearch(self.repository)
        self.form_pipeline = ValidationPipeline(
            StructuralValidator(HospitalSerializer),
            BusinessValidator(self.catalogs, self.managers),
        )
        self.search_pipeline = ValidationPipeline(StructuralValidator(SearchCriteriaSerializer))

    # -- search screen -----------------------------------------------------

    def list_form(self, caller: CallerContext) -> OperationResult:
        """Empty search screen, pre-filtered on the caller's own manager."""
        return OperationResult(
            form={'category': self.category, 'manager': caller.manager_code},
            catalogs=load_catalogs(self.catalogs, SEARCH_CATALOGS),
        )

    def search_check_only(self, payload) -> ValidationErrorReport:
        return self.search_pipeline.check(payload)

    def search(self, payload, caller: CallerContext) -> OperationResult:
        report, data = self.search_pipeline.run(payload)
        if report.has_errors:
            raise ValidationFailed(report)
        criteria = criteria_from(data, category=self.category)
        form = {k: v for k, v in data.items() if v not in (None, '')}
        form['category'] = self.category
        return OperationResult(
            entities=self.searcher.run(criteria),
            form=form,
            catalogs=load_catalogs(self.catalogs, SEARCH_CATALOGS),
        )

    # -- create --------------------------------------------------------------

    def new_form(self, caller: CallerContext) -> OperationResult:
        return OperationResult(
            action=ACTION_NEW,
            form={'category': self.category, 'manager': caller.manager_code},
            catalogs=load_catalogs(self.catalogs, FORM_CATALOGS),
        )

    def create_check_only(self, payload, caller: CallerContext) -> ValidationErrorReport:
        return self.form_pipeline.check(self._scoped_payload(payload, caller, creating=True))

    def create(self, payload, caller: CallerContext) -> OperationResult:
        report, data = self.form_pipeline.run(self._scoped_payload(payload, caller, creating=True))
        if report.has_errors:
            raise ValidationFailed(report)
        perceptor = self.lifecycle.create(self.category, data, caller)
        return self._done('create', perceptor, action=ACTION_NEW)

    # -- edit ----------------------------------------------------------------

    def edit_form(self, category: str, code: int, caller: CallerContext) -> OperationResult:
        perceptor = self.lifecycle.resolve(self._scoped_id(category, code), caller)
        return OperationResult(
            entity=perceptor,
            action=ACTION_UPDATE,
            catalogs=load_catalogs(self.catalogs, FORM_CATALOGS),
        )

    def update_check_only(self, category: str, code: int, payload, caller: CallerContext) -> ValidationErrorReport:
        self.lifecycle.resolve(self._scoped_id(category, code), caller)
        return self.form_pipeline.check(self._scoped_payload(payload, caller, creating=False))

    def update(self, category: str, code: int, payload, caller: CallerContext) -> OperationResult:
        perceptor_id = self._scoped_id(category, code)
        # 404/403 take precedence over validation errors
        self.lifecycle.resolve(perceptor_id, caller)
        report, data = self.form_pipeline.run(self._scoped_payload(payload, caller, creating=False))
        if report.has_errors:
            raise ValidationFailed(report)
        perceptor = self.lifecycle.update(perceptor_id, data, caller, expected_version=data.get('version'))
        return self._done('update', perceptor, action=ACTION_UPDATE)

    # -- status transitions ----------------------------------------------------

    def deactivate(self, category: str, code: int, caller: CallerContext) -> OperationResult:
        return self._done('deactivate', self.lifecycle.deactivate(self._scoped_id(category, code), caller))

    def seize(self, category: str, code: int, caller: CallerContext) -> OperationResult:
        return self._done('seize', self.lifecycle.seize(self._scoped_id(category, code), caller))

    def reactivate(self, category: str, code: int, caller: CallerContext) -> OperationResult:
        return self._done('reactivate', self.lifecycle.reactivate(self._scoped_id(category, code), caller))

    def history(self, category: str, code: int, caller: CallerContext) -> OperationResult:
        perceptor = self.lifecycle.resolve(self._scoped_id(category, code), caller)
        return OperationResult(
            entity=perceptor,
            history=[format_transition(t) for t in transitions_for(perceptor)],
        )

    # -- helpers ---------------------------------------------------------------

    def _scoped_id(self, category: str, code: int) -> PerceptorId:
        perceptor_id = PerceptorId(category=category, code=code)
        if category != self.category:
            raise PerceptorNotFound(perceptor_id)
        return perceptor_id

    def _scoped_payload(self, payload, caller: CallerContext, *, creating: bool):
        if caller.is_admin or not isinstance(payload, Mapping):
            return payload
        payload = payload.copy()
        if creating:
            # managers always create perceptors they own
            payload['manager'] = caller.manager_code
        else:
            payload.pop('manager', None)
        return payload

    def _done(self, operation: str, perceptor: Perceptor, action: str = '') -> OperationResult:
        return OperationResult(
            entity=perceptor,
            message=MESSAGES[operation].format(id=perceptor.perceptor_id),
            action=action,
        )
