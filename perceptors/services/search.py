from typing import Any, Optional

from django.db import DatabaseError

from perceptors.exceptions import CollaboratorUnavailable
from perceptors.models import Perceptor
from perceptors.services.repository import PerceptorRepository, SearchCriteria


def criteria_from(data: dict[str, Any], *, category: str) -> SearchCriteria:
    """Build criteria from validated search input.

    ``category`` always comes from the caller's entry point; whatever
    category the client sent is dropped.
    """
    return SearchCriteria(
        category=category,
        manager=data.get('manager') or None,
        name=data.get('name') or None,
        code=data.get('code'),
        code_from=data.get('codeFrom'),
        code_to=data.get('codeTo'),
        status=data.get('status') or None,
        priority=data.get('priority') or None,
        specialty=data.get('specialty') or None,
    )


class PerceptorSearch:

    def __init__(self, repository: Optional[PerceptorRepository] = None):
        self.repository = repository or PerceptorRepository()

    def run(self, criteria: SearchCriteria) -> list[Perceptor]:
        # A fresh query per call; nothing is kept between searches.
        try:
            return list(self.repository.search(criteria))
        except DatabaseError as exc:
            raise CollaboratorUnavailable() from exc
