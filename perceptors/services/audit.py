from typing import Optional

from perceptors.models import Perceptor, PerceptorTransition


def record_transition(perceptor: Perceptor, *, action: str, from_status: Optional[str], operator: str) -> PerceptorTransition:
    return PerceptorTransition.objects.create(
        perceptor=perceptor,
        action=action,
        from_status=from_status,
        to_status=perceptor.status,
        operator=operator or '',
        version=perceptor.version,
    )


def transitions_for(perceptor: Perceptor) -> list[PerceptorTransition]:
    return list(perceptor.transitions.order_by('timestamp', 'id'))


def format_transition(t: PerceptorTransition) -> dict:
    return {
        'action': t.action,
        'from': t.from_status,
        'to': t.to_status,
        'operator': t.operator,
        'version': t.version,
        'timestamp': t.timestamp.isoformat(),
    }
