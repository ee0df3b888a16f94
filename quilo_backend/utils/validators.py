"""
Input validation utilities
"""
from quilo_backend.config import get_settings
from quilo_backend.exceptions import ServiceValidationError
from quilo_backend.models.evaluation import Criterion


def validate_criterion(value) -> Criterion:
    """Normalize a criterion name; unknown names are rejected"""
    if isinstance(value, Criterion):
        return value
    try:
        return Criterion(str(value).strip().lower())
    except ValueError:
        valid = ", ".join(c.value for c in Criterion)
        raise ServiceValidationError(
            f"Critério inválido '{value}'. Valores aceitos: {valid}",
            details={"field": "criterion", "value": value},
        )


def validate_score(value) -> int:
    """Validate that a score is an integer inside the contest range"""
    settings = get_settings()
    # bool is an int subclass
    if isinstance(value, bool) or not isinstance(value, int):
        raise ServiceValidationError(
            "A nota deve ser um número inteiro",
            details={"field": "score", "value": value},
        )
    if value < settings.SCORE_MIN or value > settings.SCORE_MAX:
        raise ServiceValidationError(
            f"A nota deve estar entre {settings.SCORE_MIN} e {settings.SCORE_MAX}",
            details={"field": "score", "value": value},
        )
    return value
