from quilo_backend.models.dish import Dish
from quilo_backend.models.judge import Judge
from quilo_backend.models.evaluation import Evaluation, Criterion, CRITERION_WEIGHTS, TOTAL_WEIGHT
from quilo_backend.models.recipe import Recipe

__all__ = [
    "Dish",
    "Judge",
    "Evaluation",
    "Criterion",
    "CRITERION_WEIGHTS",
    "TOTAL_WEIGHT",
    "Recipe",
]
