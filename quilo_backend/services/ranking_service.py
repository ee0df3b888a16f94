"""
Contest ranking engine.

Each dish's final score is derived from every evaluation submitted for it:

    mean per criterion     average of all judges' scores for that criterion
                           (0 when nobody scored it yet)
    weighted composite     sum(mean * weight) over the six criteria
    final score            composite / 13 * 10

With scores on a 0-10 scale the final score ranges 0-100. Every dish is
ranked, including dishes nobody evaluated yet (final score 0). Dishes with
equal final scores are ordered by id, i.e. by registration order.

`compute_ranking` is a pure function of the snapshot it receives; the ranking
is recomputed on every read and after every mutation, never cached.
"""
import logging
from collections import defaultdict
from dataclasses import dataclass, field
from typing import Iterable, Optional

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from quilo_backend.models.dish import Dish
from quilo_backend.models.evaluation import Evaluation, Criterion, CRITERION_WEIGHTS, TOTAL_WEIGHT

logger = logging.getLogger(__name__)

FINAL_SCALE = 10


@dataclass
class DishRankingEntry:
    dish_id: int
    name: str
    restaurant: str
    chef: Optional[str] = None
    region: Optional[str] = None
    image: Optional[str] = None
    criteria: dict[str, float] = field(default_factory=dict)
    total_judges: int = 0
    total_evaluations: int = 0
    weighted_total: float = 0.0
    final_score: float = 0.0
    position: int = 0


def criterion_means(scores: dict[Criterion, list[int]]) -> dict[Criterion, float]:
    """Mean score per criterion; criteria without submissions count as 0"""
    means = {}
    for criterion in Criterion:
        submitted = scores.get(criterion)
        means[criterion] = sum(submitted) / len(submitted) if submitted else 0.0
    return means


def weighted_composite(means: dict[Criterion, float]) -> float:
    return sum(means[criterion] * weight for criterion, weight in CRITERION_WEIGHTS.items())


def final_score(composite: float) -> float:
    return composite / TOTAL_WEIGHT * FINAL_SCALE


def compute_ranking(dishes: Iterable, evaluations: Iterable) -> list[DishRankingEntry]:
    """Rank all dishes from the given evaluations, best first"""
    scores_by_dish: dict[int, dict[Criterion, list[int]]] = defaultdict(lambda: defaultdict(list))
    judges_by_dish: dict[int, set[int]] = defaultdict(set)
    evaluations_by_dish: dict[int, int] = defaultdict(int)

    for evaluation in evaluations:
        criterion = Criterion(evaluation.criterion)
        scores_by_dish[evaluation.dish_id][criterion].append(evaluation.score)
        judges_by_dish[evaluation.dish_id].add(evaluation.judge_id)
        evaluations_by_dish[evaluation.dish_id] += 1

    entries = []
    for dish in dishes:
        means = criterion_means(scores_by_dish.get(dish.id, {}))
        composite = weighted_composite(means)
        entries.append(DishRankingEntry(
            dish_id=dish.id,
            name=dish.name,
            restaurant=dish.restaurant,
            chef=dish.chef,
            region=dish.region,
            image=dish.image,
            criteria={criterion.value: mean for criterion, mean in means.items()},
            total_judges=len(judges_by_dish.get(dish.id, ())),
            total_evaluations=evaluations_by_dish.get(dish.id, 0),
            weighted_total=composite,
            final_score=final_score(composite),
        ))

    entries.sort(key=lambda entry: (-entry.final_score, entry.dish_id))
    for position, entry in enumerate(entries, start=1):
        entry.position = position
    return entries


async def get_ranking(db: AsyncSession) -> list[DishRankingEntry]:
    """Load the current dishes and evaluations and rank them"""
    dishes = (await db.execute(select(Dish).order_by(Dish.id))).scalars().all()
    evaluations = (await db.execute(select(Evaluation))).scalars().all()

    ranking = compute_ranking(dishes, evaluations)
    logger.debug(f"Ranking computed for {len(ranking)} dishes from {len(evaluations)} evaluations")
    return ranking
