"""
Evaluation ingest.

A judge scores a dish once per criterion. Submitting the same
(judge, dish, criterion) again overwrites the stored score instead of adding a
second row; the unique constraint on that tuple backs this up when two
submissions race each other.
"""
import logging
from typing import Optional

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from quilo_backend.exceptions import NotFoundError, ServiceValidationError
from quilo_backend.models.dish import Dish
from quilo_backend.models.evaluation import Evaluation, Criterion
from quilo_backend.models.judge import Judge
from quilo_backend.services.events import (
    ChangeKind,
    MutationResult,
    Resource,
    entity_created,
    entity_updated,
    ranking_changed,
)
from quilo_backend.utils.helpers import utcnow
from quilo_backend.utils.validators import validate_criterion, validate_score

logger = logging.getLogger(__name__)


async def require_judge(db: AsyncSession, judge_id: int) -> Judge:
    judge = await db.get(Judge, judge_id)
    if not judge:
        raise NotFoundError(f"Jurado {judge_id} não encontrado", details={"judge_id": judge_id})
    return judge


async def require_active_judge(db: AsyncSession, judge_id: int) -> Judge:
    """Only active judges may submit scores"""
    judge = await require_judge(db, judge_id)
    if not judge.is_active:
        raise ServiceValidationError(f"Jurado {judge_id} está inativo", details={"judge_id": judge_id})
    return judge


async def require_dish(db: AsyncSession, dish_id: int) -> Dish:
    dish = await db.get(Dish, dish_id)
    if not dish:
        raise NotFoundError(f"Prato {dish_id} não encontrado", details={"dish_id": dish_id})
    return dish


async def _find(db: AsyncSession, judge_id: int, dish_id: int, criterion: Criterion) -> Optional[Evaluation]:
    result = await db.execute(
        select(Evaluation).where(
            Evaluation.judge_id == judge_id,
            Evaluation.dish_id == dish_id,
            Evaluation.criterion == criterion,
        )
    )
    return result.scalar_one_or_none()


async def _overwrite(db: AsyncSession, evaluation: Evaluation, score: int) -> Evaluation:
    evaluation.score = score
    evaluation.updated_at = utcnow()
    await db.flush()
    return evaluation


async def _upsert(
    db: AsyncSession, judge_id: int, dish_id: int, criterion: Criterion, score: int
) -> tuple[Evaluation, bool]:
    """Insert or overwrite the evaluation for one tuple. Returns (row, created)."""
    existing = await _find(db, judge_id, dish_id, criterion)
    if existing:
        return await _overwrite(db, existing, score), False

    evaluation = Evaluation(judge_id=judge_id, dish_id=dish_id, criterion=criterion, score=score)
    try:
        async with db.begin_nested():
            db.add(evaluation)
    except IntegrityError:
        # Another request inserted the same tuple between our lookup and insert
        existing = await _find(db, judge_id, dish_id, criterion)
        if existing is None:
            raise
        logger.info(
            f"Concurrent submission for judge={judge_id} dish={dish_id} "
            f"criterion={criterion.value}; overwriting"
        )
        return await _overwrite(db, existing, score), False

    return evaluation, True


async def submit_evaluation(
    db: AsyncSession, judge_id: int, dish_id: int, criterion, score
) -> MutationResult:
    """Record one judge's score for one dish under one criterion.

    Raises ServiceValidationError for an unknown criterion or an out-of-range
    score or an inactive judge, NotFoundError when the judge or dish does not
    exist.
    """
    criterion = validate_criterion(criterion)
    score = validate_score(score)
    await require_active_judge(db, judge_id)
    await require_dish(db, dish_id)

    evaluation, created = await _upsert(db, judge_id, dish_id, criterion, score)

    action = "created" if created else "updated"
    logger.info(
        f"Evaluation {action}: judge={judge_id} dish={dish_id} "
        f"criterion={criterion.value} score={score}"
    )
    change = entity_created if created else entity_updated
    return MutationResult(
        record=evaluation,
        events=[change(Resource.EVALUATIONS, evaluation), ranking_changed()],
        created=created,
    )


async def submit_evaluation_sheet(
    db: AsyncSession, judge_id: int, dish_id: int, scores: dict
) -> MutationResult:
    """Record a judge's whole score sheet for a dish (criterion -> score).

    Every entry is validated before anything is written, so a sheet with one
    bad criterion leaves the stored scores untouched.
    """
    if not scores:
        raise ServiceValidationError("A ficha de avaliação está vazia", details={"field": "scores"})

    validated = {}
    for criterion, score in scores.items():
        validated[validate_criterion(criterion)] = validate_score(score)

    await require_active_judge(db, judge_id)
    await require_dish(db, dish_id)

    evaluations = []
    events = []
    for criterion, score in validated.items():
        evaluation, created = await _upsert(db, judge_id, dish_id, criterion, score)
        change = entity_created if created else entity_updated
        events.append(change(Resource.EVALUATIONS, evaluation))
        evaluations.append(evaluation)
    events.append(ranking_changed())

    logger.info(f"Score sheet recorded: judge={judge_id} dish={dish_id} criteria={len(validated)}")
    created = any(event.kind == ChangeKind.CREATED for event in events)
    return MutationResult(record=evaluations, events=events, created=created)


def _with_names():
    return (
        select(Evaluation)
        .options(selectinload(Evaluation.judge), selectinload(Evaluation.dish))
        .execution_options(populate_existing=True)
    )


async def load_evaluations(db: AsyncSession, evaluation_ids: list[int]) -> list[Evaluation]:
    """Reload evaluations with judge and dish attached, in the order given"""
    result = await db.execute(_with_names().where(Evaluation.id.in_(evaluation_ids)))
    by_id = {evaluation.id: evaluation for evaluation in result.scalars().all()}
    return [by_id[evaluation_id] for evaluation_id in evaluation_ids if evaluation_id in by_id]


async def list_evaluations(
    db: AsyncSession, dish_id: Optional[int] = None, judge_id: Optional[int] = None
) -> list[Evaluation]:
    """Evaluations newest first, with judge and dish loaded for display"""
    query = _with_names().order_by(Evaluation.created_at.desc(), Evaluation.id.desc())
    if dish_id is not None:
        await require_dish(db, dish_id)
        query = query.where(Evaluation.dish_id == dish_id)
    if judge_id is not None:
        await require_judge(db, judge_id)
        query = query.where(Evaluation.judge_id == judge_id)

    result = await db.execute(query)
    return list(result.scalars().all())
