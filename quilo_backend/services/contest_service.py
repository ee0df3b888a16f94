"""
Dish, judge and recipe management.

Every mutation flushes its changes and returns a MutationResult carrying the
change events; committing and notifying are left to the caller.
Deleting a dish also deletes its evaluations and recipes; deleting a judge
also deletes that judge's evaluations.
"""
import logging
from typing import Any, Optional

from sqlalchemy import select, delete, func
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from quilo_backend.exceptions import ConflictError, NotFoundError
from quilo_backend.models.dish import Dish
from quilo_backend.models.evaluation import Evaluation
from quilo_backend.models.judge import Judge
from quilo_backend.models.recipe import Recipe
from quilo_backend.services.evaluation_service import require_dish, require_judge
from quilo_backend.services.events import (
    MutationResult,
    Resource,
    entity_created,
    entity_updated,
    entity_deleted,
    ranking_changed,
)
from quilo_backend.utils.helpers import utcnow

logger = logging.getLogger(__name__)


def _apply(record, updates: dict[str, Any]) -> None:
    for key, value in updates.items():
        setattr(record, key, value)


# ---------------------------------------------------------------------------
# Dishes
# ---------------------------------------------------------------------------

async def list_dishes(db: AsyncSession) -> list[Dish]:
    result = await db.execute(select(Dish).order_by(Dish.created_at.desc(), Dish.id.desc()))
    return list(result.scalars().all())


async def get_dish(db: AsyncSession, dish_id: int) -> Dish:
    return await require_dish(db, dish_id)


async def create_dish(db: AsyncSession, data: dict[str, Any]) -> MutationResult:
    dish = Dish(**data)
    db.add(dish)
    await db.flush()
    logger.info(f"Dish created: id={dish.id} name={dish.name!r}")
    return MutationResult(
        record=dish,
        events=[entity_created(Resource.DISHES, dish), ranking_changed()],
        created=True,
    )


async def update_dish(db: AsyncSession, dish_id: int, updates: dict[str, Any]) -> MutationResult:
    dish = await require_dish(db, dish_id)
    _apply(dish, updates)
    dish.updated_at = utcnow()
    await db.flush()
    logger.info(f"Dish updated: id={dish.id} fields={sorted(updates)}")
    return MutationResult(record=dish, events=[entity_updated(Resource.DISHES, dish), ranking_changed()])


async def delete_dish(db: AsyncSession, dish_id: int) -> MutationResult:
    """Delete a dish together with its evaluations and recipes"""
    dish = await require_dish(db, dish_id)

    recipe_ids = (await db.execute(select(Recipe.id).where(Recipe.dish_id == dish_id))).scalars().all()
    removed_evaluations = await db.execute(delete(Evaluation).where(Evaluation.dish_id == dish_id))
    await db.execute(delete(Recipe).where(Recipe.dish_id == dish_id))
    await db.delete(dish)
    await db.flush()

    events = [entity_deleted(Resource.DISHES, id=dish_id)]
    if removed_evaluations.rowcount:
        events.append(entity_deleted(Resource.EVALUATIONS, dish_id=dish_id))
    for recipe_id in recipe_ids:
        events.append(entity_deleted(Resource.RECIPES, id=recipe_id))
    events.append(ranking_changed())

    logger.info(
        f"Dish deleted: id={dish_id} evaluations_removed={removed_evaluations.rowcount} "
        f"recipes_removed={len(recipe_ids)}"
    )
    return MutationResult(record=dish, events=events)


# ---------------------------------------------------------------------------
# Judges
# ---------------------------------------------------------------------------

async def list_judges(db: AsyncSession, active_only: bool = False) -> list[Judge]:
    query = select(Judge).order_by(Judge.name, Judge.id)
    if active_only:
        query = query.where(Judge.is_active == True)
    result = await db.execute(query)
    return list(result.scalars().all())


async def get_judge(db: AsyncSession, judge_id: int) -> Judge:
    return await require_judge(db, judge_id)


async def _ensure_email_free(db: AsyncSession, email: str, exclude_id: Optional[int] = None) -> None:
    query = select(Judge.id).where(func.lower(Judge.email) == email.lower())
    if exclude_id is not None:
        query = query.where(Judge.id != exclude_id)
    if (await db.execute(query)).first():
        raise ConflictError(f"Já existe um jurado com o email {email}", details={"email": email})


async def _save_judge(db: AsyncSession, judge: Judge, updates: dict[str, Any]) -> None:
    """Write judge changes inside a savepoint; a duplicate email becomes a ConflictError"""
    # Read before the savepoint; a rollback expires the judge's attributes
    email = updates.get("email") or judge.email
    try:
        async with db.begin_nested():
            _apply(judge, updates)
            db.add(judge)
    except IntegrityError as e:
        if "unique" not in str(e.orig).lower():
            raise
        logger.info(f"Judge email {email} taken by a concurrent request")
        raise ConflictError(f"Já existe um jurado com o email {email}", details={"email": email})


async def create_judge(db: AsyncSession, data: dict[str, Any]) -> MutationResult:
    data = dict(data)
    data["email"] = data["email"].strip().lower()
    await _ensure_email_free(db, data["email"])

    judge = Judge()
    await _save_judge(db, judge, data)
    logger.info(f"Judge created: id={judge.id} email={judge.email}")
    return MutationResult(record=judge, events=[entity_created(Resource.JUDGES, judge)], created=True)


async def update_judge(db: AsyncSession, judge_id: int, updates: dict[str, Any]) -> MutationResult:
    judge = await require_judge(db, judge_id)
    updates = dict(updates)
    if updates.get("email"):
        updates["email"] = updates["email"].strip().lower()
        await _ensure_email_free(db, updates["email"], exclude_id=judge_id)

    await _save_judge(db, judge, updates)
    logger.info(f"Judge updated: id={judge.id} fields={sorted(updates)}")
    return MutationResult(record=judge, events=[entity_updated(Resource.JUDGES, judge)])


async def delete_judge(db: AsyncSession, judge_id: int) -> MutationResult:
    """Delete a judge together with the evaluations they submitted"""
    judge = await require_judge(db, judge_id)
    removed = await db.execute(delete(Evaluation).where(Evaluation.judge_id == judge_id))
    await db.delete(judge)
    await db.flush()

    events = [entity_deleted(Resource.JUDGES, id=judge_id)]
    if removed.rowcount:
        events.append(entity_deleted(Resource.EVALUATIONS, judge_id=judge_id))
        events.append(ranking_changed())

    logger.info(f"Judge deleted: id={judge_id} evaluations_removed={removed.rowcount}")
    return MutationResult(record=judge, events=events)


# ---------------------------------------------------------------------------
# Recipes
# ---------------------------------------------------------------------------

async def list_recipes(db: AsyncSession) -> list[Recipe]:
    result = await db.execute(select(Recipe).order_by(Recipe.created_at.desc(), Recipe.id.desc()))
    return list(result.scalars().all())


async def get_recipe(db: AsyncSession, recipe_id: int) -> Recipe:
    recipe = await db.get(Recipe, recipe_id)
    if not recipe:
        raise NotFoundError(f"Receita {recipe_id} não encontrada", details={"recipe_id": recipe_id})
    return recipe


async def create_recipe(db: AsyncSession, data: dict[str, Any]) -> MutationResult:
    await require_dish(db, data["dish_id"])
    recipe = Recipe(**data)
    db.add(recipe)
    await db.flush()
    logger.info(f"Recipe created: id={recipe.id} dish={recipe.dish_id}")
    return MutationResult(record=recipe, events=[entity_created(Resource.RECIPES, recipe)], created=True)


async def update_recipe(db: AsyncSession, recipe_id: int, updates: dict[str, Any]) -> MutationResult:
    recipe = await get_recipe(db, recipe_id)
    if updates.get("dish_id") is not None:
        await require_dish(db, updates["dish_id"])

    _apply(recipe, updates)
    recipe.updated_at = utcnow()
    await db.flush()
    logger.info(f"Recipe updated: id={recipe.id} fields={sorted(updates)}")
    return MutationResult(record=recipe, events=[entity_updated(Resource.RECIPES, recipe)])


async def delete_recipe(db: AsyncSession, recipe_id: int) -> MutationResult:
    recipe = await get_recipe(db, recipe_id)
    await db.delete(recipe)
    await db.flush()
    logger.info(f"Recipe deleted: id={recipe_id}")
    return MutationResult(record=recipe, events=[entity_deleted(Resource.RECIPES, id=recipe_id)])
