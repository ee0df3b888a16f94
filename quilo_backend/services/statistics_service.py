"""
Contest statistics: four independent counts queried concurrently.

Each count runs on its own session, so under concurrent writes the numbers
may reflect slightly different instants.
"""
import asyncio
from dataclasses import dataclass
from datetime import datetime

from sqlalchemy import select, func
from sqlalchemy.ext.asyncio import async_sessionmaker

from quilo_backend.models.dish import Dish
from quilo_backend.models.evaluation import Evaluation
from quilo_backend.models.judge import Judge
from quilo_backend.models.recipe import Recipe
from quilo_backend.utils.helpers import utcnow


@dataclass
class Statistics:
    dish_count: int
    active_judge_count: int
    evaluation_count: int
    recipe_count: int
    timestamp: datetime


async def _count(session_factory: async_sessionmaker, statement) -> int:
    async with session_factory() as session:
        result = await session.execute(statement)
        return result.scalar_one() or 0


async def compute_statistics(session_factory: async_sessionmaker) -> Statistics:
    dish_count, active_judge_count, evaluation_count, recipe_count = await asyncio.gather(
        _count(session_factory, select(func.count()).select_from(Dish)),
        _count(session_factory, select(func.count()).select_from(Judge).where(Judge.is_active == True)),
        _count(session_factory, select(func.count()).select_from(Evaluation)),
        _count(session_factory, select(func.count()).select_from(Recipe)),
    )
    return Statistics(
        dish_count=dish_count,
        active_judge_count=active_judge_count,
        evaluation_count=evaluation_count,
        recipe_count=recipe_count,
        timestamp=utcnow(),
    )
