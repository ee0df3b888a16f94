"""
Dishes API endpoints - contest entries
"""
from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from quilo_backend.database import get_db
from quilo_backend.schemas import DishCreate, DishUpdate, DishResponse, ItemEnvelope, ListEnvelope, MessageEnvelope
from quilo_backend.services import contest_service
from quilo_backend.services.notifier import Notifier, get_notifier

router = APIRouter()


@router.get("", response_model=ListEnvelope[DishResponse])
async def list_dishes(db: AsyncSession = Depends(get_db)):
    """List all dishes, newest first"""
    dishes = await contest_service.list_dishes(db)
    return ListEnvelope[DishResponse](
        data=[DishResponse.model_validate(d) for d in dishes],
        total=len(dishes),
    )


@router.get("/{dish_id}", response_model=ItemEnvelope[DishResponse])
async def get_dish(dish_id: int, db: AsyncSession = Depends(get_db)):
    dish = await contest_service.get_dish(db, dish_id)
    return ItemEnvelope[DishResponse](data=DishResponse.model_validate(dish))


@router.post("", status_code=201, response_model=ItemEnvelope[DishResponse])
async def create_dish(
    data: DishCreate,
    db: AsyncSession = Depends(get_db),
    notifier: Notifier = Depends(get_notifier),
):
    """Register a new contest dish"""
    result = await contest_service.create_dish(db, data.model_dump())
    await db.commit()
    await db.refresh(result.record)
    await notifier.dispatch(result.events, db)
    return ItemEnvelope[DishResponse](
        data=DishResponse.model_validate(result.record),
        message="Prato criado com sucesso",
    )


@router.put("/{dish_id}", response_model=ItemEnvelope[DishResponse])
async def update_dish(
    dish_id: int,
    data: DishUpdate,
    db: AsyncSession = Depends(get_db),
    notifier: Notifier = Depends(get_notifier),
):
    """Update dish fields; only the fields sent are changed"""
    result = await contest_service.update_dish(db, dish_id, data.model_dump(exclude_unset=True))
    await db.commit()
    await db.refresh(result.record)
    await notifier.dispatch(result.events, db)
    return ItemEnvelope[DishResponse](
        data=DishResponse.model_validate(result.record),
        message="Prato atualizado com sucesso",
    )


@router.delete("/{dish_id}", response_model=MessageEnvelope)
async def delete_dish(
    dish_id: int,
    db: AsyncSession = Depends(get_db),
    notifier: Notifier = Depends(get_notifier),
):
    """Delete a dish along with its evaluations and recipes"""
    result = await contest_service.delete_dish(db, dish_id)
    await db.commit()
    await notifier.dispatch(result.events, db)
    return MessageEnvelope(message="Prato excluído com sucesso")
