"""
Recipes API endpoints
"""
from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from quilo_backend.database import get_db
from quilo_backend.schemas import RecipeCreate, RecipeUpdate, RecipeResponse, ItemEnvelope, ListEnvelope, MessageEnvelope
from quilo_backend.services import contest_service
from quilo_backend.services.notifier import Notifier, get_notifier

router = APIRouter()


@router.get("", response_model=ListEnvelope[RecipeResponse])
async def list_recipes(db: AsyncSession = Depends(get_db)):
    recipes = await contest_service.list_recipes(db)
    return ListEnvelope[RecipeResponse](
        data=[RecipeResponse.model_validate(r) for r in recipes],
        total=len(recipes),
    )


@router.get("/{recipe_id}", response_model=ItemEnvelope[RecipeResponse])
async def get_recipe(recipe_id: int, db: AsyncSession = Depends(get_db)):
    recipe = await contest_service.get_recipe(db, recipe_id)
    return ItemEnvelope[RecipeResponse](data=RecipeResponse.model_validate(recipe))


@router.post("", status_code=201, response_model=ItemEnvelope[RecipeResponse])
async def create_recipe(
    data: RecipeCreate,
    db: AsyncSession = Depends(get_db),
    notifier: Notifier = Depends(get_notifier),
):
    """Attach a recipe to an existing dish"""
    result = await contest_service.create_recipe(db, data.model_dump())
    await db.commit()
    await db.refresh(result.record)
    await notifier.dispatch(result.events, db)
    return ItemEnvelope[RecipeResponse](
        data=RecipeResponse.model_validate(result.record),
        message="Receita criada com sucesso",
    )


@router.put("/{recipe_id}", response_model=ItemEnvelope[RecipeResponse])
async def update_recipe(
    recipe_id: int,
    data: RecipeUpdate,
    db: AsyncSession = Depends(get_db),
    notifier: Notifier = Depends(get_notifier),
):
    result = await contest_service.update_recipe(db, recipe_id, data.model_dump(exclude_unset=True))
    await db.commit()
    await db.refresh(result.record)
    await notifier.dispatch(result.events, db)
    return ItemEnvelope[RecipeResponse](
        data=RecipeResponse.model_validate(result.record),
        message="Receita atualizada com sucesso",
    )


@router.delete("/{recipe_id}", response_model=MessageEnvelope)
async def delete_recipe(
    recipe_id: int,
    db: AsyncSession = Depends(get_db),
    notifier: Notifier = Depends(get_notifier),
):
    result = await contest_service.delete_recipe(db, recipe_id)
    await db.commit()
    await notifier.dispatch(result.events, db)
    return MessageEnvelope(message="Receita excluída com sucesso")
