"""
Judges API endpoints
"""
from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from quilo_backend.database import get_db
from quilo_backend.schemas import JudgeCreate, JudgeUpdate, JudgeResponse, ItemEnvelope, ListEnvelope, MessageEnvelope
from quilo_backend.services import contest_service
from quilo_backend.services.notifier import Notifier, get_notifier

router = APIRouter()


@router.get("", response_model=ListEnvelope[JudgeResponse])
async def list_judges(
    active_only: bool = False,
    db: AsyncSession = Depends(get_db),
):
    """List judges ordered by name"""
    judges = await contest_service.list_judges(db, active_only=active_only)
    return ListEnvelope[JudgeResponse](
        data=[JudgeResponse.model_validate(j) for j in judges],
        total=len(judges),
    )


@router.get("/{judge_id}", response_model=ItemEnvelope[JudgeResponse])
async def get_judge(judge_id: int, db: AsyncSession = Depends(get_db)):
    judge = await contest_service.get_judge(db, judge_id)
    return ItemEnvelope[JudgeResponse](data=JudgeResponse.model_validate(judge))


@router.post("", status_code=201, response_model=ItemEnvelope[JudgeResponse])
async def create_judge(
    data: JudgeCreate,
    db: AsyncSession = Depends(get_db),
    notifier: Notifier = Depends(get_notifier),
):
    result = await contest_service.create_judge(db, data.model_dump())
    await db.commit()
    await db.refresh(result.record)
    await notifier.dispatch(result.events, db)
    return ItemEnvelope[JudgeResponse](
        data=JudgeResponse.model_validate(result.record),
        message="Jurado criado com sucesso",
    )


@router.put("/{judge_id}", response_model=ItemEnvelope[JudgeResponse])
async def update_judge(
    judge_id: int,
    data: JudgeUpdate,
    db: AsyncSession = Depends(get_db),
    notifier: Notifier = Depends(get_notifier),
):
    result = await contest_service.update_judge(db, judge_id, data.model_dump(exclude_unset=True))
    await db.commit()
    await db.refresh(result.record)
    await notifier.dispatch(result.events, db)
    return ItemEnvelope[JudgeResponse](
        data=JudgeResponse.model_validate(result.record),
        message="Jurado atualizado com sucesso",
    )


@router.delete("/{judge_id}", response_model=MessageEnvelope)
async def delete_judge(
    judge_id: int,
    db: AsyncSession = Depends(get_db),
    notifier: Notifier = Depends(get_notifier),
):
    """Delete a judge and the evaluations they submitted"""
    result = await contest_service.delete_judge(db, judge_id)
    await db.commit()
    await notifier.dispatch(result.events, db)
    return MessageEnvelope(message="Jurado excluído com sucesso")
