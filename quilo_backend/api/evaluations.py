"""
Evaluations API endpoints - judges' scores
"""
from fastapi import APIRouter, Depends, Response
from sqlalchemy.ext.asyncio import AsyncSession

from quilo_backend.database import get_db
from quilo_backend.schemas import (
    EvaluationEnvelope,
    EvaluationResponse,
    EvaluationSheetEnvelope,
    EvaluationSheetSubmit,
    EvaluationSubmit,
    ListEnvelope,
    serialize_evaluation,
)
from quilo_backend.services import evaluation_service
from quilo_backend.services.notifier import Notifier, get_notifier

router = APIRouter()


def _listing(evaluations) -> ListEnvelope[EvaluationResponse]:
    return ListEnvelope[EvaluationResponse](
        data=[serialize_evaluation(e) for e in evaluations],
        total=len(evaluations),
    )


@router.get("", response_model=ListEnvelope[EvaluationResponse])
async def list_evaluations(db: AsyncSession = Depends(get_db)):
    """List all evaluations, newest first"""
    return _listing(await evaluation_service.list_evaluations(db))


@router.get("/prato/{dish_id}", response_model=ListEnvelope[EvaluationResponse])
async def list_dish_evaluations(dish_id: int, db: AsyncSession = Depends(get_db)):
    return _listing(await evaluation_service.list_evaluations(db, dish_id=dish_id))


@router.get("/jurado/{judge_id}", response_model=ListEnvelope[EvaluationResponse])
async def list_judge_evaluations(judge_id: int, db: AsyncSession = Depends(get_db)):
    return _listing(await evaluation_service.list_evaluations(db, judge_id=judge_id))


@router.post("", response_model=EvaluationEnvelope)
async def submit_evaluation(
    data: EvaluationSubmit,
    response: Response,
    db: AsyncSession = Depends(get_db),
    notifier: Notifier = Depends(get_notifier),
):
    """
    Record a judge's score for one criterion of a dish.
    Answers 201 for a new evaluation, 200 when an existing score was overwritten.
    """
    result = await evaluation_service.submit_evaluation(
        db, data.judge_id, data.dish_id, data.criterion, data.score
    )
    await db.commit()
    [evaluation] = await evaluation_service.load_evaluations(db, [result.record.id])
    await notifier.dispatch(result.events, db)

    response.status_code = 201 if result.created else 200
    return EvaluationEnvelope(
        data=serialize_evaluation(evaluation),
        message="Avaliação registrada com sucesso" if result.created else "Avaliação atualizada com sucesso",
        created=result.created,
    )


@router.post("/ficha", response_model=EvaluationSheetEnvelope)
async def submit_evaluation_sheet(
    data: EvaluationSheetSubmit,
    response: Response,
    db: AsyncSession = Depends(get_db),
    notifier: Notifier = Depends(get_notifier),
):
    """Record a full score sheet (criterion -> score) for one judge and dish"""
    result = await evaluation_service.submit_evaluation_sheet(db, data.judge_id, data.dish_id, data.scores)
    await db.commit()
    evaluations = await evaluation_service.load_evaluations(db, [e.id for e in result.record])
    await notifier.dispatch(result.events, db)

    response.status_code = 201 if result.created else 200
    return EvaluationSheetEnvelope(
        data=[serialize_evaluation(e) for e in evaluations],
        total=len(evaluations),
        message="Ficha de avaliação registrada com sucesso",
        created=result.created,
    )
