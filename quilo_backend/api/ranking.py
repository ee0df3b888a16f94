"""
Ranking, statistics and criteria endpoints
"""
from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from quilo_backend.config import get_settings
from quilo_backend.database import get_db, get_session_factory
from quilo_backend.models.evaluation import Criterion, CRITERION_LABELS, CRITERION_WEIGHTS, TOTAL_WEIGHT
from quilo_backend.schemas import (
    CriteriaResponse,
    CriterionResponse,
    ItemEnvelope,
    ListEnvelope,
    RankingEntryResponse,
    StatisticsResponse,
)
from quilo_backend.services import ranking_service
from quilo_backend.services.statistics_service import compute_statistics

router = APIRouter()


@router.get("/ranking", response_model=ListEnvelope[RankingEntryResponse])
async def get_ranking(db: AsyncSession = Depends(get_db)):
    """Current ranking of every dish, best first; recomputed on each request"""
    ranking = await ranking_service.get_ranking(db)
    return ListEnvelope[RankingEntryResponse](
        data=[RankingEntryResponse.model_validate(entry) for entry in ranking],
        total=len(ranking),
    )


@router.get("/estatisticas", response_model=ItemEnvelope[StatisticsResponse])
async def get_statistics(session_factory: async_sessionmaker = Depends(get_session_factory)):
    stats = await compute_statistics(session_factory)
    return ItemEnvelope[StatisticsResponse](data=StatisticsResponse.model_validate(stats))


@router.get("/criterios", response_model=CriteriaResponse)
async def list_criteria():
    """Scoring criteria with their weights and the accepted score range"""
    settings = get_settings()
    return CriteriaResponse(
        data=[
            CriterionResponse(value=c.value, label=CRITERION_LABELS[c], weight=CRITERION_WEIGHTS[c])
            for c in Criterion
        ],
        total_weight=TOTAL_WEIGHT,
        score_min=settings.SCORE_MIN,
        score_max=settings.SCORE_MAX,
    )
