from datetime import date
from typing import Optional
import logging

from fastapi import APIRouter, Depends, HTTPException, Query, Security

from daily_forge.auth.service import get_current_user_id
from daily_forge.core.dependency import get_journal_service
from daily_forge.core.errors import RepositoryError
from daily_forge.entries.service import JournalService
from daily_forge.stats.schemas import StatsResponse

router = APIRouter(prefix="/stats", tags=["Stats"])
logger = logging.getLogger(__name__)


@router.get(
    "",
    response_model=StatsResponse,
    summary="Get journaling statistics",
    description="Streaks, completion rate and goal completion as of a date (defaults to today).",
    responses={
        200: {"description": "Statistics computed successfully."},
        401: {"description": "Unauthorized."},
        500: {"description": "Failed to compute statistics."},
    },
)
def get_stats_route(
    reference_date: Optional[date] = Query(None, alias="date"),
    service: JournalService = Depends(get_journal_service),
    user_id: str = Security(get_current_user_id),
) -> StatsResponse:
    reference_date = reference_date or date.today()
    try:
        return service.get_stats(user_id, reference_date)
    except RepositoryError as e:
        logger.error(f"Failed to compute stats for user {user_id}: {e}")
        raise HTTPException(status_code=500, detail="Failed to compute statistics")
