from datetime import date
from typing import Optional
import logging

from fastapi import APIRouter, Depends, HTTPException, Query, Security

from daily_forge.auth.service import get_current_user_id
from daily_forge.core.dependency import get_journal_service
from daily_forge.core.errors import RepositoryError
from daily_forge.entries.service import JournalService
from daily_forge.goals.schemas import GoalsByType

router = APIRouter(prefix="/goals", tags=["Goals"])
logger = logging.getLogger(__name__)


@router.get(
    "/current",
    response_model=GoalsByType,
    summary="Get current goals",
    description="Daily goals of the date plus weekly and monthly goals gathered from its week and month.",
    responses={
        200: {"description": "Goals retrieved successfully."},
        401: {"description": "Unauthorized."},
        500: {"description": "Failed to retrieve goals."},
    },
)
def get_current_goals_route(
    reference_date: Optional[date] = Query(None, alias="date"),
    service: JournalService = Depends(get_journal_service),
    user_id: str = Security(get_current_user_id),
) -> GoalsByType:
    reference_date = reference_date or date.today()
    try:
        return service.get_current_goals(user_id, reference_date)
    except RepositoryError as e:
        logger.error(f"Failed to aggregate goals for user {user_id}: {e}")
        raise HTTPException(status_code=500, detail="Failed to retrieve goals")
