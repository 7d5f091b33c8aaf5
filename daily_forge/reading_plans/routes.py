from datetime import date
from typing import List, Optional
import logging

from fastapi import APIRouter, Depends, HTTPException, Query, Security

from daily_forge.auth.service import get_current_user_id
from daily_forge.core.dependency import get_journal_service, get_scripture_provider
from daily_forge.core.errors import RepositoryError, ScriptureProviderError, UnknownReadingPlanError
from daily_forge.entries.service import JournalService
from daily_forge.reading_plans.catalog import get_devotion, list_plans
from daily_forge.reading_plans.schemas import Devotion, ReadingPlanProgress, ReadingPlanSummary
from daily_forge.reading_plans.scripture import ScriptureProvider

router = APIRouter(prefix="/reading-plans", tags=["Reading Plans"])
logger = logging.getLogger(__name__)


@router.get(
    "",
    response_model=List[ReadingPlanSummary],
    summary="List reading plans",
    description="Return the built-in reading plans.",
)
def list_plans_route() -> List[ReadingPlanSummary]:
    return list_plans()


@router.get(
    "/{plan_id}/progress",
    response_model=ReadingPlanProgress,
    summary="Get reading plan progress",
    description="Resolve the furthest-advanced progress recorded for a plan across all entries.",
    responses={
        200: {"description": "Progress resolved successfully."},
        401: {"description": "Unauthorized."},
        404: {"description": "No progress recorded for this plan."},
        500: {"description": "Failed to resolve progress."},
    },
)
def get_progress_route(
    plan_id: str,
    service: JournalService = Depends(get_journal_service),
    user_id: str = Security(get_current_user_id),
) -> ReadingPlanProgress:
    try:
        progress = service.get_reading_plan_state(user_id, plan_id)
    except RepositoryError as e:
        logger.error(f"Failed to resolve plan {plan_id} for user {user_id}: {e}")
        raise HTTPException(status_code=500, detail="Failed to resolve reading plan progress")
    if progress is None:
        raise HTTPException(status_code=404, detail="No progress recorded for this plan")
    return progress


@router.get(
    "/{plan_id}/devotion",
    response_model=Devotion,
    summary="Get a plan day's devotion",
    description="Fetch the passage for one day of a reading plan from the scripture provider.",
    responses={
        200: {"description": "Devotion retrieved successfully."},
        404: {"description": "Unknown reading plan."},
        502: {"description": "Scripture provider unavailable."},
    },
)
def get_devotion_route(
    plan_id: str,
    day: int = Query(1, ge=1),
    version: Optional[str] = Query(None),
    provider: ScriptureProvider = Depends(get_scripture_provider),
) -> Devotion:
    try:
        return get_devotion(provider, plan_id, day, date.today(), version)
    except UnknownReadingPlanError as e:
        raise HTTPException(status_code=404, detail=str(e))
    except ScriptureProviderError as e:
        logger.error(f"Failed to fetch devotion for plan {plan_id} day {day}: {e}")
        raise HTTPException(status_code=502, detail="Scripture provider unavailable")
