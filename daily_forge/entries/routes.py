from datetime import date
from typing import List
import logging

from fastapi import APIRouter, Depends, HTTPException, Security

from daily_forge.auth.service import get_current_user_id
from daily_forge.core.dependency import get_journal_service
from daily_forge.core.errors import RepositoryError
from daily_forge.entries.schemas import DayEntry, DayStateUpdate
from daily_forge.entries.service import JournalService

router = APIRouter(prefix="/entries", tags=["Entries"])
logger = logging.getLogger(__name__)


@router.get(
    "",
    response_model=List[DayEntry],
    summary="Get all day entries",
    description="Retrieve every day entry of the authenticated user, newest first.",
    responses={
        200: {"description": "Entries retrieved successfully."},
        401: {"description": "Unauthorized."},
        500: {"description": "Failed to retrieve entries."},
    },
)
def get_entries_route(
    service: JournalService = Depends(get_journal_service),
    user_id: str = Security(get_current_user_id),
) -> List[DayEntry]:
    try:
        return service.get_entries(user_id)
    except RepositoryError as e:
        logger.error(f"Error fetching entries for user {user_id}: {e}")
        raise HTTPException(status_code=500, detail="Failed to fetch entries")


@router.get(
    "/{entry_date}",
    response_model=DayEntry,
    summary="Get the entry for a date",
    description="Retrieve the day entry stored for a `YYYY-MM-DD` date.",
    responses={
        200: {"description": "Entry retrieved successfully."},
        401: {"description": "Unauthorized."},
        404: {"description": "Entry not found."},
        500: {"description": "Failed to retrieve entry."},
    },
)
def get_entry_route(
    entry_date: date,
    service: JournalService = Depends(get_journal_service),
    user_id: str = Security(get_current_user_id),
) -> DayEntry:
    try:
        entry = service.get_entry(user_id, entry_date)
    except RepositoryError as e:
        logger.error(f"Error retrieving entry {entry_date} for user {user_id}: {e}")
        raise HTTPException(status_code=500, detail="Failed to retrieve entry")
    if entry is None:
        raise HTTPException(status_code=404, detail="Entry not found")
    return entry


@router.post(
    "/{entry_date}",
    response_model=DayEntry,
    summary="Save a day",
    description="Apply a partial day state to the entry for a date and persist it.",
    responses={
        200: {"description": "Entry saved successfully."},
        401: {"description": "Unauthorized."},
        500: {"description": "Failed to save entry."},
    },
)
def save_day_route(
    entry_date: date,
    update: DayStateUpdate,
    service: JournalService = Depends(get_journal_service),
    user_id: str = Security(get_current_user_id),
) -> DayEntry:
    try:
        return service.save_day(user_id, entry_date, update)
    except RepositoryError as e:
        logger.error(f"Error saving entry {entry_date} for user {user_id}: {e}")
        raise HTTPException(status_code=500, detail="Failed to save entry")
