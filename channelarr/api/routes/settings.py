"""Schedule settings endpoints."""

from fastapi import APIRouter, HTTPException, status

from channelarr.api.models import ScheduleSettingsModel, ScheduleSettingsUpdate
from channelarr.database import get_db

router = APIRouter()


@router.get("/settings/schedule", response_model=ScheduleSettingsModel)
def get_schedule_settings():
    """Get schedule generation settings."""
    from channelarr.database.settings import get_schedule_settings

    with get_db() as conn:
        return ScheduleSettingsModel(**get_schedule_settings(conn))


@router.put("/settings/schedule", response_model=ScheduleSettingsModel)
def update_schedule_settings(update: ScheduleSettingsUpdate):
    """Update schedule generation settings.

    Cache TTL and enrichment timeout apply to the next schedule service,
    so the current one is dropped.
    """
    from channelarr.database.settings import update_schedule_settings
    from channelarr.services import reset_schedule_service

    updates = {k: v for k, v in update.model_dump().items() if v is not None}
    if not updates:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="No fields to update")

    with get_db() as conn:
        settings = update_schedule_settings(conn, updates)
    reset_schedule_service()
    return ScheduleSettingsModel(**settings)
