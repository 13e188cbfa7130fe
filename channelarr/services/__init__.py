"""Service layer - channel lookups wired to the schedule engine."""

from channelarr.services.schedule import (
    ScheduleService,
    create_schedule_service,
    get_schedule_service,
    reset_schedule_service,
)

__all__ = [
    "ScheduleService",
    "create_schedule_service",
    "get_schedule_service",
    "reset_schedule_service",
]
