"""API route modules."""

from channelarr.api.routes import channels, library, schedule, settings

ROUTERS = [channels.router, schedule.router, library.router, settings.router]

__all__ = ["ROUTERS"]
