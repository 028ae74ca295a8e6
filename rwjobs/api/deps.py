from __future__ import annotations

from fastapi import HTTPException, Request

from rwjobs.scheduler import IngestScheduler


def get_scheduler(request: Request) -> IngestScheduler:
    """FastAPI dependency returning the app's :class:`IngestScheduler`.

    The instance is attached to ``app.state`` by :func:`rwjobs.api.main.create_app`
    (or its lifespan hook), never stored in a module global.

    Usage in route handlers:
        def handler(scheduler: IngestScheduler = Depends(get_scheduler)):
            ...
    """
    scheduler = getattr(request.app.state, "scheduler", None)
    if scheduler is None:
        raise HTTPException(status_code=503, detail="Scheduler not initialised")
    return scheduler


__all__ = ["get_scheduler"]
