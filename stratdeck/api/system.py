"""System API: health check and strategy worker control."""

from fastapi import APIRouter, Depends, HTTPException

from stratdeck.api.deps import get_current_user
from stratdeck.services.worker_control import (
    WorkerControlError,
    WorkerNotConfigured,
    restart_worker,
)

router = APIRouter(prefix="/api/system", tags=["system"])


@router.get("/health")
def health_check():
    return {"status": "ok"}


@router.post("/restart-worker", dependencies=[Depends(get_current_user)])
async def restart_strategy_worker():
    """Ask the external strategy worker to restart."""
    try:
        await restart_worker()
    except WorkerNotConfigured as e:
        raise HTTPException(status_code=503, detail=str(e))
    except WorkerControlError as e:
        raise HTTPException(status_code=502, detail=str(e))
    return {"status": "ok", "message": "Worker restart initiated"}
