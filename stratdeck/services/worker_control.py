"""Control hooks for the external strategy worker."""

import logging

import httpx

from stratdeck.config import settings

logger = logging.getLogger(__name__)


class WorkerControlError(Exception):
    """Restart webhook call failed."""


class WorkerNotConfigured(WorkerControlError):
    pass


async def restart_worker() -> None:
    """POST to the configured restart webhook."""
    url = settings.worker_restart_url
    if not url:
        raise WorkerNotConfigured("Worker restart URL is not configured")

    try:
        async with httpx.AsyncClient(timeout=settings.worker_restart_timeout) as client:
            resp = await client.post(url)
            resp.raise_for_status()
    except httpx.HTTPStatusError as e:
        raise WorkerControlError(f"Restart failed: {e.response.status_code} {e.response.reason_phrase}") from e
    except httpx.HTTPError as e:
        raise WorkerControlError(f"Restart failed: {e}") from e

    logger.info("Worker restart initiated")
