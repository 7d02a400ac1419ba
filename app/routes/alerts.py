import logging

from fastapi import APIRouter
from fastapi.responses import JSONResponse

from worker.main import process_alerts

router = APIRouter()
log = logging.getLogger(__name__)


@router.get("/api/alerts/process")
def process_alerts_route():
    """
    Run one alert pass. Meant to be hit by a scheduler; no auth.
    """
    try:
        processed = process_alerts()
    except Exception as e:
        log.exception("Error processing alerts")
        return JSONResponse(
            {"error": "Failed to process alerts", "details": str(e) or "Unknown error"},
            status_code=500,
        )

    return {"success": True, "processed": processed}
