"""Alert trigger endpoint called by the sensor device.

POST /notify
    {"text": "Sensor alert: 800 ppm", "psid": "optional", "tag": "ACCOUNT_UPDATE"}
"""

import logging

from fastapi import APIRouter, Depends, Request
from fastapi.responses import JSONResponse

from src.api.dependencies import get_notifier
from src.exceptions import NotifyValidationError
from src.models.notify_models import NotifyRequest, NotifyResponse
from src.services.notifier import Notifier

logger = logging.getLogger(__name__)
router = APIRouter()


@router.post("")
async def notify(
    request: Request,
    notifier: Notifier = Depends(get_notifier),
):
    """Send an alert to one explicit PSID or to every registered recipient."""
    try:
        try:
            body = await request.json()
        except ValueError:
            body = None
        notify_request = NotifyRequest.from_payload(body)

        outcome = await notifier.notify(
            text=notify_request.text,
            psid=notify_request.psid,
            tag=notify_request.tag,
        )
    except NotifyValidationError as e:
        logger.info("Rejected notify request: %s", e.error_code)
        content = {"error": e.error_code}
        if e.detail:
            content["detail"] = e.detail
        return JSONResponse(status_code=400, content=content)
    except Exception as e:
        # Details stay in the server log, never in the response body
        logger.error("Error processing notify request: %s", e, exc_info=True)
        return JSONResponse(status_code=500, content={"error": "internal_error"})

    return NotifyResponse(sent=outcome.sent, results=outcome.results).model_dump()
