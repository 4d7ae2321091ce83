"""Send messages to Facebook Graph API service."""

import time
from typing import Any

import httpx
import logfire

from src.constants import (
    FACEBOOK_API_TIMEOUT_SECONDS,
    FACEBOOK_ERROR_BODY_LOG_CHARS,
    FACEBOOK_GRAPH_API_BASE_URL,
    FACEBOOK_GRAPH_API_VERSION,
    MESSAGING_TYPE_MESSAGE_TAG,
    MESSAGING_TYPE_RESPONSE,
)

SEND_API_URL = (
    f"{FACEBOOK_GRAPH_API_BASE_URL}/{FACEBOOK_GRAPH_API_VERSION}/me/messages"
)


def build_send_payload(
    recipient_id: str,
    text: str,
    tag: str | None = None,
) -> dict[str, Any]:
    """
    Build a Send API request body.

    Without a tag the message is sent as a RESPONSE (inside the 24h
    window). With a tag it is sent as MESSAGE_TAG, which the platform
    only accepts for approved non-promotional tags such as ACCOUNT_UPDATE.
    """
    payload: dict[str, Any] = {
        "recipient": {"id": recipient_id},
        "message": {"text": text},
    }
    if tag:
        payload["messaging_type"] = MESSAGING_TYPE_MESSAGE_TAG
        payload["tag"] = tag
    else:
        payload["messaging_type"] = MESSAGING_TYPE_RESPONSE
    return payload


def _parse_body(response: httpx.Response) -> dict[str, Any]:
    """Decode the Send API response; non-JSON bodies are wrapped."""
    try:
        data = response.json()
    except ValueError:
        return {"raw": response.text, "status_code": response.status_code}
    if isinstance(data, dict):
        return data
    return {"data": data, "status_code": response.status_code}


async def send_text(
    page_access_token: str,
    recipient_id: str,
    text: str,
    tag: str | None = None,
    *,
    timeout_seconds: float = FACEBOOK_API_TIMEOUT_SECONDS,
) -> dict[str, Any]:
    """
    Send a text message via Facebook Graph API.

    The parsed response body is returned whether or not the platform
    accepted the message. Non-success statuses are logged and never
    raised, so one failing recipient cannot abort a fan-out batch.
    Transport errors (connection, timeout) are logged and re-raised.

    Args:
        page_access_token: Facebook Page access token
        recipient_id: PSID to send the message to
        text: Message text to send
        tag: Message tag for sends outside the 24h window
        timeout_seconds: Request timeout

    Returns:
        Parsed Send API response body
    """
    start_time = time.time()
    messaging_type = MESSAGING_TYPE_MESSAGE_TAG if tag else MESSAGING_TYPE_RESPONSE

    logfire.info(
        "Sending Facebook message",
        recipient_id=recipient_id,
        message_length=len(text),
        messaging_type=messaging_type,
        tag=tag,
        api_version=FACEBOOK_GRAPH_API_VERSION,
    )

    params = {"access_token": page_access_token}
    payload = build_send_payload(recipient_id, text, tag)

    try:
        async with httpx.AsyncClient(timeout=timeout_seconds) as client:
            response = await client.post(SEND_API_URL, params=params, json=payload)
    except httpx.RequestError as e:
        elapsed = time.time() - start_time
        logfire.error(
            "Facebook API request error",
            recipient_id=recipient_id,
            error=str(e),
            error_type=type(e).__name__,
            response_time_ms=elapsed * 1000,
        )
        raise

    elapsed = time.time() - start_time
    data = _parse_body(response)

    if response.is_success:
        logfire.info(
            "Facebook message sent successfully",
            recipient_id=recipient_id,
            status_code=response.status_code,
            message_id=data.get("message_id"),
            response_time_ms=elapsed * 1000,
        )
    else:
        logfire.error(
            "Facebook message send failed",
            recipient_id=recipient_id,
            status_code=response.status_code,
            response_body=response.text[:FACEBOOK_ERROR_BODY_LOG_CHARS],
            response_time_ms=elapsed * 1000,
        )

    return data
