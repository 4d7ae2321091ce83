"""Models for the /notify and /status endpoints."""

from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from src.exceptions import InvalidFieldError
from src.models.messenger import _as_str


class NotifyRequest(BaseModel):
    """Alert request posted by the sensor device.

    Integers are normalised to strings the same way webhook ids are.
    Empty strings count as absent, any other non-null type is rejected.
    """

    text: str | None = None
    psid: str | None = Field(default=None, description="Single explicit recipient")
    tag: str | None = Field(
        default=None, description="Message tag for sends outside the 24h window"
    )

    @classmethod
    def from_payload(cls, payload: Any) -> "NotifyRequest":
        data = payload if isinstance(payload, dict) else {}

        def _field(key: str) -> str | None:
            value = data.get(key)
            if value is None or isinstance(value, str):
                return value or None
            normalised = _as_str(value)
            if normalised is None:
                raise InvalidFieldError(key)
            return normalised

        return cls(text=_field("text"), psid=_field("psid"), tag=_field("tag"))


class NotifyResult(BaseModel):
    """Outcome of a single recipient send."""

    psid: str
    result: dict[str, Any]


class NotifyResponse(BaseModel):
    """Body returned by a successful /notify call."""

    ok: bool = True
    sent: int
    results: list[NotifyResult]


class StatusResponse(BaseModel):
    """Diagnostic snapshot returned by /status."""

    model_config = ConfigDict(populate_by_name=True)

    ok: bool = True
    has_access_token: bool = Field(alias="hasAccessToken")
    has_verify_token: bool = Field(alias="hasVerifyToken")
    recipient_count: int = Field(alias="recipientCount", ge=0)
