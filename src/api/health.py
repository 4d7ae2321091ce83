"""Liveness and diagnostic endpoints."""

from fastapi import APIRouter, Depends
from fastapi.responses import PlainTextResponse

from src.api.dependencies import get_recipient_registry
from src.config import Settings, get_settings
from src.db.recipient_registry import RecipientStore
from src.models.notify_models import StatusResponse

router = APIRouter()


@router.get("/", response_class=PlainTextResponse)
def root():
    """Root liveness check."""
    return "OK"


@router.get("/health")
def health():
    """Health check for load balancers."""
    return {"status": "ok"}


@router.get("/status")
def status(
    settings: Settings = Depends(get_settings),
    registry: RecipientStore = Depends(get_recipient_registry),
):
    """Configuration presence and registry size. Never exposes secrets."""
    return StatusResponse(
        has_access_token=settings.has_access_token,
        has_verify_token=settings.has_verify_token,
        recipient_count=registry.size(),
    ).model_dump(by_alias=True)
