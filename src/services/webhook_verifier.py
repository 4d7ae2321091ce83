"""Webhook subscription handshake (hub.challenge echo)."""

import hmac

from src.constants import WEBHOOK_SUBSCRIBE_MODE


def verify_subscription(
    mode: str | None,
    token: str | None,
    challenge: str | None,
    expected_token: str | None,
) -> str | None:
    """
    Check a subscription handshake and return the challenge to echo.

    Args:
        mode: ``hub.mode`` query value
        token: ``hub.verify_token`` query value
        challenge: ``hub.challenge`` query value
        expected_token: Verify token configured for this process

    Returns:
        The challenge verbatim if the handshake is valid, None otherwise.
        Verification always fails when no verify token is configured.
    """
    if mode != WEBHOOK_SUBSCRIBE_MODE:
        return None
    if not expected_token or token is None or challenge is None:
        return None
    if not hmac.compare_digest(token.encode("utf-8"), expected_token.encode("utf-8")):
        return None
    return challenge
