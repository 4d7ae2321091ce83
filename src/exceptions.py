"""Exception hierarchy for the relay."""

from src.constants import NO_RECIPIENTS_HINT


class RelayError(Exception):
    """Base exception for relay errors."""

    pass


class UnsupportedWebhookObjectError(RelayError):
    """Raised when a webhook envelope is not from a page subscription."""

    def __init__(self, object_type: str | None):
        self.object_type = object_type
        super().__init__(f"Unsupported webhook object: {object_type!r}")


class SenderNotConfiguredError(RelayError):
    """Raised when a send is attempted without a page access token."""

    pass


class NotifyValidationError(RelayError):
    """Base for /notify input errors surfaced to the caller as 400."""

    error_code: str = "invalid_request"
    detail: str | None = None

    def __init__(self, message: str | None = None):
        super().__init__(message or self.error_code)


class TextRequiredError(NotifyValidationError):
    """Raised when a notify request carries no text."""

    error_code = "text required"


class NoRecipientsError(NotifyValidationError):
    """Raised when notify resolves to an empty recipient set."""

    error_code = "no recipients"
    detail = NO_RECIPIENTS_HINT


class InvalidFieldError(NotifyValidationError):
    """Raised when a notify field is neither a string nor an integer."""

    error_code = "invalid field"

    def __init__(self, field: str):
        self.field = field
        self.detail = f"{field} must be a string"
        super().__init__(f"Invalid notify field: {field}")
