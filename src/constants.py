"""Application-wide constants.

This module centralizes all magic numbers and literal protocol values
to ensure a single source of truth and easier maintenance.
"""

# =============================================================================
# Facebook API
# =============================================================================

# Facebook Graph API version
FACEBOOK_GRAPH_API_VERSION = "v21.0"

# Base URL for Graph API calls
FACEBOOK_GRAPH_API_BASE_URL = "https://graph.facebook.com"

# Timeout for Facebook Graph API calls (seconds)
FACEBOOK_API_TIMEOUT_SECONDS = 10.0

# Max characters of a failed response body kept in logs
FACEBOOK_ERROR_BODY_LOG_CHARS = 500

# =============================================================================
# Messaging Types
# =============================================================================

# Within the 24h service window
MESSAGING_TYPE_RESPONSE = "RESPONSE"

# Outside the 24h window, requires an approved non-promotional tag
MESSAGING_TYPE_MESSAGE_TAG = "MESSAGE_TAG"

# Message tags accepted by the Send API at the time of writing.
# Not enforced: the platform is the authority on which tags are valid.
KNOWN_MESSAGE_TAGS = (
    "ACCOUNT_UPDATE",
    "CONFIRMED_EVENT_UPDATE",
    "POST_PURCHASE_UPDATE",
    "HUMAN_AGENT",
)

# =============================================================================
# Webhook
# =============================================================================

# Only page subscriptions are processed
WEBHOOK_OBJECT_PAGE = "page"

# hub.mode value sent during the subscription handshake
WEBHOOK_SUBSCRIBE_MODE = "subscribe"

# Body returned to the platform once an envelope has been processed
WEBHOOK_EVENT_RECEIVED = "EVENT_RECEIVED"

# Auto-reply sent to every captured sender (inside the 24h window)
DEFAULT_AUTO_REPLY_TEXT = "Thanks! You will receive sensor alerts here."

# =============================================================================
# Notify
# =============================================================================

# Sequential fan-out unless configured otherwise
DEFAULT_NOTIFY_MAX_CONCURRENCY = 1

NO_RECIPIENTS_HINT = (
    "Ask user(s) to message the Page first to capture PSID."
)

# =============================================================================
# Server
# =============================================================================

DEFAULT_PORT = 3000

DEFAULT_HOST = "0.0.0.0"

APP_TITLE = "Messenger Sensor Relay"

APP_VERSION = "0.1.0"
