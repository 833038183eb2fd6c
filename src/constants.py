"""Application-wide constants.

This module centralizes the magic numbers and wire-level strings used by
the relay so configuration defaults and tests share a single source of truth.
"""

# =============================================================================
# Facebook API
# =============================================================================

# Facebook Graph API base URL and version used for the Send API
FACEBOOK_GRAPH_API_BASE_URL = "https://graph.facebook.com"
FACEBOOK_GRAPH_API_VERSION = "v17.0"

# messaging_type for replies sent in response to a received message
MESSAGING_TYPE_RESPONSE = "RESPONSE"

# =============================================================================
# HTTP Timeout Configuration
# =============================================================================

# Timeout for Facebook Graph API calls (seconds)
FACEBOOK_API_TIMEOUT_SECONDS = 10.0

# Maximum characters of an upstream response body copied into a log record
MAX_LOGGED_RESPONSE_BODY_CHARS = 500

# =============================================================================
# Webhook
# =============================================================================

DEFAULT_WEBHOOK_PATH = "/webhook"

# Body returned on the verification handshake when the token does not match
INCORRECT_VERIFY_TOKEN_BODY = "Incorrect verify token."

# =============================================================================
# Responder
# =============================================================================

# Template used by the sample responder to echo inbound text
SAMPLE_RESPONSE_TEMPLATE = "response from: {text}"

# =============================================================================
# Server
# =============================================================================

DEFAULT_HOST = "localhost"
DEFAULT_PORT = 8080
