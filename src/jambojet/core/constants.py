"""Core constants shared across the request layer."""

# HTTP status codes
HTTP_BAD_REQUEST = 400
HTTP_ERROR_THRESHOLD = 400

# Security and redaction
REDACTED = "[REDACTED]"
SUBSCRIPTION_KEY_HEADER = "Ocp-Apim-Subscription-Key"
MASK_MIN_KEY_LENGTH = 13

# Upstream defaults
DEFAULT_BASE_URL = "https://jmtest.booking.jambojet.com/jm/dotrez/"
DEFAULT_TIMEOUT_SECONDS = 30.0
DEFAULT_RETRY_ATTEMPTS = 3
