"""Constants and defaults.

Note: Keep constants here to avoid magic numbers spread across code.
"""

from datetime import time

DEFAULT_OFFICE_START = time(10, 0)
DEFAULT_OFFICE_END = time(18, 0)

PUNCH_TIMESTAMP_FORMAT = "%Y-%m-%d %H:%M:%S"
ISO_TIMESTAMP_HINT = "yyyy-MM-dd'T'HH:mm:ss"

DEFAULT_TOKEN_EXPIRATION_SECONDS = 24 * 60 * 60
DEFAULT_TOKEN_CACHE_TTL_SECONDS = 15 * 60
DEFAULT_TOKEN_CACHE_SIZE = 10_000

DEFAULT_LOGIN_MAX_ATTEMPTS = 5
DEFAULT_LOGIN_LOCKOUT_SECONDS = 15 * 60
DEFAULT_LOGIN_TRACKED_KEYS = 100_000

DEFAULT_MAX_UPLOAD_BYTES = 5 * 1024 * 1024
ALLOWED_IMAGE_TYPES = frozenset({"image/jpeg", "image/jpg", "image/png"})

DEFAULT_HISTORY_HOURS = 24

LOCATION_LATEST_TOPIC = "/topic/location.latest"
LOCATION_USER_TOPIC_PREFIX = "/topic/location.user."
