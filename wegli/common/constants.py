"""Application constants."""

DEFAULT_BASE_URL = "https://www.weg.li/api"
API_KEY_HEADER = "X-API-KEY"
USER_AGENT = "wegli-client/0.3 (+https://www.weg.li)"
RETRYABLE_STATUS_CODES = frozenset({429, 503})
DEFAULT_ARCHIVE_NAME = "export.zip"
DOWNLOAD_CHUNK_SIZE = 1024 * 128
ENV_API_URL = "WEGLI_API_URL"
ENV_API_TOKEN = "WEGLI_API_TOKEN"
EXIT_SUCCESS = 0
EXIT_NOT_FOUND = 10
EXIT_HARD_FAIL = 20
JSON_LOG_FIELDS = (
    "timestamp",
    "command",
    "event",
    "status",
    "attempt",
    "duration_ms",
    "rows",
    "error_code",
    "message",
)
