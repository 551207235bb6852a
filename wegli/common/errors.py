"""Domain errors and failure typing."""


class WegliError(Exception):
    """Base class for client failures."""

    error_code = "WEGLI_ERROR"


class ConfigError(WegliError):
    """Raised for invalid or missing configuration."""

    error_code = "CONFIG_ERROR"


class RequestError(WegliError):
    """Raised for transport failures and unexpected HTTP statuses."""

    error_code = "REQUEST_ERROR"

    def __init__(self, message: str, status_code: int | None = None) -> None:
        super().__init__(message)
        self.status_code = status_code


class RetryableRequestError(RequestError):
    """Raised when the API asks the caller to back off (429 or 503)."""

    error_code = "RETRYABLE_REQUEST_ERROR"

    def __init__(self, message: str, status_code: int | None = None, retry_after: float | None = None) -> None:
        super().__init__(message, status_code=status_code)
        self.retry_after = retry_after


class NotFoundError(WegliError):
    """Raised when the API has no matching resource."""

    error_code = "NOT_FOUND"


class DecodeError(WegliError):
    """Raised when a response body is not JSON or not of the expected shape."""

    error_code = "DECODE_ERROR"


class ConversionError(WegliError, ValueError):
    """Raised when a raw value cannot be converted into its typed form."""

    error_code = "CONVERSION_ERROR"


class DateParseError(ConversionError):
    error_code = "DATE_PARSE_ERROR"

    def __init__(self, field: str, value: object) -> None:
        super().__init__(f"Invalid timestamp in field '{field}': {value!r}")
        self.field = field
        self.value = value


class IoError(WegliError):
    """Raised for local file write, read or decompression failures."""

    error_code = "IO_ERROR"


class ExportExistsError(IoError, FileExistsError):
    """Raised when a download target exists and overwriting was not requested."""

    error_code = "EXPORT_EXISTS"
