# type: ignore
# pyright: reportMissingImports=false, reportGeneralTypeErrors=false
"""
Error taxonomy.

Every failure the service reports to a client is one of these classes. Each
carries the HTTP status it maps to and a short message that is safe to show
to API consumers; driver and connection details stay in the server log.
4xx means the caller must change the request, 5xx means it may retry.
"""


class LogbookError(Exception):
    status_code: int = 500
    code: str = "internal_server_error"
    message: str = "internal server error"

    def __init__(self, message: str = None):
        super().__init__(message or self.message)
        self.message = message or self.message


class ConfigurationError(LogbookError):
    code = "configuration_error"
    message = "storage is not configured"


class ConnectivityError(LogbookError):
    code = "storage_unavailable"
    message = "storage unavailable"


class StorageError(LogbookError):
    code = "storage_error"
    message = "storage error"


class BadRequestError(LogbookError):
    status_code = 400
    code = "invalid_payload"
    message = "invalid payload"


class MissingFieldsError(BadRequestError):
    code = "missing_fields"
    message = "missing required fields"


class InvalidTimestampError(BadRequestError):
    code = "invalid_occurred_at"
    message = "invalid occurred_at"


class DeadlineExceededError(StorageError):
    code = "deadline_exceeded"
    message = "request deadline exceeded"
