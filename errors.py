"""Error taxonomy shared by the store, the services and the HTTP layer.

Every error carries the HTTP status it maps to; ``main.py`` registers one
handler that turns any of them into ``{"error": message}``.
"""

from __future__ import annotations


class ProblemServiceError(Exception):
    status_code = 500
    public_message = "Internal server error"

    def __init__(self, message: str | None = None):
        super().__init__(message or self.public_message)

    @property
    def message(self) -> str:
        # 5xx details stay in the log, clients get the generic text
        if self.status_code >= 500:
            return self.public_message
        return str(self)


class ValidationError(ProblemServiceError):
    status_code = 400
    public_message = "Missing required fields"


class NotFoundError(ProblemServiceError):
    status_code = 404
    public_message = "Problem session not found"


class SessionClosedError(ProblemServiceError):
    status_code = 409
    public_message = "Problem session already has a correct answer"


class ExternalServiceError(ProblemServiceError):
    public_message = "Language model request failed"


class GenerationParseError(ExternalServiceError):
    public_message = "Failed to parse generated problem"


class StorageError(ProblemServiceError):
    public_message = "Database request failed"
