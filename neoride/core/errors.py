"""
Error taxonomy

Every failure a request can end in is one of these exceptions. Each carries
the HTTP status it maps to and knows how to render its JSON body, so the
exception handlers in main.py stay one-liners.
"""
from typing import Any, Dict, List, Optional


class NeoRideError(Exception):
    """Base class for errors that surface as JSON error responses."""

    status_code: int = 500
    code: str = "InternalError"

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message

    def to_response(self) -> Dict[str, Any]:
        return {"error": self.message}


# ============================================================================
# Connection errors
# ============================================================================

class ConfigurationMissingError(NeoRideError):
    """The database connection string is not configured. Never retried."""

    code = "ConfigurationMissing"

    def __init__(self, message: str = "MONGODB_URI environment variable is not set"):
        super().__init__(message)

    def to_response(self) -> Dict[str, Any]:
        return {"error": self.message, "code": self.code}


class DatabaseConnectionError(NeoRideError):
    """A single connection attempt was refused or timed out."""

    code = "ConnectionRefused"

    def to_response(self) -> Dict[str, Any]:
        return {"error": self.message, "code": self.code}


class ConnectionExhaustedError(DatabaseConnectionError):
    """All connection attempts failed."""

    code = "ConnectionExhausted"

    def __init__(self, attempts: int, last_error: Optional[BaseException] = None):
        message = f"Could not connect to MongoDB after {attempts} attempts"
        if last_error is not None:
            message = f"{message}: {last_error}"
        super().__init__(message)
        self.attempts = attempts

    def to_response(self) -> Dict[str, Any]:
        body = super().to_response()
        body["attempts"] = self.attempts
        return body


# ============================================================================
# Caller-fixable errors
# ============================================================================

class MissingFieldsError(NeoRideError):
    status_code = 400
    code = "ValidationMissingField"

    def __init__(self, required: List[str], missing: List[str], received: List[str]):
        super().__init__("Missing required fields")
        self.required = required
        self.missing = missing
        self.received = received

    def to_response(self) -> Dict[str, Any]:
        return {
            "error": self.message,
            "required": self.required,
            "missing": self.missing,
            "received": self.received,
        }


class DocumentValidationError(NeoRideError):
    status_code = 400
    code = "ValidationError"

    def __init__(self, details: Dict[str, str]):
        super().__init__("Validation error")
        self.details = details

    def to_response(self) -> Dict[str, Any]:
        return {"error": self.message, "details": self.details}


class DuplicateKeyError(NeoRideError):
    status_code = 409
    code = "DuplicateKey"

    def __init__(self, entity: str, field: Optional[str]):
        super().__init__(f"{entity} already exists")
        self.entity = entity
        self.field = field

    def to_response(self) -> Dict[str, Any]:
        return {"error": self.message, "field": self.field}


class NotFoundError(NeoRideError):
    status_code = 404
    code = "NotFound"

    def __init__(self, entity: str, external_id: str):
        super().__init__(f"{entity} not found")
        self.entity = entity
        self.external_id = external_id


# ============================================================================
# Storage errors
# ============================================================================

class StorageError(NeoRideError):
    """Any other storage failure; the raw driver message is passed through."""

    code = "StorageError"
