"""
Centralized custom exception definitions for the country catalogue.

Each exception inherits from BaseAppError, which itself extends Werkzeug's
HTTPException, allowing clean integration with Flask's error system and
JSON-formatted API responses.

Domain Groups:
--------------
1. Validation Errors (400)
2. Database Errors (404-503)
3. System Errors (500)
"""

from werkzeug.exceptions import HTTPException


class BaseAppError(HTTPException):
    """Root application error, base for all custom exceptions."""
    code = 500
    description = "Application error"

    def __init__(self, message=None, details=None, code=None):
        super().__init__(description=message or self.description)
        self.message = message or self.description
        self.details = details or {}
        if code:
            self.code = code

    def to_dict(self):
        """Serialize error info into a JSON-safe dictionary."""
        return {
            "status": "error",
            "error": self.__class__.__name__,
            "message": self.message,
            "details": self.details
        }


# ==============================================================================
# 1. VALIDATION ERRORS (HTTP 400)
# ==============================================================================

class ValidationError(BaseAppError):
    """One or more business rules failed; ``errors`` keeps their order."""
    code = 400
    description = "Validation error"

    def __init__(self, errors=None, message=None, details=None):
        self.errors = list(errors or [])
        payload = dict(details or {})
        payload.setdefault("errors", list(self.errors))
        super().__init__(message or self.description, payload)


# ==============================================================================
# 2. DATABASE ERRORS (HTTP 404–503)
# ==============================================================================

class DuplicateKeyError(BaseAppError):
    code = 409
    description = "Duplicate record detected"


class RecordNotFoundError(BaseAppError):
    code = 404
    description = "Requested record not found"


class PersistenceError(BaseAppError):
    """
    Raised when a transaction could not be committed for a store-level
    reason. The transaction is already rolled back when this is raised;
    the driver exception is kept on ``cause``.
    """
    code = 503
    description = "Database operation failed"

    def __init__(self, message=None, details=None, cause=None):
        super().__init__(message, details)
        self.cause = cause
        if cause is not None:
            self.details.setdefault("cause", str(cause))


class UpdateFailedError(PersistenceError):
    description = "Error updating country"


# ==============================================================================
# 3. SYSTEM ERRORS (HTTP 500)
# ==============================================================================

class ConfigurationError(BaseAppError):
    code = 500
    description = "Configuration missing or invalid"
