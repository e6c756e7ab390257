from typing import Dict, List, Optional


class DirectoryError(Exception):
    """Base class for failures the HTTP layer translates into a status code."""

    status_code = 500

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class ValidationFailed(DirectoryError):
    status_code = 400

    def __init__(self, message: str, errors: Optional[List[Dict[str, str]]] = None):
        super().__init__(message)
        self.errors = errors or []

    @classmethod
    def for_field(cls, field: str, message: str) -> "ValidationFailed":
        return cls("Validation error", [{"field": field, "message": message}])


class NotFoundError(DirectoryError):
    status_code = 404


class StateConflictError(DirectoryError):
    # Conflicts are reported as bad requests, same as validation errors
    status_code = 400
