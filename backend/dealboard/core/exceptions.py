"""Custom exception classes for the application."""


class DealboardException(Exception):
    """Base exception for all Dealboard errors."""

    status_code = 500
    code = "internal_error"

    def __init__(self, message: str = "An unexpected error occurred"):
        self.message = message
        super().__init__(self.message)


class NotFoundError(DealboardException):
    """Raised when a requested resource is not found."""

    status_code = 404
    code = "not_found"

    def __init__(self, resource: str, identifier: str):
        super().__init__(f"{resource} with identifier '{identifier}' not found")


class Unauthenticated(DealboardException):
    """Raised when an action needs a signed-in user and there is none."""

    status_code = 401
    code = "unauthenticated"

    def __init__(self, message: str = "Please sign in to continue"):
        super().__init__(message)


class PermissionDenied(DealboardException):
    """Raised when the signed-in user lacks the role an action requires."""

    status_code = 403
    code = "permission_denied"

    def __init__(self, required_role: str):
        super().__init__(f"This action requires the '{required_role}' role")


class PersistenceError(DealboardException):
    """Raised when a write against the database fails."""

    status_code = 503
    code = "persistence_error"

    def __init__(self, operation: str, message: str):
        self.operation = operation
        super().__init__(f"{operation} failed: {message}")
