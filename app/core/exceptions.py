class AppError(Exception):
    """
    Base class for every error the API reports to clients.

    Carries the HTTP status code and a human readable message. The
    handlers in main.py are the only place these become responses.
    """
    status_code = 500

    def __init__(self, message: str, status_code: int | None = None):
        super().__init__(message)
        self.message = message
        if status_code is not None:
            self.status_code = status_code


class BadRequestError(AppError):
    """
    Malformed input, an invalid identifier format or a delete that
    would break referential integrity.

    Expected Result: 400 Bad Request
    """
    status_code = 400


class NotFoundError(AppError):
    """
    Raised when an entity looked up by identifier does not exist.

    Expected Result: 404 Not Found
    """
    status_code = 404


class ValidationError(AppError):
    """
    Raised when a query or body does not match its declared schema.

    Expected Result: 422 Unprocessable Entity
    """
    status_code = 422

    def __init__(self, message: str, errors: list | None = None):
        super().__init__(message)
        self.errors = errors or []


class AuthenticationFailed(AppError):
    """
    Raised when a user provides incorrect credentials or an
    invalid/expired/revoked JWT.

    Expected Result: 401 Unauthorized
    """
    status_code = 401


class PasswordVerificationError(AuthenticationFailed):
    """Raised when password hashing or verification fails."""
    pass


class NotAuthorized(AppError):
    """
    Raised when a user is authenticated but does not have permission
    to access a resource (e.g. a non-admin calling an admin route).

    Expected Result: 403 Forbidden
    """
    status_code = 403
