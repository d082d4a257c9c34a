"""
Domain errors raised by the service layer.

Each error carries the HTTP status it is rendered with at the request boundary
(see ``prodigy.main``). Services never build HTTP responses themselves.
"""
from fastapi import status


class AppError(Exception):
    status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR
    default_message: str = "Internal server error"

    def __init__(self, message: str = None):
        self.message = message or self.default_message
        super().__init__(self.message)


class ValidationError(AppError):
    status_code = status.HTTP_400_BAD_REQUEST
    default_message = "Invalid request data"


class DuplicateEmail(AppError):
    status_code = status.HTTP_400_BAD_REQUEST
    default_message = "User already exists"


class DuplicateRequest(AppError):
    status_code = status.HTTP_400_BAD_REQUEST
    default_message = "Request already sent"


class AlreadyHandled(AppError):
    status_code = status.HTTP_400_BAD_REQUEST
    default_message = "Request already handled"


class Unauthorized(AppError):
    status_code = status.HTTP_401_UNAUTHORIZED
    default_message = "Unauthorized"


class InvalidCredentials(AppError):
    status_code = status.HTTP_401_UNAUTHORIZED
    default_message = "Invalid credentials"


class Forbidden(AppError):
    status_code = status.HTTP_403_FORBIDDEN
    default_message = "Access denied"


class NotFound(AppError):
    status_code = status.HTTP_404_NOT_FOUND
    default_message = "Not found"
