"""Domain errors raised by the service layer.

Routers never catch these; the handlers registered in ``lms.main`` turn
them into the ``{status, message, data}`` envelope with the matching code.
"""

from fastapi import status


class LMSError(Exception):
    """Base class for expected, user-facing failures."""

    status_code: int = status.HTTP_400_BAD_REQUEST

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class BadRequestError(LMSError):
    """Invalid input or a violated business rule."""

    status_code = status.HTTP_400_BAD_REQUEST


class RegistrationError(BadRequestError):
    """Username or email already taken."""


class UnauthorizedError(LMSError):
    status_code = status.HTTP_401_UNAUTHORIZED


class ForbiddenError(LMSError):
    """Caller is authenticated but may not touch the resource."""

    status_code = status.HTTP_403_FORBIDDEN


class NotFoundError(LMSError):
    status_code = status.HTTP_404_NOT_FOUND


class StorageError(LMSError):
    """The file backend rejected an upload."""

    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
