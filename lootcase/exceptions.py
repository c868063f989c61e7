from fastapi import status


class GameError(Exception):
    """Base class for errors reported to the caller as {"message": ...}."""

    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class NotFoundError(GameError):
    status_code = status.HTTP_404_NOT_FOUND


class CaseNotFoundError(NotFoundError):
    pass


class UserNotFoundError(NotFoundError):
    pass


class ValidationError(GameError):
    status_code = status.HTTP_400_BAD_REQUEST


class InvalidQuantityError(ValidationError):
    pass


class InsufficientFundsError(GameError):
    status_code = status.HTTP_400_BAD_REQUEST


class EmptyCaseError(GameError):
    status_code = status.HTTP_409_CONFLICT


class InternalError(GameError):
    def __init__(self, message: str = "Internal server error"):
        super().__init__(message)


class NotConfiguredError(GameError):
    status_code = status.HTTP_501_NOT_IMPLEMENTED
