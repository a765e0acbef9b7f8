"""Errors raised at the backend boundary."""


class ApiError(Exception):
    """A failed backend operation.

    The taxonomy is flat: transport, validation and backend-logic failures all
    surface as an ApiError carrying a human-readable message.
    """

    def __init__(self, message: str, status: int = 500) -> None:
        super().__init__(message)
        self.message = message
        self.status = status
