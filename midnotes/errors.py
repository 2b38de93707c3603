"""Errors raised by the note services."""


class NoteServiceError(Exception):
    """Base class for failures in the note services."""


class NotFoundError(NoteServiceError):
    """The requested record does not exist."""

    def __init__(self, message: str = "not found") -> None:
        super().__init__(message)


class InvalidInputError(NoteServiceError):
    """The caller supplied input the services cannot accept."""

    def __init__(self, message: str) -> None:
        super().__init__(f"invalid input: {message}")
        self.message = message