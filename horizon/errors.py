"""Errors raised by graph and workspace operations.

Each error carries the HTTP status the API layer answers with.
"""


class HorizonError(Exception):
    """Base class for errors surfaced to the caller."""

    status_code = 500

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class NotFoundError(HorizonError):
    """A workspace, node or parent does not exist or is inactive."""

    status_code = 404


class ForbiddenError(HorizonError):
    """The caller lacks the required role on the workspace."""

    status_code = 403


class InvalidRequestError(HorizonError):
    """Missing required fields or a structurally impossible change."""

    status_code = 400


class ConflictError(HorizonError):
    """A client-supplied id collides with an existing node."""

    status_code = 409
