"""
Error taxonomy raised by the service layer.

Every error maps to one HTTP status; the API layer renders them as
``{"error": message}`` bodies.
"""


class LifelinkError(Exception):
    status_code = 500

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message

    def to_body(self) -> dict:
        return {"error": self.message}


class BadRequestError(LifelinkError):
    status_code = 400


class UnauthorizedError(LifelinkError):
    status_code = 401


class ForbiddenError(LifelinkError):
    """Raised when a receiver asks for donors before being approved."""

    status_code = 403

    def __init__(self, message: str, status: str):
        super().__init__(message)
        self.status = status

    def to_body(self) -> dict:
        return {"status": self.status, "message": self.message}


class NotFoundError(LifelinkError):
    status_code = 404


class ConflictError(LifelinkError):
    status_code = 409
