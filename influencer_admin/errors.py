from __future__ import annotations


class AppError(RuntimeError):
    status_code: int = 500

    def __init__(self, message: str, *, status_code: int | None = None) -> None:
        super().__init__(message)
        self.message = message
        if status_code is not None:
            self.status_code = status_code


class ValidationError(AppError):
    status_code = 400

    def __init__(self, message: str, *, field: str | None = None) -> None:
        super().__init__(message)
        self.field = field


class NotFound(AppError):
    status_code = 404


class RemoteUnavailable(AppError):
    """The table store or the commerce API could not be used."""

    status_code = 500


class SignatureInvalid(AppError):
    status_code = 401
