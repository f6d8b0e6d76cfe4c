# qrlink/core/errors.py


class AppError(Exception):
    """
    Base class for errors that map to an HTTP status.
    The message is returned to the client as {"message": ...}.
    """
    status_code = 500

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class ValidationError(AppError):
    status_code = 400


class ConflictError(AppError):
    status_code = 400


class AuthError(AppError):
    status_code = 401


class NotFoundError(AppError):
    status_code = 404


class RenderError(AppError):
    status_code = 500


class ShortCodeGenerationError(AppError):
    status_code = 500
