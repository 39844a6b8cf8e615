"""
Errors raised by the service layer.

Routes never see adapter errors (SQLAlchemy, storage, OpenAI): services
translate them into one of these, and main.py maps each class to a status code.
"""


class ServiceError(Exception):
    status_code = 500

    def __init__(self, detail: str):
        super().__init__(detail)
        self.detail = detail


class ValidationError(ServiceError):
    """Bad or missing input. Nothing was written."""
    status_code = 400


class ImageProcessingError(ValidationError):
    """The image could not be decoded or brought under the size limit."""


class NotFoundError(ServiceError):
    status_code = 404


class OperationFailedError(ServiceError):
    status_code = 500
