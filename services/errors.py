"""Ошибки сервисного слоя, которые видит вызывающая сторона.

HTTP-слой превращает их в ответ ``{"statusCode": ..., "message": ...}``.
"""


class ServiceError(Exception):
    status_code = 500

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message

    def to_dict(self) -> dict:
        return {"statusCode": self.status_code, "message": self.message}


class BadRequestError(ServiceError):
    status_code = 400


class ForbiddenError(ServiceError):
    status_code = 403


class NotFoundError(ServiceError):
    status_code = 404
