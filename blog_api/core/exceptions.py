"""
Типизированные ошибки сервисного слоя.

Каждая ошибка несет HTTP статус, в который ее переводит
обработчик исключений приложения.
"""


class BlogError(Exception):
    """Базовая ошибка блога."""

    status_code = 500

    def __init__(self, message: str = "Server Error"):
        super().__init__(message)
        self.message = message


class ValidationError(BlogError):
    """Отсутствуют или некорректны обязательные поля."""

    status_code = 400


class ConflictError(BlogError):
    """Нарушено ограничение уникальности или сущность используется."""

    status_code = 400


class NotFoundError(BlogError):
    status_code = 404


class ForbiddenError(BlogError):
    status_code = 403


class AuthenticationError(BlogError):
    status_code = 401
