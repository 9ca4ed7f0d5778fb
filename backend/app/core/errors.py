"""
Ошибки предметной области.

Все они ожидаемые: роутеры их не ловят, а обработчики из `app.main`
превращают их в JSON-ответ с нужным статусом.
"""

from typing import Any


class AppError(Exception):
    status_code = 400
    default_message = "Bad request"

    def __init__(self, message: str | None = None):
        self.message = message or self.default_message
        super().__init__(self.message)


class ValidationError(AppError):
    """Некорректный ввод. Несёт список ошибок по полям."""

    status_code = 422
    default_message = "Validation failed"

    def __init__(self, errors: list[dict[str, Any]]):
        super().__init__()
        self.errors = errors

    @classmethod
    def for_field(cls, field: str, msg: str, *, type_: str = "value_error"):
        return cls([{"loc": ["body", field], "msg": msg, "type": type_}])


class AuthorizationError(AppError):
    status_code = 403
    default_message = "This action is unauthorized."


class NotFoundError(AppError):
    status_code = 404
    default_message = "Not found"


class IntegrityError(AppError):
    status_code = 409
    default_message = "Integrity violation"
