from typing import Any, TypeVar

from pydantic import BaseModel
from pydantic import ValidationError as PydanticValidationError

from app.core.errors import ValidationError

ModelT = TypeVar("ModelT", bound=BaseModel)


def validate_body(schema: type[ModelT], payload: Any) -> ModelT:
    """
    Валидирует тело запроса схемой, выбранной в обработчике (например, по роли).

    Ошибки pydantic приводятся к тому же виду, что и у FastAPI: loc/msg/type.
    """
    try:
        return schema.model_validate(payload)
    except PydanticValidationError as e:
        raise ValidationError(
            [
                {"loc": ["body", *err["loc"]], "msg": err["msg"], "type": err["type"]}
                for err in e.errors()
            ]
        ) from e
