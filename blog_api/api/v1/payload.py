"""
Разбор тела запроса для эндпоинтов, принимающих JSON или multipart.
"""

from typing import Any, Dict, Iterable, Optional, Tuple, Type, TypeVar

from fastapi import Request
from pydantic import BaseModel
from pydantic import ValidationError as PydanticValidationError
from starlette.datastructures import UploadFile

from blog_api.core.exceptions import ValidationError

SchemaT = TypeVar("SchemaT", bound=BaseModel)

# Поля формы, которые могут повторяться: повтор дает список,
# одиночное значение остается строкой (теги через запятую)
LIST_FIELDS = {"tags"}


def format_errors(errors: Iterable[dict]) -> str:
    """Собрать ошибки pydantic в одно сообщение: 'title: ..., content: ...'."""
    messages = []
    for error in errors:
        loc = ".".join(str(part) for part in error.get("loc", ()) if part not in ("body", "query", "path"))
        messages.append(f"{loc}: {error['msg']}" if loc else error["msg"])
    return ", ".join(messages)


async def read_payload(
    request: Request, file_field: Optional[str] = None
) -> Tuple[Dict[str, Any], Optional[UploadFile]]:
    """
    Прочитать тело запроса как словарь.

    multipart/form-data и urlencoded формы разбираются в словарь,
    файл из поля file_field возвращается отдельно. Иначе тело
    читается как JSON объект.
    """
    content_type = request.headers.get("content-type", "")

    if content_type.startswith(("multipart/form-data", "application/x-www-form-urlencoded")):
        form = await request.form()
        payload: Dict[str, Any] = {}
        upload = None
        for key in form.keys():
            values = form.getlist(key)
            if key == file_field:
                candidate = values[0]
                if isinstance(candidate, UploadFile) and candidate.filename:
                    upload = candidate
                continue
            payload[key] = values if key in LIST_FIELDS and len(values) > 1 else values[0]
        return payload, upload

    body = await request.body()
    if not body:
        return {}, None
    try:
        payload = await request.json()
    except ValueError:
        raise ValidationError("Malformed JSON body")
    if not isinstance(payload, dict):
        raise ValidationError("Request body must be a JSON object")
    return payload, None


def parse_schema(schema: Type[SchemaT], payload: Dict[str, Any]) -> SchemaT:
    """Проверить словарь по схеме; ошибки превращаются в ValidationError (400)."""
    try:
        return schema.model_validate(payload)
    except PydanticValidationError as exc:
        raise ValidationError(format_errors(exc.errors())) from exc
