import json
from typing import Type, TypeVar

from fastapi import Request
from pydantic import BaseModel
from pydantic import ValidationError as PydanticValidationError

from app.core.exceptions import BadRequestError, ValidationError

ModelT = TypeVar("ModelT", bound=BaseModel)


def validate_query(schema: Type[ModelT]):
    """
    Build a dependency that parses the query string with ``schema``.

    Empty values (``?name_like=``) count as absent. The normalized model is
    stored on ``request.state.validated`` and returned; violations become a
    ValidationError for the central handler.
    """
    def _validate(request: Request) -> ModelT:
        raw = {key: value for key, value in request.query_params.items() if value != ""}
        try:
            parsed = schema.model_validate(raw)
        except PydanticValidationError as e:
            raise ValidationError(
                "Invalid query parameters",
                errors=e.errors(include_url=False, include_context=False),
            )

        request.state.validated = parsed
        return parsed

    return _validate


async def require_json_object(request: Request) -> dict:
    """Reject bodies that are not a JSON object (e.g. a bare string or array)."""
    try:
        body = await request.json()
    except (json.JSONDecodeError, UnicodeDecodeError):
        raise BadRequestError("Request body must be a JSON object")

    if not isinstance(body, dict):
        raise BadRequestError("Request body must be a JSON object")
    return body
