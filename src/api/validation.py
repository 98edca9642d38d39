"""Request validation error handling.

FastAPI reports invalid requests as 422 with pydantic's error list. This API
answers 400 with one `{type, msg, path, location}` entry per invalid field.
"""

import logging

from fastapi import Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from pydantic import BaseModel

logger = logging.getLogger(__name__)

INVALID_VALUE = "Invalid value"


def _field_error(location: str, path) -> dict:
    return {
        "type": "field",
        "msg": INVALID_VALUE,
        "path": ".".join(str(part) for part in path),
        "location": location,
    }


def required_body_fields(request: Request) -> list[str]:
    """Wire names of the required fields of the matched route's body model."""
    body_field = getattr(request.scope.get("route"), "body_field", None)
    model = getattr(getattr(body_field, "field_info", None), "annotation", None)
    if not (isinstance(model, type) and issubclass(model, BaseModel)):
        return []
    return [
        field.alias or name
        for name, field in model.model_fields.items()
        if field.is_required()
    ]


def to_field_errors(errors, body_fields: list[str] | None = None) -> list[dict]:
    """Collapse pydantic errors into one entry per field, in report order.

    A missing body counts as an empty object: when `body_fields` is given,
    each of them is reported instead of a single whole-body entry.
    """
    field_errors: dict[tuple, dict] = {}
    for error in errors:
        location, *path = error.get("loc") or ("body",)
        if location == "body" and not path and error.get("type") == "missing" and body_fields:
            for name in body_fields:
                field_errors.setdefault(("body", name), _field_error("body", [name]))
            continue
        field_errors.setdefault((location, *path), _field_error(location, path))
    return list(field_errors.values())


async def validation_exception_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    errors = to_field_errors(exc.errors(), required_body_fields(request))
    logger.info("Request validation failed", extra={
        "path": request.url.path,
        "fields": [e["path"] for e in errors],
    })
    return JSONResponse(status_code=status.HTTP_400_BAD_REQUEST, content={"errors": errors})
