"""
Request validation

Route validators read the body (JSON or multipart form), check path ids and
attached files, and validate the body against a request schema. Errors are
collected as {field, message} pairs, one per field, and raised together as
ValidationFailed (422).
"""

import json
from dataclasses import dataclass, field
from typing import Any, ClassVar, Dict, List, Optional, Tuple, Type, TypeVar

from fastapi import Request
from pydantic import BaseModel, ConfigDict, ValidationError
from starlette.datastructures import UploadFile

from gamification.core.database import is_object_id
from gamification.core.errors import ValidationFailed

ALLOWED_FILE_TYPES = {
    "image/jpeg",
    "image/jpg",
    "image/png",
    "image/gif",
    "application/pdf",
    "application/msword",
    "application/vnd.openxmlformats-officedocument.wordprocessingml.document",
}

FORM_CONTENT_TYPES = ("multipart/form-data", "application/x-www-form-urlencoded")

FORM_BOOLEANS = {"true": True, "false": False, "1": True, "0": False}

SchemaT = TypeVar("SchemaT", bound="RequestSchema")


class RequestSchema(BaseModel):
    """Base for request bodies; `messages` maps a wire field name to its error message"""
    model_config = ConfigDict(extra="ignore")

    messages: ClassVar[Dict[str, str]] = {}


@dataclass
class ValidatedRequest:
    payload: Optional[BaseModel] = None
    file: Optional[UploadFile] = None
    files: List[UploadFile] = field(default_factory=list)


def decode_json_field(value: Any) -> Any:
    """Form fields carry objects and arrays as JSON text"""
    if isinstance(value, str) and value.strip()[:1] in ("{", "["):
        try:
            return json.loads(value)
        except ValueError:
            return value
    return value


async def read_body(request: Request) -> Tuple[Dict[str, Any], Dict[str, List[UploadFile]]]:
    """
    Read a JSON or form body

    Returns (fields, files). Repeated form keys, and keys ending in "[]",
    become lists.
    """
    content_type = request.headers.get("content-type", "")

    if content_type.startswith(FORM_CONTENT_TYPES):
        form = await request.form()
        data: Dict[str, Any] = {}
        files: Dict[str, List[UploadFile]] = {}
        for key, value in form.multi_items():
            if isinstance(value, UploadFile):
                if value.filename:
                    files.setdefault(key, []).append(value)
                continue
            if key.endswith("[]"):
                data.setdefault(key[:-2], []).append(value)
            elif key in data:
                existing = data[key]
                data[key] = existing + [value] if isinstance(existing, list) else [existing, value]
            else:
                data[key] = value
        return data, files

    raw = await request.body()
    if not raw:
        return {}, {}
    try:
        data = json.loads(raw)
    except ValueError:
        raise ValidationFailed([{"field": "body", "message": "Request body must be valid JSON"}])
    if not isinstance(data, dict):
        raise ValidationFailed([{"field": "body", "message": "Request body must be a JSON object"}])
    return data, {}


def form_bool(value: Any) -> Any:
    """Form bodies carry booleans as text; only true/false/1/0 are booleans"""
    if isinstance(value, str) and value.strip().lower() in FORM_BOOLEANS:
        return FORM_BOOLEANS[value.strip().lower()]
    if isinstance(value, int) and not isinstance(value, bool) and value in (0, 1):
        return bool(value)
    return value


def object_id_error(value: Optional[str], field_name: str, message: str) -> List[Dict[str, str]]:
    if value is None or is_object_id(value):
        return []
    return [{"field": field_name, "message": message}]


def check_file_type(upload: Optional[UploadFile]):
    """Reject an attached file whose MIME type is not allow-listed"""
    if upload is not None and upload.content_type not in ALLOWED_FILE_TYPES:
        raise ValidationFailed([{"field": "file", "message": "Invalid file type"}])


def _error_message(schema: Type[RequestSchema], field_name: str, error: dict) -> str:
    if error.get("type") == "value_error":
        cause = (error.get("ctx") or {}).get("error")
        if cause is not None:
            return str(cause)
    return schema.messages.get(field_name, error.get("msg", "Invalid value"))


def validate_payload(
    schema: Type[SchemaT],
    data: Dict[str, Any],
    errors: Optional[List[Dict[str, str]]] = None
) -> SchemaT:
    """Validate `data`, appending one error per failing field to `errors`"""
    errors = list(errors or [])
    recorded = {err["field"] for err in errors}
    payload = None

    try:
        payload = schema.model_validate(data)
    except ValidationError as exc:
        for err in exc.errors():
            loc = err.get("loc") or ("body",)
            field_name = str(loc[0])
            if field_name in recorded:
                continue
            recorded.add(field_name)
            errors.append({"field": field_name, "message": _error_message(schema, field_name, err)})

    if errors:
        raise ValidationFailed(errors)
    return payload


def validate_body(schema: Type[SchemaT]):
    """Dependency factory for routes whose only input is a body"""
    async def dependency(request: Request) -> SchemaT:
        data, _ = await read_body(request)
        return validate_payload(schema, data)
    return dependency
