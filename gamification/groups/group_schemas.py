from typing import List, Optional

from bson import ObjectId
from fastapi import Request
from pydantic import Field, field_validator

from gamification.core.database import is_object_id
from gamification.core.documents import Document
from gamification.core.validation import (
    RequestSchema, ValidatedRequest, decode_json_field, object_id_error, read_body, validate_payload
)

# ==================== DATABASE MODELS ====================

class Group(Document):
    name: str
    member_ids: List[ObjectId] = Field(default_factory=list, alias="memberIds")
    created_by: ObjectId = Field(..., alias="createdBy")

# ==================== REQUEST SCHEMAS ====================

def check_member_ids(value):
    value = decode_json_field(value)
    if isinstance(value, str):
        value = [value]
    if not isinstance(value, list):
        raise ValueError("Member ids must be an array")
    if not all(is_object_id(member_id) for member_id in value):
        raise ValueError("All member ids must be valid ids")
    return value


class GroupCreate(RequestSchema):
    messages = {
        "name": "Please provide the name of the group",
    }

    name: str = Field(..., min_length=1)
    member_ids: List[str] = Field(default_factory=list, alias="memberIds")

    @field_validator("member_ids", mode="before")
    @classmethod
    def member_ids_valid(cls, v):
        return check_member_ids(v)


class GroupUpdate(RequestSchema):
    messages = {
        "name": "Group name must be a non-empty string",
    }

    name: Optional[str] = Field(None, min_length=1)
    member_ids: Optional[List[str]] = Field(None, alias="memberIds")

    @field_validator("member_ids", mode="before")
    @classmethod
    def member_ids_valid(cls, v):
        return check_member_ids(v)

# ==================== ROUTE VALIDATORS ====================

async def validate_edit_group(groupId: str, request: Request) -> ValidatedRequest:
    data, _ = await read_body(request)
    errors = object_id_error(groupId, "groupId", "Invalid group id")
    return ValidatedRequest(payload=validate_payload(GroupUpdate, data, errors))
