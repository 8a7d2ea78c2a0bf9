from dataclasses import dataclass
from enum import Enum
from typing import Optional, Union

from bson import ObjectId
from pydantic import Field

from gamification.core.documents import Document

# ==================== ENUMS ====================

class Role(str, Enum):
    USER = "user"
    ADMIN = "admin"
    SUPER_ADMIN = "superAdmin"

# ==================== DATABASE MODELS ====================

class User(Document):
    """Learner (role=user) or instructor (role=admin) account"""
    username: str
    email: str
    password: str  # bcrypt hash
    role: Role = Role.USER
    first_name: Optional[str] = Field(None, alias="firstName")
    last_name: Optional[str] = Field(None, alias="lastName")
    phone: Optional[str] = None
    organization: Optional[ObjectId] = None
    year_of_experience: Optional[int] = Field(None, alias="yearOfExperience")
    highest_education_level: Optional[str] = Field(None, alias="highestEducationLevel")
    gender: Optional[str] = None
    date_of_birth: Optional[str] = Field(None, alias="dateOfBirth")


class SuperAdmin(Document):
    email: str
    password: str
    role: Role = Role.SUPER_ADMIN
    username: Optional[str] = None
    first_name: Optional[str] = Field(None, alias="firstName")
    last_name: Optional[str] = Field(None, alias="lastName")

# ==================== CALLERS ====================
# The identity a request runs as, resolved once by `authenticate`

@dataclass(frozen=True)
class AdminCaller:
    id: ObjectId
    email: str
    username: str


@dataclass(frozen=True)
class UserCaller:
    id: ObjectId
    email: str
    username: str
    organization: Optional[ObjectId] = None


@dataclass(frozen=True)
class SuperAdminCaller:
    id: ObjectId
    email: str


Caller = Union[AdminCaller, UserCaller, SuperAdminCaller]


def caller_from_account(account: dict) -> Caller:
    role = account.get("role")
    if role == Role.SUPER_ADMIN.value:
        return SuperAdminCaller(id=account["_id"], email=account["email"])
    if role == Role.ADMIN.value:
        return AdminCaller(id=account["_id"], email=account["email"], username=account.get("username", ""))
    return UserCaller(
        id=account["_id"],
        email=account["email"],
        username=account.get("username", ""),
        organization=account.get("organization"),
    )
