"""Auth Schemas — Pydantic models for the login/logout API boundary.

Invariants:
    - LoginRequest.id is stripped of surrounding whitespace; passwords are
      taken verbatim
    - Wire field names (id, pwd, isAutoLogin, phoneNumber) match the client contract

Design Decisions:
    - Aliases with populate_by_name: snake_case in Python, camelCase on the wire
"""

from pydantic import BaseModel, ConfigDict, Field, field_validator

from app.core.domain_types import LoginMode, MemberId
from app.core.member import Member
from app.services.session_reconciler import SubmittedCredentials


class LoginRequest(BaseModel):
    """Credential submission — only consulted when credential cookies are incomplete."""
    model_config = ConfigDict(populate_by_name=True)

    id: str = Field(min_length=1, max_length=64)
    pwd: str = Field(max_length=256)
    is_auto_login: bool = Field(False, alias="isAutoLogin")

    @field_validator("id")
    @classmethod
    def strip_id(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("id cannot be empty or whitespace")
        return v

    def to_credentials(self) -> SubmittedCredentials:
        return SubmittedCredentials(
            member_id=MemberId(self.id),
            password=self.pwd,
            persistent=self.is_auto_login,
        )


class MemberProfile(BaseModel):
    """Public member data — never includes hash or session fields."""
    model_config = ConfigDict(populate_by_name=True)

    id: str
    name: str
    phone_number: str = Field(serialization_alias="phoneNumber")
    is_worker: bool = Field(serialization_alias="isWorker")
    is_admin: bool = Field(serialization_alias="isAdmin")

    @classmethod
    def from_member(cls, member: Member) -> "MemberProfile":
        return cls(
            id=member.id,
            name=member.name,
            phone_number=member.phone_number,
            is_worker=member.is_worker,
            is_admin=member.is_admin,
        )


class LoginResponse(BaseModel):
    member: MemberProfile
    login_mode: LoginMode = Field(serialization_alias="loginMode")
