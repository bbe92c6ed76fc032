from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, EmailStr, field_validator

from app.features.auth.models.provider import ProviderName


class ProviderProfile(BaseModel):
    """Normalized user record returned by a provider after the code exchange."""

    id: str
    email: EmailStr
    name: Optional[str] = None
    given_name: Optional[str] = None
    family_name: Optional[str] = None
    avatar: Optional[str] = None
    nickname: Optional[str] = None
    token: Optional[str] = None

    @field_validator("id", mode="before")
    @classmethod
    def coerce_id(cls, v):
        # GitHub ids are integers
        if isinstance(v, int):
            return str(v)
        if isinstance(v, str) and not v.strip():
            raise ValueError("Provider subject id cannot be empty")
        return v

    @field_validator("email")
    @classmethod
    def normalize_email(cls, v: str) -> str:
        return v.lower()


class LinkedProviderResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    provider: ProviderName
    name: Optional[str] = None
    nickname: Optional[str] = None
    avatar: Optional[str] = None
    created_at: datetime


class UserResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    email: str
    name: Optional[str] = None
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    avatar: Optional[str] = None
    is_email_verified: bool
    is_admin: bool
    last_login_at: Optional[datetime] = None
    created_at: datetime
    providers: List[LinkedProviderResponse] = []
