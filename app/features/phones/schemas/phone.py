import re
from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from app.features.phones.models.phone import PhoneType

# Columns that are NOT NULL on the phones table
REQUIRED_FIELDS = ("label", "number", "phone_type", "is_active")


def normalize_number(v: str) -> str:
    """Strip spaces, dots, dashes and parentheses; keep a single leading +."""
    v = v.strip()
    cleaned = re.sub(r"[\s().-]", "", v)
    if not re.fullmatch(r"\+?\d{3,20}", cleaned):
        raise ValueError("Phone number must contain 3-20 digits, optionally prefixed with +")
    return cleaned


class PhoneBase(BaseModel):
    label: str = Field(..., min_length=1, max_length=255)
    number: str
    phone_type: PhoneType = PhoneType.mobile
    extension: Optional[str] = Field(None, max_length=10)
    location: Optional[str] = Field(None, max_length=255)
    notes: Optional[str] = None
    is_active: bool = True

    @field_validator("number")
    @classmethod
    def validate_number(cls, v: str) -> str:
        return normalize_number(v)


class PhoneCreate(PhoneBase):
    pass


class PhoneUpdate(BaseModel):
    label: Optional[str] = Field(None, min_length=1, max_length=255)
    number: Optional[str] = None
    phone_type: Optional[PhoneType] = None
    extension: Optional[str] = Field(None, max_length=10)
    location: Optional[str] = Field(None, max_length=255)
    notes: Optional[str] = None
    is_active: Optional[bool] = None

    @field_validator("number")
    @classmethod
    def validate_number(cls, v: Optional[str]) -> Optional[str]:
        return normalize_number(v) if v is not None else v

    @model_validator(mode="after")
    def reject_null_required_fields(self) -> "PhoneUpdate":
        # Omitting a field leaves it alone; null is only valid for nullable columns
        nulled = sorted(
            name for name in REQUIRED_FIELDS
            if name in self.model_fields_set and getattr(self, name) is None
        )
        if nulled:
            raise ValueError(f"{', '.join(nulled)} cannot be null")
        return self


class PhoneResponse(PhoneBase):
    model_config = ConfigDict(from_attributes=True)

    id: str
    created_at: datetime
    updated_at: datetime
