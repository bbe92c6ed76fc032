from typing import Optional

from pydantic import BaseModel, EmailStr, Field


class AboutSettings(BaseModel):
    """Content of the public "About" page."""

    site_name: str = Field("Lara4", min_length=1, max_length=255)
    headline: Optional[str] = Field(None, max_length=255)
    description: Optional[str] = None
    mission: Optional[str] = None
    contact_email: Optional[EmailStr] = None
    image_url: Optional[str] = Field(None, max_length=1024)
