import enum

from sqlalchemy import Column, Enum, ForeignKey, String, Text, UniqueConstraint
from sqlalchemy.orm import relationship

from app.platform.db.base import BaseModel


class ProviderName(str, enum.Enum):
    """Identity providers accepted for social login. Adding one is a code change."""
    google = "google"
    github = "github"


class Provider(BaseModel):
    """
    One external identity (provider + provider-assigned subject id) linked to a local user.

    Created only while handling a provider callback; never updated afterwards.
    """
    __tablename__ = "providers"
    __table_args__ = (
        UniqueConstraint("provider", "provider_id", name="uq_providers_provider_provider_id"),
    )

    user_id = Column(String, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    provider = Column(Enum(ProviderName, name="provider_name"), nullable=False, index=True)
    provider_id = Column(String(255), nullable=False)
    provider_token = Column(Text, nullable=True)

    # Profile snapshot from the provider at link time
    avatar = Column(String(1024), nullable=True)
    name = Column(String(255), nullable=True)
    nickname = Column(String(255), nullable=True)

    user = relationship("User", back_populates="providers")

    def __repr__(self):
        return f"<Provider(user_id={self.user_id}, provider={self.provider}, provider_id={self.provider_id})>"
