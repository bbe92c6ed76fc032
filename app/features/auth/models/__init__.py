from app.features.auth.models.user import User
from app.features.auth.models.provider import Provider, ProviderName

__all__ = ["User", "Provider", "ProviderName"]
