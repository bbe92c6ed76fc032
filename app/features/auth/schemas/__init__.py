from app.features.auth.schemas.auth import (
    LinkedProviderResponse,
    ProviderProfile,
    UserResponse,
)

__all__ = ["LinkedProviderResponse", "ProviderProfile", "UserResponse"]
