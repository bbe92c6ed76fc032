from app.features.auth.utils.security import (
    hash_password,
    verify_password,
    create_access_token,
    decode_access_token,
    generate_unusable_password_hash,
)

__all__ = [
    "hash_password",
    "verify_password",
    "create_access_token",
    "decode_access_token",
    "generate_unusable_password_hash",
]
