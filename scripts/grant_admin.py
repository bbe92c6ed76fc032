"""
Grant (or revoke) admin access for an existing account.

Accounts are created through social login, so admins are promoted after their first login.

Usage:
    python -m scripts.grant_admin user@example.com
    python -m scripts.grant_admin user@example.com --revoke
"""

import argparse
import asyncio
import sys

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from app.features.auth.models.user import User
from app.platform.db.session import SessionLocal


async def set_admin(db: AsyncSession, email: str, is_admin: bool) -> User:
    result = await db.execute(select(User).where(User.email == email.strip().lower()))
    user = result.scalar_one_or_none()
    if not user:
        raise LookupError(f"No user with email {email}")

    user.is_admin = is_admin
    await db.commit()
    return user


async def main(argv=None):
    parser = argparse.ArgumentParser(description="Grant or revoke admin access")
    parser.add_argument("email")
    parser.add_argument("--revoke", action="store_true", help="Remove admin access instead")
    args = parser.parse_args(argv)

    async with SessionLocal() as db:
        try:
            user = await set_admin(db, args.email, not args.revoke)
        except LookupError as e:
            print(f"❌ {e}")
            sys.exit(1)

    print(f"✅ {user.email} is_admin={user.is_admin}")


if __name__ == "__main__":
    asyncio.run(main())
