from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Optional, Tuple

from fastapi import Request
from sqlalchemy import select
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from app.features.auth.exceptions import PersistenceError
from app.features.auth.models.provider import Provider, ProviderName
from app.features.auth.models.user import User
from app.features.auth.schemas.auth import ProviderProfile
from app.features.auth.utils.oauth import resolve_provider
from app.features.auth.utils.security import generate_unusable_password_hash
from app.platform.logger import get_logger
from app.platform.utils.device import get_client_country, get_device_info

logger = get_logger(__name__)


@dataclass(frozen=True)
class RequestContext:
    """Network/device facts about the request that carried the provider callback."""

    ip_address: Optional[str] = None
    browser: Optional[str] = None
    platform: Optional[str] = None
    device: Optional[str] = None
    country: Optional[str] = None

    @classmethod
    def from_request(cls, request: Request) -> "RequestContext":
        info = get_device_info(request)
        return cls(
            ip_address=info.ip_address,
            browser=info.browser,
            platform=info.platform,
            device=info.device,
            country=get_client_country(request),
        )


@dataclass(frozen=True)
class ReconciliationResult:
    user: User
    is_new_user: bool


class IdentityReconciliationService:
    """
    Maps a provider login onto exactly one local user.

    Lookup order is (provider, subject id) first, then email, then a new account.
    All writes of one attempt happen in a single transaction owned by this
    service, so the session handed in must not have a transaction open.
    """

    def __init__(self, db: AsyncSession):
        self.db = db

    async def reconcile(
        self, provider: str, profile: ProviderProfile, context: RequestContext
    ) -> ReconciliationResult:
        """
        Resolve a provider profile to a local user, creating or linking as needed.

        Args:
            provider: raw provider name from the request
            profile: profile returned by the provider exchange
            context: metadata of the current request

        Returns:
            ReconciliationResult with the user and whether the account was created

        Raises:
            UnsupportedProviderError: provider is not allowed (nothing touched)
            PersistenceError: storage failed; nothing from this attempt is persisted
        """
        provider_name = resolve_provider(provider)

        try:
            return await self._attempt(provider_name, profile, context)
        except IntegrityError as e:
            # A concurrent callback for the same identity or email committed first.
            # Its rows are visible now, so a second pass resolves to them.
            logger.warning(
                f"Uniqueness conflict linking {provider_name.value}:{profile.id}, retrying lookup: {e.orig}"
            )

        try:
            return await self._attempt(provider_name, profile, context)
        except IntegrityError as e:
            raise PersistenceError(
                f"Could not reconcile {provider_name.value}:{profile.id} after retry"
            ) from e

    async def _attempt(
        self, provider_name: ProviderName, profile: ProviderProfile, context: RequestContext
    ) -> ReconciliationResult:
        try:
            async with self.db.begin():
                user, is_new_user = await self._resolve_user(provider_name, profile, context)
                self._record_login(user, context)
        except IntegrityError:
            raise
        except SQLAlchemyError as e:
            raise PersistenceError(f"Failed to persist {provider_name.value} login: {e}") from e

        if is_new_user:
            logger.info(f"Created new user via {provider_name.value}: {user.id}")
        else:
            logger.info(f"{provider_name.value} login for existing user {user.id}")

        return ReconciliationResult(user=user, is_new_user=is_new_user)

    async def _resolve_user(
        self, provider_name: ProviderName, profile: ProviderProfile, context: RequestContext
    ) -> Tuple[User, bool]:
        user = await self._find_linked_user(provider_name, profile.id)
        if user:
            return user, False

        is_new_user = False
        user = await self._find_user_by_email(profile.email)
        if not user:
            user = await self._create_user(profile, context)
            is_new_user = True

        await self._link_provider(user, provider_name, profile)

        if not user.avatar:
            user.avatar = profile.avatar

        return user, is_new_user

    async def _find_linked_user(self, provider_name: ProviderName, provider_id: str) -> Optional[User]:
        result = await self.db.execute(
            select(User)
            .join(Provider, Provider.user_id == User.id)
            .where(Provider.provider == provider_name, Provider.provider_id == provider_id)
        )
        return result.scalar_one_or_none()

    async def _find_user_by_email(self, email: str) -> Optional[User]:
        result = await self.db.execute(select(User).where(User.email == email.lower()))
        return result.scalar_one_or_none()

    async def _create_user(self, profile: ProviderProfile, context: RequestContext) -> User:
        user = User(
            name=profile.name,
            email=profile.email.lower(),
            first_name=profile.given_name,
            last_name=profile.family_name,
            password_hash=generate_unusable_password_hash(),
            email_verified_at=datetime.now(timezone.utc),
            avatar=profile.avatar,
            registration_ip=context.ip_address,
            browser=context.browser,
            platform=context.platform,
            device=context.device,
        )

        self.db.add(user)
        await self.db.flush()  # Flush to get the user ID
        return user

    async def _link_provider(self, user: User, provider_name: ProviderName, profile: ProviderProfile) -> Provider:
        link = Provider(
            user_id=user.id,
            provider=provider_name,
            provider_id=profile.id,
            provider_token=profile.token,
            avatar=profile.avatar,
            name=profile.name,
            nickname=profile.nickname,
        )
        self.db.add(link)
        await self.db.flush()

        logger.info(f"Linked {provider_name.value} account to user {user.id}")
        return link

    @staticmethod
    def _record_login(user: User, context: RequestContext) -> None:
        user.last_login_ip = context.ip_address
        user.last_login_country = context.country
        user.last_login_at = datetime.now(timezone.utc)
