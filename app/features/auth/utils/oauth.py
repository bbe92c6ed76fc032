from typing import Any, Dict, Optional
from urllib.parse import urlencode

import httpx
from google.auth.transport import requests as google_requests
from google.oauth2 import id_token
from pydantic import ValidationError

from app.features.auth.exceptions import UnsupportedProviderError, UpstreamAuthError
from app.features.auth.models.provider import ProviderName
from app.features.auth.schemas.auth import ProviderProfile
from app.platform.config import settings
from app.platform.logger import get_logger

logger = get_logger(__name__)


class OAuthProviderClient:
    """Authorization-code flow against one provider: build the consent URL, trade a code for a profile."""

    name: ProviderName
    authorize_url: str
    token_url: str
    scopes: tuple

    def __init__(self, client_id: str, client_secret: str, redirect_uri: str, timeout: int = 15):
        self.client_id = client_id
        self.client_secret = client_secret
        self.redirect_uri = redirect_uri
        self.timeout = timeout

    def get_authorization_url(self, state: str) -> str:
        params = {
            "client_id": self.client_id,
            "redirect_uri": self.redirect_uri,
            "response_type": "code",
            "scope": " ".join(self.scopes),
            "state": state,
        }
        params.update(self._extra_authorize_params())
        return f"{self.authorize_url}?{urlencode(params)}"

    async def fetch_profile(self, code: str) -> ProviderProfile:
        """
        Exchange an authorization code and return the provider's view of the user.

        Raises:
            UpstreamAuthError: on any transport, HTTP, verification or shape failure
        """
        if not code:
            raise UpstreamAuthError(f"{self.name.value}: missing authorization code")

        try:
            async with httpx.AsyncClient(timeout=self.timeout, headers={"Accept": "application/json"}) as client:
                token_data = await self._exchange_code(client, code)
                raw_profile = await self._load_profile(client, token_data)
        except httpx.HTTPError as e:
            raise UpstreamAuthError(f"{self.name.value}: HTTP request to provider failed: {e}") from e

        try:
            return ProviderProfile(**raw_profile)
        except ValidationError as e:
            raise UpstreamAuthError(f"{self.name.value}: incomplete profile returned: {e}") from e

    async def _exchange_code(self, client: httpx.AsyncClient, code: str) -> Dict[str, Any]:
        response = await client.post(
            self.token_url,
            data={
                "client_id": self.client_id,
                "client_secret": self.client_secret,
                "code": code,
                "grant_type": "authorization_code",
                "redirect_uri": self.redirect_uri,
            },
        )
        if response.status_code != 200:
            raise UpstreamAuthError(
                f"{self.name.value}: token exchange failed with status {response.status_code}"
            )

        token_data = response.json()
        # GitHub reports errors with a 200 and an "error" field
        if "error" in token_data or not token_data.get("access_token"):
            raise UpstreamAuthError(
                f"{self.name.value}: token exchange rejected: {token_data.get('error', 'no access_token')}"
            )
        return token_data

    def _extra_authorize_params(self) -> Dict[str, str]:
        return {}

    async def _load_profile(self, client: httpx.AsyncClient, token_data: Dict[str, Any]) -> Dict[str, Any]:
        raise NotImplementedError


class GoogleOAuthClient(OAuthProviderClient):
    name = ProviderName.google
    authorize_url = "https://accounts.google.com/o/oauth2/v2/auth"
    token_url = "https://oauth2.googleapis.com/token"
    scopes = ("openid", "email", "profile")

    def _extra_authorize_params(self) -> Dict[str, str]:
        return {"access_type": "online", "prompt": "select_account"}

    async def _load_profile(self, client: httpx.AsyncClient, token_data: Dict[str, Any]) -> Dict[str, Any]:
        raw_id_token = token_data.get("id_token")
        if not raw_id_token:
            raise UpstreamAuthError("google: no ID token returned")

        idinfo = self.verify_id_token(raw_id_token)
        return {
            "id": idinfo.get("sub"),
            "email": idinfo.get("email"),
            "name": idinfo.get("name"),
            "given_name": idinfo.get("given_name"),
            "family_name": idinfo.get("family_name"),
            "avatar": idinfo.get("picture"),
            "nickname": None,
            "token": token_data.get("access_token"),
        }

    def verify_id_token(self, raw_id_token: str) -> Dict[str, Any]:
        try:
            idinfo = id_token.verify_oauth2_token(raw_id_token, google_requests.Request(), self.client_id)
        except ValueError as e:
            raise UpstreamAuthError(f"google: invalid ID token: {e}") from e

        if idinfo.get("iss") not in ["accounts.google.com", "https://accounts.google.com"]:
            raise UpstreamAuthError("google: wrong issuer")

        return idinfo


class GitHubOAuthClient(OAuthProviderClient):
    name = ProviderName.github
    authorize_url = "https://github.com/login/oauth/authorize"
    token_url = "https://github.com/login/oauth/access_token"
    api_url = "https://api.github.com"
    scopes = ("read:user", "user:email")

    def _extra_authorize_params(self) -> Dict[str, str]:
        return {"allow_signup": "true"}

    async def _load_profile(self, client: httpx.AsyncClient, token_data: Dict[str, Any]) -> Dict[str, Any]:
        access_token = token_data["access_token"]
        headers = {
            "Authorization": f"Bearer {access_token}",
            "Accept": "application/vnd.github+json",
        }

        user_resp = await client.get(f"{self.api_url}/user", headers=headers)
        user_resp.raise_for_status()
        github_user = user_resp.json()

        email = github_user.get("email") or await self._primary_email(client, headers)

        return {
            "id": github_user.get("id"),
            "email": email,
            "name": github_user.get("name") or github_user.get("login"),
            "given_name": None,
            "family_name": None,
            "avatar": github_user.get("avatar_url"),
            "nickname": github_user.get("login"),
            "token": access_token,
        }

    async def _primary_email(self, client: httpx.AsyncClient, headers: Dict[str, str]) -> Optional[str]:
        # Users with a private email only expose it through /user/emails
        resp = await client.get(f"{self.api_url}/user/emails", headers=headers)
        resp.raise_for_status()

        for entry in resp.json():
            if entry.get("primary") and entry.get("verified"):
                return entry.get("email")

        logger.warning("github: account has no primary verified email")
        return None


_CLIENTS = {
    ProviderName.google: (GoogleOAuthClient, "GOOGLE_CLIENT_ID", "GOOGLE_CLIENT_SECRET"),
    ProviderName.github: (GitHubOAuthClient, "GITHUB_CLIENT_ID", "GITHUB_CLIENT_SECRET"),
}


def resolve_provider(provider: str) -> ProviderName:
    """Map a raw provider value onto the allow-list, or raise UnsupportedProviderError."""
    try:
        return ProviderName(provider)
    except ValueError:
        raise UnsupportedProviderError(provider)


def get_provider_client(provider: str) -> OAuthProviderClient:
    provider_name = resolve_provider(provider)
    client_class, id_setting, secret_setting = _CLIENTS[provider_name]

    return client_class(
        client_id=getattr(settings, id_setting),
        client_secret=getattr(settings, secret_setting),
        redirect_uri=f"{settings.OAUTH_REDIRECT_BASE_URL.rstrip('/')}/{provider_name.value}/callback",
        timeout=settings.OAUTH_HTTP_TIMEOUT,
    )
