import json
from unittest.mock import patch

import httpx
import pytest

from app.features.auth.exceptions import UnsupportedProviderError, UpstreamAuthError
from app.features.auth.models.provider import ProviderName
from app.features.auth.utils import oauth as oauth_module
from app.features.auth.utils.oauth import (
    GitHubOAuthClient,
    GoogleOAuthClient,
    get_provider_client,
    resolve_provider,
)

REAL_ASYNC_CLIENT = httpx.AsyncClient


def _mock_http(monkeypatch, handler):
    """Route every httpx.AsyncClient created by the provider clients through `handler`."""
    def client_factory(**kwargs):
        return REAL_ASYNC_CLIENT(transport=httpx.MockTransport(handler), **kwargs)

    monkeypatch.setattr(oauth_module.httpx, "AsyncClient", client_factory)


def _github_client():
    return GitHubOAuthClient("gh-id", "gh-secret", "http://localhost/api/v1/auth/github/callback")


def _google_client():
    return GoogleOAuthClient("g-id", "g-secret", "http://localhost/api/v1/auth/google/callback")


class TestProviderRegistry:

    def test_resolve_known_providers(self):
        assert resolve_provider("google") is ProviderName.google
        assert resolve_provider("github") is ProviderName.github

    @pytest.mark.parametrize("value", ["twitter", "Google", "", None])
    def test_resolve_rejects_everything_else(self, value):
        with pytest.raises(UnsupportedProviderError):
            resolve_provider(value)

    def test_get_provider_client_builds_callback_url(self):
        client = get_provider_client("github")

        assert isinstance(client, GitHubOAuthClient)
        assert client.redirect_uri.endswith("/auth/github/callback")


class TestGitHubClient:

    @pytest.mark.asyncio
    async def test_fetch_profile(self, monkeypatch):
        def handler(request: httpx.Request) -> httpx.Response:
            if request.url.path == "/login/oauth/access_token":
                assert b"code=the-code" in request.content
                return httpx.Response(200, json={"access_token": "gho_abc", "token_type": "bearer"})
            if request.url.path == "/user":
                assert request.headers["authorization"] == "Bearer gho_abc"
                return httpx.Response(200, json={
                    "id": 583231,
                    "login": "octocat",
                    "name": "The Octocat",
                    "email": "Octocat@GitHub.com",
                    "avatar_url": "https://avatars.githubusercontent.com/u/583231",
                })
            return httpx.Response(404)

        _mock_http(monkeypatch, handler)

        profile = await _github_client().fetch_profile("the-code")

        assert profile.id == "583231"
        assert profile.email == "octocat@github.com"
        assert profile.name == "The Octocat"
        assert profile.nickname == "octocat"
        assert profile.avatar == "https://avatars.githubusercontent.com/u/583231"
        assert profile.token == "gho_abc"

    @pytest.mark.asyncio
    async def test_private_email_falls_back_to_primary_verified(self, monkeypatch):
        def handler(request: httpx.Request) -> httpx.Response:
            if request.url.path == "/login/oauth/access_token":
                return httpx.Response(200, json={"access_token": "gho_abc"})
            if request.url.path == "/user":
                return httpx.Response(200, json={"id": 1, "login": "private", "email": None})
            if request.url.path == "/user/emails":
                return httpx.Response(200, json=[
                    {"email": "old@example.com", "primary": False, "verified": True},
                    {"email": "main@example.com", "primary": True, "verified": True},
                ])
            return httpx.Response(404)

        _mock_http(monkeypatch, handler)

        profile = await _github_client().fetch_profile("code")

        assert profile.email == "main@example.com"
        assert profile.name == "private"

    @pytest.mark.asyncio
    async def test_no_usable_email_is_upstream_error(self, monkeypatch):
        def handler(request: httpx.Request) -> httpx.Response:
            if request.url.path == "/login/oauth/access_token":
                return httpx.Response(200, json={"access_token": "gho_abc"})
            if request.url.path == "/user":
                return httpx.Response(200, json={"id": 1, "login": "ghost", "email": None})
            return httpx.Response(200, json=[{"email": "x@example.com", "primary": True, "verified": False}])

        _mock_http(monkeypatch, handler)

        with pytest.raises(UpstreamAuthError):
            await _github_client().fetch_profile("code")

    @pytest.mark.asyncio
    async def test_error_in_token_response(self, monkeypatch):
        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(200, json={"error": "bad_verification_code"})

        _mock_http(monkeypatch, handler)

        with pytest.raises(UpstreamAuthError, match="bad_verification_code"):
            await _github_client().fetch_profile("expired")

    @pytest.mark.asyncio
    async def test_transport_failure(self, monkeypatch):
        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectError("connection refused", request=request)

        _mock_http(monkeypatch, handler)

        with pytest.raises(UpstreamAuthError):
            await _github_client().fetch_profile("code")

    @pytest.mark.asyncio
    async def test_missing_code(self):
        with pytest.raises(UpstreamAuthError):
            await _github_client().fetch_profile(None)


class TestGoogleClient:

    def test_authorization_url(self):
        url = _google_client().get_authorization_url("state-123")

        assert url.startswith("https://accounts.google.com/o/oauth2/v2/auth?")
        assert "state=state-123" in url
        assert "scope=openid+email+profile" in url

    @pytest.mark.asyncio
    async def test_fetch_profile_verifies_id_token(self, monkeypatch):
        def handler(request: httpx.Request) -> httpx.Response:
            assert request.url.host == "oauth2.googleapis.com"
            return httpx.Response(200, content=json.dumps({
                "access_token": "ya29.token",
                "id_token": "header.payload.signature",
            }))

        _mock_http(monkeypatch, handler)
        claims = {
            "iss": "https://accounts.google.com",
            "sub": "1098",
            "email": "jane@example.com",
            "name": "Jane Doe",
            "given_name": "Jane",
            "family_name": "Doe",
            "picture": "https://lh3.googleusercontent.com/a/jane",
        }

        with patch(
            "app.features.auth.utils.oauth.id_token.verify_oauth2_token", return_value=claims
        ) as mock_verify:
            profile = await _google_client().fetch_profile("code")

        assert mock_verify.call_args.args[0] == "header.payload.signature"
        assert mock_verify.call_args.args[2] == "g-id"
        assert profile.id == "1098"
        assert profile.given_name == "Jane"
        assert profile.family_name == "Doe"
        assert profile.avatar == claims["picture"]
        assert profile.token == "ya29.token"

    @pytest.mark.asyncio
    async def test_wrong_issuer(self, monkeypatch):
        _mock_http(monkeypatch, lambda request: httpx.Response(
            200, json={"access_token": "t", "id_token": "x.y.z"}
        ))

        with patch(
            "app.features.auth.utils.oauth.id_token.verify_oauth2_token",
            return_value={"iss": "wrong.issuer.com", "sub": "1", "email": "a@example.com"},
        ):
            with pytest.raises(UpstreamAuthError, match="wrong issuer"):
                await _google_client().fetch_profile("code")

    @pytest.mark.asyncio
    async def test_invalid_id_token(self, monkeypatch):
        _mock_http(monkeypatch, lambda request: httpx.Response(
            200, json={"access_token": "t", "id_token": "x.y.z"}
        ))

        with patch(
            "app.features.auth.utils.oauth.id_token.verify_oauth2_token",
            side_effect=ValueError("Token expired"),
        ):
            with pytest.raises(UpstreamAuthError, match="invalid ID token"):
                await _google_client().fetch_profile("code")

    @pytest.mark.asyncio
    async def test_token_endpoint_rejects_code(self, monkeypatch):
        _mock_http(monkeypatch, lambda request: httpx.Response(400, json={"error": "invalid_grant"}))

        with pytest.raises(UpstreamAuthError, match="status 400"):
            await _google_client().fetch_profile("code")
