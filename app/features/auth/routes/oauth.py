from typing import Optional

from fastapi import APIRouter, Depends, Request, status
from fastapi.responses import RedirectResponse
from sqlalchemy.ext.asyncio import AsyncSession

from app.features.auth.exceptions import (
    AuthFlowError,
    UnsupportedProviderError,
    UpstreamAuthError,
)
from app.features.auth.services.reconciliation import IdentityReconciliationService, RequestContext
from app.features.auth.utils.oauth import get_provider_client
from app.features.auth.utils.security import create_state_token, decode_state_token
from app.features.auth.utils.session import establish_session, safe_redirect_target
from app.platform.config import settings
from app.platform.db.session import get_db
from app.platform.logger import get_logger
from app.platform.response import redirect_with_flash

logger = get_logger(__name__)

router = APIRouter(prefix="/auth", tags=["Authentication"])

LOGIN_SUCCESS_MESSAGE = "Logged in successfully."


def _failure_redirect(exc: AuthFlowError) -> RedirectResponse:
    response = RedirectResponse(
        url=redirect_with_flash(settings.FRONTEND_URL, error=exc.user_message),
        status_code=status.HTTP_302_FOUND,
    )
    response.delete_cookie(settings.OAUTH_STATE_COOKIE_NAME)
    return response


@router.get(
    "/{provider}/redirect",
    summary="Start social login",
    description="Redirects the user to the provider's consent page",
)
async def redirect_to_provider(request: Request, provider: str, next: Optional[str] = None):
    """
    Start the authorization-code flow.

    - **provider**: `google` or `github`
    - **next**: where to send the user after login (defaults to the Referer)
    """
    try:
        client = get_provider_client(provider)
    except UnsupportedProviderError as e:
        logger.warning(str(e))
        return _failure_redirect(e)

    next_url = safe_redirect_target(next or request.headers.get("referer"))
    state, state_token = create_state_token(client.name.value, next_url)
    auth_url = client.get_authorization_url(state)

    logger.info(f"Redirecting to {client.name.value} sign in")

    response = RedirectResponse(url=auth_url, status_code=status.HTTP_302_FOUND)
    response.set_cookie(
        key=settings.OAUTH_STATE_COOKIE_NAME,
        value=state_token,
        max_age=settings.OAUTH_STATE_TTL_SECONDS,
        httponly=True,
        secure=settings.SESSION_COOKIE_SECURE,
        samesite="lax",
    )
    return response


@router.get(
    "/{provider}/callback",
    summary="Handle social login callback",
    description="Exchange the provider's code, link or create the local account and start a session",
)
async def handle_provider_callback(
    request: Request,
    provider: str,
    code: Optional[str] = None,
    state: Optional[str] = None,
    error: Optional[str] = None,
    db: AsyncSession = Depends(get_db),
):
    """ Handle the provider's redirect back after the user consented (or refused) """
    try:
        client = get_provider_client(provider)

        next_url = _check_state(request, client.name.value, state)
        if error:
            raise UpstreamAuthError(f"{client.name.value} returned error: {error}")

        profile = await client.fetch_profile(code)
        context = RequestContext.from_request(request)

        result = await IdentityReconciliationService(db).reconcile(client.name.value, profile, context)

    except AuthFlowError as e:
        logger.warning(f"Social login via {provider!r} failed: {e}")
        return _failure_redirect(e)
    except Exception as e:
        logger.error(f"Social login via {provider!r} crashed: {str(e)}", exc_info=True)
        return _failure_redirect(AuthFlowError())

    logger.info(
        f"{client.name.value} {'signup' if result.is_new_user else 'login'} successful "
        f"for user: {result.user.id}"
    )

    response = RedirectResponse(
        url=redirect_with_flash(next_url, success=LOGIN_SUCCESS_MESSAGE),
        status_code=status.HTTP_302_FOUND,
    )
    establish_session(response, result.user)
    response.delete_cookie(settings.OAUTH_STATE_COOKIE_NAME)
    return response


def _check_state(request: Request, provider: str, state: Optional[str]) -> str:
    """Validate the state round-trip and return the stored post-login destination."""
    state_cookie = request.cookies.get(settings.OAUTH_STATE_COOKIE_NAME)
    if not state_cookie or not state:
        raise UpstreamAuthError("Missing OAuth state")

    try:
        payload = decode_state_token(state_cookie)
    except ValueError as e:
        raise UpstreamAuthError(str(e)) from e

    if payload.get("state") != state or payload.get("provider") != provider:
        raise UpstreamAuthError("OAuth state mismatch")

    return safe_redirect_target(payload.get("next"))
