from fastapi import APIRouter, Depends, status
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from app.features.auth.dependencies.auth import get_current_user
from app.features.auth.models.user import User
from app.features.auth.schemas.auth import UserResponse
from app.features.auth.utils.session import clear_session
from app.platform.db.session import get_db
from app.platform.response import api_response

router = APIRouter(tags=["User Management"])


@router.get(
    "/users/me",
    response_model=dict,
    summary="Get current user profile",
    description="Retrieve the authenticated user's profile and linked social accounts",
)
async def get_my_profile(
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    """Get the current user's profile."""
    result = await db.execute(
        select(User)
        .options(selectinload(User.providers))
        .where(User.id == current_user.id)
        .execution_options(populate_existing=True)
    )
    user = result.scalar_one()

    return api_response(
        message="User profile retrieved successfully",
        data=UserResponse.model_validate(user).model_dump(),
    )


@router.post(
    "/auth/logout",
    response_model=dict,
    status_code=status.HTTP_200_OK,
    summary="Logout user",
    description="Clear the session cookie",
)
async def logout():
    response = api_response(message="Logged out successfully")
    clear_session(response)
    return response
