from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from app.features.auth.dependencies.auth import get_current_admin
from app.features.settings.schemas.about import AboutSettings
from app.features.settings.services.settings import get_about_settings, update_about_settings
from app.platform.db.session import get_db
from app.platform.response import api_response

router = APIRouter(prefix="/settings", tags=["Settings"])


@router.get("/about", response_model=dict, summary="Get About settings")
async def get_about(db: AsyncSession = Depends(get_db)):
    about = await get_about_settings(db)
    return api_response(data=about, message="About settings retrieved successfully")


@router.put(
    "/about",
    response_model=dict,
    summary="Update About settings",
    dependencies=[Depends(get_current_admin)],
)
async def put_about(request: AboutSettings, db: AsyncSession = Depends(get_db)):
    about = await update_about_settings(db, request)
    return api_response(data=about, message="About settings updated successfully")
