from fastapi import APIRouter

from app.features.auth.routes.oauth import router as oauth_router
from app.features.auth.routes.users import router as users_router
from app.features.phones.routes.phones import router as phones_router
from app.features.reservations.routes.reservations import router as reservations_router
from app.features.settings.routes.settings import router as settings_router

api_router = APIRouter()

# Register all feature routes
api_router.include_router(oauth_router)
api_router.include_router(users_router)
api_router.include_router(phones_router)
api_router.include_router(settings_router)
api_router.include_router(reservations_router)
