import logging

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from app.api_routers.v1 import api_router
from app.features.health.routes.health import router as health_router
from app.features.posts.routes.feed import router as feed_router
from app.platform.config import settings
from app.platform.exceptions import add_exception_handlers

# Configure logging to show INFO level messages
logging.basicConfig(
    level=logging.INFO, format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
)

app = FastAPI(
    title=f"{settings.APP_NAME} API",
    description="Social login, phone records, site settings, reservations and the posts feed",
    version="1.0.0",
    debug=settings.DEBUG,
)


# Root endpoint for basic info
@app.get("/", tags=["Info"])
def root():
    return {
        "app_name": f"{settings.APP_NAME} API",
        "version": "1.0.0",
        "docs_url": "/docs",
        "api_base": "/api/v1",
        "feed_url": "/posts/feed",
    }


app.add_middleware(
    CORSMiddleware,
    allow_origins=[settings.FRONTEND_URL],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

add_exception_handlers(app)

app.include_router(health_router)
app.include_router(feed_router)
app.include_router(api_router, prefix="/api/v1")
