import logging
import os
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.staticfiles import StaticFiles

from app.database import Base, SessionLocal, engine
from app.config import settings
from app.auth import ensure_admin

# Import models so SQLAlchemy registers tables
from app.models import (
    portfolio_item,
    portfolio_category,
    user,
    revoked_token,
)

# Routers
from app.routers import (
    auth_router,
    portfolio_router,
    admin_router,
    lightbox_router,
    contact_router,
)

logging.basicConfig(
    level=settings.LOG_LEVEL,
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)


# -----------------------
# STARTUP
# -----------------------
def bootstrap_admin():
    if not (settings.ADMIN_EMAIL and settings.ADMIN_PASSWORD):
        return

    db = SessionLocal()
    try:
        ensure_admin(db, settings.ADMIN_EMAIL, settings.ADMIN_PASSWORD)
    finally:
        db.close()


@asynccontextmanager
async def lifespan(app: FastAPI):
    Base.metadata.create_all(bind=engine)
    bootstrap_admin()
    logger.info(
        "Portfolio API started (env=%s, store=%s, auth=%s)",
        settings.ENV, settings.ITEM_STORE_BACKEND, settings.AUTH_BACKEND,
    )
    yield


# -----------------------
# CREATE APP
# -----------------------
app = FastAPI(
    title=settings.PROJECT_NAME,
    description="Backend API for the wedding photography portfolio site.",
    version="1.0.0",
    lifespan=lifespan,
)

# -----------------------
# CORS (ONLY ONCE)
# -----------------------
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# -----------------------
# STATIC FALLBACK IMAGES
# -----------------------
if os.path.isdir(settings.STATIC_PATH):
    app.mount("/static", StaticFiles(directory=settings.STATIC_PATH), name="static")

# -----------------------
# ROUTES
# -----------------------
app.include_router(auth_router.router)
app.include_router(portfolio_router.router)
app.include_router(admin_router.router)
app.include_router(lightbox_router.router)
app.include_router(contact_router.router)


# -----------------------
# HEALTH CHECK
# -----------------------
@app.get("/")
def root():
    return {"message": "Portfolio API is running!"}
