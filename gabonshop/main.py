"""FastAPI application: main entry point."""

import structlog
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from gabonshop.config import get_settings
from gabonshop.infrastructure.database import engine, Base, SessionLocal
from gabonshop.infrastructure.gateway import SQLAlchemyAuthGateway, SQLAlchemyDocumentGateway
from gabonshop.application.services.catalog_store import CatalogStore
from gabonshop.application.services.moderation_service import ModerationService
from gabonshop.core.clock import now_ms
from gabonshop.core.logging import configure_logging
from gabonshop.core.middleware import setup_middleware
from gabonshop.core.exceptions import AppError, BusinessRuleViolationException, global_exception_handler
from gabonshop.domain.repositories.gateway import USERS

# Import all models so SQLAlchemy knows about them
from gabonshop.domain.models.credential import Credential
from gabonshop.domain.models.moderation_log import ModerationLog
from gabonshop.domain.models.product import Product
from gabonshop.domain.models.user import UserProfile

# Import routers
from gabonshop.interfaces.api.auth import router as auth_router
from gabonshop.interfaces.api.products import router as products_router
from gabonshop.interfaces.api.admin import router as admin_router
from gabonshop.interfaces.api.site import router as site_router

settings = get_settings()

# Configure logging immediately
configure_logging()
logger = structlog.get_logger(__name__)


def seed_default_admin(auth_gateway: SQLAlchemyAuthGateway, gateway: SQLAlchemyDocumentGateway) -> None:
    """Create the configured admin account and profile on first start."""
    try:
        session = auth_gateway.create_account(settings.DEFAULT_ADMIN_EMAIL, settings.DEFAULT_ADMIN_PASSWORD)
    except BusinessRuleViolationException:
        return

    gateway.set_document(
        USERS,
        session.uid,
        {
            "name": settings.DEFAULT_ADMIN_NAME,
            "email": session.email,
            "phone": "",
            "role": "admin",
            "created_at": now_ms(),
        },
    )
    logger.info("Default admin user created", email=session.email)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan: wire the gateway and stores, then load the catalog."""
    logger.info("Starting GabonShop...", env=settings.ENVIRONMENT)

    # Create DB tables (dev only)
    Base.metadata.create_all(bind=engine)

    gateway = SQLAlchemyDocumentGateway(SessionLocal)
    auth_gateway = SQLAlchemyAuthGateway(SessionLocal)
    seed_default_admin(auth_gateway, gateway)

    catalog = CatalogStore(gateway)
    catalog.init()

    app.state.gateway = gateway
    app.state.auth_gateway = auth_gateway
    app.state.catalog = catalog
    app.state.moderation = ModerationService(gateway, catalog)
    logger.info("Catalog ready", products=len(catalog.products))

    yield

    catalog.dispose()
    logger.info("GabonShop stopped")


app = FastAPI(
    title="GabonShop",
    description="API de la place de marché GabonShop: annonces, comptes et modération",
    version="1.0.0",
    lifespan=lifespan,
)

setup_middleware(app)

app.add_exception_handler(AppError, global_exception_handler)
app.add_exception_handler(Exception, global_exception_handler)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(site_router)
app.include_router(auth_router)
app.include_router(products_router)
app.include_router(admin_router)


@app.get("/")
def root():
    return {
        "name": "GabonShop",
        "version": "1.0.0",
        "status": "running",
        "docs": "/docs",
    }


@app.get("/health")
def health():
    return {"status": "healthy"}
