"""
API Dependencies.
Application-scoped gateway and stores, created in the lifespan and kept on `app.state`.
"""

from fastapi import Request

from gabonshop.application.services.catalog_store import CatalogStore
from gabonshop.application.services.moderation_service import ModerationService
from gabonshop.infrastructure.gateway import SQLAlchemyAuthGateway, SQLAlchemyDocumentGateway


def get_gateway(request: Request) -> SQLAlchemyDocumentGateway:
    return request.app.state.gateway


def get_auth_gateway(request: Request) -> SQLAlchemyAuthGateway:
    return request.app.state.auth_gateway


def get_catalog(request: Request) -> CatalogStore:
    return request.app.state.catalog


def get_moderation(request: Request) -> ModerationService:
    return request.app.state.moderation
