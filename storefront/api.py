"""FastAPI application exposing the store and user endpoints."""
from __future__ import annotations

import logging
from typing import Dict

from fastapi import APIRouter, FastAPI, Request, status
from fastapi.responses import JSONResponse

from .authentication import AuthenticationService
from .config import Settings, load_settings
from .controllers import StoreController, UserController
from .database import Database
from .datastore import DataStore
from .dto import ErrorResponse, UserDTO, user_to_dto
from .passwords import PasswordEncryption
from .repositories import StoreRepository, UserRepository
from .stores import StoreService

logger = logging.getLogger("storefront.api")


def _seed_users(settings: Settings, auth: AuthenticationService) -> None:
    for seed in settings.seed_users:
        if auth.user_exists(seed.email):
            continue
        auth.register_user(seed.email, seed.password, seed.name, seed.role)
        logger.info("Seeded user %s", seed.email)


def create_app(
    *,
    data_store: DataStore | None = None,
    settings: Settings | None = None,
    password_encryption: PasswordEncryption | None = None,
) -> FastAPI:
    """Assemble data store, repositories, services and controllers into an app.

    When ``data_store`` is omitted a SQLite :class:`Database` is opened at
    ``settings.database_path`` and its tables are created.
    """

    if settings is None:
        settings = load_settings()

    if data_store is None:
        database = Database(settings.database_path)
        database.initialize()
        logger.info("Using SQLite database at %s", settings.database_path)
        data_store = database

    auth = AuthenticationService(UserRepository(data_store), password_encryption)
    store_service = StoreService(StoreRepository(data_store))

    app = FastAPI(
        title="Storefront Management API",
        description="Manage stores and user accounts",
        version="1.0.0",
    )
    app.state.data_store = data_store
    app.state.authentication_service = auth
    app.state.store_service = store_service

    _seed_users(settings, auth)

    @app.get("/health")
    async def healthcheck() -> Dict[str, str]:
        return {"status": "ok"}

    auth_router = APIRouter()

    @auth_router.get("/auth/whoami", response_model=UserDTO)
    async def whoami(request: Request):
        user = auth.authenticate_basic(request.headers.get("authorization"))
        if user is None:
            error = ErrorResponse(status=status.HTTP_401_UNAUTHORIZED, message="Invalid authentication credentials")
            return JSONResponse(
                status_code=status.HTTP_401_UNAUTHORIZED,
                content=error.model_dump(),
                headers={"WWW-Authenticate": "Basic"},
            )
        return user_to_dto(user)

    prefix = settings.api_prefix
    app.include_router(StoreController(store_service, auth).router(), prefix=prefix)
    app.include_router(UserController(auth).router(), prefix=prefix)
    app.include_router(auth_router, prefix=prefix)

    return app


__all__ = ["create_app"]
