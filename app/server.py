import logging

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from app.auth import routes as auth_router
from app.auth.security import BcryptPasswordHasher, TokenService
from app.auth.service import guard_unparsed_request
from app.core.config import Settings
from app.core.database import create_session_factory, init_models
from app.core.errors import register_exception_handlers
from app.goals import routes as goals_router
from app.progress import routes as progress_router
from app.system import routes as system_router

logger = logging.getLogger(__name__)

API_PREFIX = "/api"


def create_app(settings: Settings) -> FastAPI:
    """
    Builds the application around an already validated ``Settings``.

    The token service, password hasher and session factory are created once
    here and shared through ``app.state``.
    """
    app = FastAPI(
        title="Fitness Goal Tracker API",
        version="1.0.0",
        description="Backend for tracking fitness goals and the progress logged against them.",
    )

    engine, session_factory = create_session_factory(settings)
    app.state.settings = settings
    app.state.engine = engine
    app.state.session_factory = session_factory
    app.state.token_service = TokenService(
        settings.SECRET_KEY,
        algorithm=settings.ALGORITHM,
        expire_minutes=settings.ACCESS_TOKEN_EXPIRE_MINUTES,
    )
    app.state.password_hasher = BcryptPasswordHasher(rounds=settings.BCRYPT_ROUNDS)

    # CORS config
    origins = settings.cors_origins
    app.add_middleware(
        CORSMiddleware,
        allow_origins=origins,
        allow_credentials="*" not in origins,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    register_exception_handlers(app, settings, auth_guard=guard_unparsed_request)

    # Routers
    app.include_router(system_router.router)
    app.include_router(auth_router.router, prefix=API_PREFIX)
    app.include_router(goals_router.router, prefix=API_PREFIX)
    app.include_router(progress_router.router, prefix=API_PREFIX)

    # DB Tables
    @app.on_event("startup")
    def create_tables():
        init_models(engine)
        logger.info("Database ready (%s mode)", settings.ENVIRONMENT)

    @app.on_event("shutdown")
    def close_engine():
        engine.dispose()
        logger.info("Database connections closed")

    return app
