import logging

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from uvicorn.middleware.proxy_headers import ProxyHeadersMiddleware

from core.auth import LocalCredentialAuthenticator, build_authenticator
from core.config import Settings, settings as default_settings
from core.log_config import configure_logging
from routers import analytics_router, auth_router, chat_gateway, notification_router
from routers import project_router, task_router, team_router
from schemas.validation import EntityValidationError
from storage import Storage, build_storage

logger = logging.getLogger(__name__)

DEGRADED_HEADER = "X-Storage-Degraded"


def create_app(settings: Settings | None = None, storage: Storage | None = None) -> FastAPI:
    settings = settings or default_settings
    configure_logging(settings.LOG_LEVEL)

    app = FastAPI(title="SynergySphere API")
    app.state.settings = settings
    app.state.storage = storage if storage is not None else build_storage(settings)
    app.state.authenticator = build_authenticator(settings, app.state.storage)
    app.state.local_authenticator = LocalCredentialAuthenticator(settings, app.state.storage)
    app.state.connections = chat_gateway.ConnectionManager()
    logger.info(
        f"SynergySphere starting: environment={settings.ENVIRONMENT} "
        f"storage={app.state.storage.name} auth={app.state.authenticator.mode}"
    )

    # Respect X-Forwarded-Proto/Host when behind a proxy (Docker/nginx/etc.)
    app.add_middleware(ProxyHeadersMiddleware, trusted_hosts="*")

    origins = settings.cors_origins
    app.add_middleware(
        CORSMiddleware,
        allow_origins=origins,
        # Browsers refuse credentialed requests against a wildcard origin.
        allow_credentials="*" not in origins,
        allow_methods=["*"],
        allow_headers=["*"],
        expose_headers=["*"],
    )

    @app.middleware("http")
    async def flag_degraded_storage(request: Request, call_next):
        response = await call_next(request)
        if request.app.state.storage.degraded:
            response.headers[DEGRADED_HEADER] = "true"
        return response

    @app.exception_handler(EntityValidationError)
    async def validation_error_handler(request: Request, exc: EntityValidationError):
        return JSONResponse(status_code=400, content={"detail": str(exc)})

    @app.exception_handler(Exception)
    async def unhandled_error_handler(request: Request, exc: Exception):
        logger.exception(f"Unhandled error on {request.method} {request.url.path}")
        return JSONResponse(status_code=500, content={"detail": "Internal server error"})

    app.include_router(auth_router.router)
    app.include_router(project_router.router)
    app.include_router(task_router.router)
    app.include_router(team_router.router)
    app.include_router(analytics_router.router)
    app.include_router(notification_router.router)
    app.include_router(chat_gateway.router)

    @app.get("/")
    def root():
        return {"message": "SynergySphere API Ready"}

    return app


app = create_app()
