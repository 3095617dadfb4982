from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from app.api.v1.accounts.router import router as accounts_router
from app.api.v1.audit.router import router as audit_router
from app.api.v1.auth.router import router as auth_router
from app.api.v1.dashboard.router import router as dashboard_router
from app.api.v1.settings.router import router as settings_router
from app.api.v1.transactions.router import router as transactions_router
from app.api.v1.users.router import router as users_router
from app.core.config import settings
from app.core.logging import configure_logging


def create_app() -> FastAPI:
    configure_logging(settings.log_level, json_logs=settings.log_json)

    app = FastAPI(title="UMaT Finance")

    # CORS: allow the portal frontend to call this API
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # Routers
    app.include_router(auth_router)
    app.include_router(users_router)
    app.include_router(accounts_router)
    app.include_router(transactions_router)
    app.include_router(dashboard_router)
    app.include_router(audit_router)
    app.include_router(settings_router)

    return app


app = create_app()
