# api/interfaces/api/main.py
from __future__ import annotations

import logging
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager
from pathlib import Path

from fastapi import FastAPI, Request, Response
from fastapi.middleware.cors import CORSMiddleware
from fastapi.staticfiles import StaticFiles

from api.application.services.administrador_service import AdministradorService
from api.application.services.auditoria_service import AuditoriaService
from api.infrastructure.config import get_settings
from api.infrastructure.duckdb_connection import Database
from api.infrastructure.email_service import EmailService
from api.infrastructure.repositories.duckdb_administrador_repo import DuckDBAdministradorRepo
from api.infrastructure.repositories.duckdb_auditoria_repo import DuckDBAuditoriaRepo
from api.interfaces.api.middleware.rate_limit import RateLimitMiddleware
from api.interfaces.api.routes.admin_routes import router as admin_router
from api.interfaces.api.routes.anexo_routes import router as anexo_router
from api.interfaces.api.routes.auth_routes import router as auth_router
from api.interfaces.api.routes.manutencao_routes import router as manutencao_router
from api.interfaces.api.routes.servidor_routes import router as servidor_router

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    settings = app.state.settings
    logging.basicConfig(
        level=settings.log_level,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    # Banco injetado (testes) pertence a quem injetou; so fechamos o nosso.
    proprio = app.state.database is None
    if proprio:
        app.state.database = Database(settings.duckdb_path)
    db: Database = app.state.database
    db.inicializar_schema()

    app.state.auditoria = AuditoriaService(DuckDBAuditoriaRepo(db))
    email_proprio = app.state.email_service is None
    if email_proprio:
        app.state.email_service = EmailService(
            api_key=settings.resend_api_key,
            remetente=settings.email_from,
            base_url=settings.app_base_url,
        )

    AdministradorService(
        repo=DuckDBAdministradorRepo(db),
        email_service=app.state.email_service,
        jwt_secret=settings.jwt_secret,
    ).garantir_master(settings.master_email, settings.master_password)
    logger.info("API iniciada (banco: %s)", db.path)

    yield

    app.state.auditoria.fechar()
    if email_proprio:
        app.state.email_service.close()
    if proprio:
        db.close()


def create_app(
    database: Database | None = None,
    email_service: EmailService | None = None,
) -> FastAPI:
    settings = get_settings()

    app = FastAPI(
        title="SICASV API",
        debug=settings.debug,  # NUNCA True em producao
        lifespan=lifespan,
        docs_url="/api/docs",
        redoc_url=None,
    )
    app.state.settings = settings
    app.state.database = database
    app.state.email_service = email_service

    @app.middleware("http")
    async def add_security_headers(request: Request, call_next: object) -> Response:
        response = await call_next(request)  # type: ignore[misc]
        response.headers["X-Content-Type-Options"] = "nosniff"
        response.headers["X-Frame-Options"] = "DENY"
        response.headers["Referrer-Policy"] = "strict-origin-when-cross-origin"
        return response  # type: ignore[return-value]

    app.add_middleware(RateLimitMiddleware)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=list(settings.cors_origins),
        allow_methods=["GET", "POST", "PUT", "DELETE"],
        allow_headers=["*"],
    )

    # manutencao ANTES de admin (path conflict: /admin/excluir-testes vs /admin/{admin_id})
    app.include_router(servidor_router, prefix="/api")
    app.include_router(anexo_router, prefix="/api")
    app.include_router(auth_router, prefix="/api")
    app.include_router(manutencao_router, prefix="/api")
    app.include_router(admin_router, prefix="/api")

    # Front-end estatico por ultimo: as rotas /api tem prioridade.
    frontend = Path(settings.frontend_dir)
    if frontend.is_dir():
        app.mount("/", StaticFiles(directory=frontend, html=True), name="frontend")

    return app


app = create_app()
