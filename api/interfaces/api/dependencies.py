# api/interfaces/api/dependencies.py
#
# Fabricas para Depends(). Nada de estado global: o banco, o servico de
# auditoria e o servico de email vivem em app.state, preenchido no lifespan.
from __future__ import annotations

import logging

from fastapi import Depends, Header, HTTPException, Request, status

from api.application.services.administrador_service import AdministradorService
from api.application.services.anexo_service import AnexoService
from api.application.services.auditoria_service import AuditoriaService
from api.application.services.backup_service import BackupService
from api.application.services.cadastro_service import CadastroService
from api.application.services.consulta_service import ConsultaService
from api.domain.administrador.entities import Papel
from api.domain.administrador.exceptions import TokenInvalido
from api.infrastructure.config import Settings
from api.infrastructure.duckdb_connection import Database
from api.infrastructure.email_service import EmailService
from api.infrastructure.repositories.duckdb_administrador_repo import DuckDBAdministradorRepo
from api.infrastructure.repositories.duckdb_backup_repo import DuckDBBackupRepo
from api.infrastructure.repositories.duckdb_cadastro_repo import DuckDBCadastroRepo
from api.infrastructure.security import decodificar_token_acesso

logger = logging.getLogger(__name__)


def get_database(request: Request) -> Database:
    return request.app.state.database  # type: ignore[no-any-return]


def get_app_settings(request: Request) -> Settings:
    return request.app.state.settings  # type: ignore[no-any-return]


def get_auditoria_service(request: Request) -> AuditoriaService:
    return request.app.state.auditoria  # type: ignore[no-any-return]


def get_email_service(request: Request) -> EmailService:
    return request.app.state.email_service  # type: ignore[no-any-return]


def get_cadastro_service(
    db: Database = Depends(get_database),  # noqa: B008
    auditoria: AuditoriaService = Depends(get_auditoria_service),  # noqa: B008
    settings: Settings = Depends(get_app_settings),  # noqa: B008
) -> CadastroService:
    return CadastroService(
        repo=DuckDBCadastroRepo(db),
        auditoria=auditoria,
        limite_anexos_bytes=settings.limite_anexos_bytes,
    )


def get_consulta_service(db: Database = Depends(get_database)) -> ConsultaService:  # noqa: B008
    return ConsultaService(repo=DuckDBCadastroRepo(db))


def get_anexo_service(
    db: Database = Depends(get_database),  # noqa: B008
    auditoria: AuditoriaService = Depends(get_auditoria_service),  # noqa: B008
    settings: Settings = Depends(get_app_settings),  # noqa: B008
) -> AnexoService:
    return AnexoService(
        repo=DuckDBCadastroRepo(db),
        auditoria=auditoria,
        limite_anexos_bytes=settings.limite_anexos_bytes,
    )


def get_administrador_service(
    db: Database = Depends(get_database),  # noqa: B008
    email_service: EmailService = Depends(get_email_service),  # noqa: B008
    settings: Settings = Depends(get_app_settings),  # noqa: B008
) -> AdministradorService:
    return AdministradorService(
        repo=DuckDBAdministradorRepo(db),
        email_service=email_service,
        jwt_secret=settings.jwt_secret,
        jwt_expire_minutes=settings.jwt_expire_minutes,
        reset_token_ttl_minutes=settings.reset_token_ttl_minutes,
    )


def get_backup_service(db: Database = Depends(get_database)) -> BackupService:  # noqa: B008
    return BackupService(repo=DuckDBBackupRepo(db))


def get_admin_id(x_admin_id: str | None = Header(None)) -> int | None:
    """Autor das acoes auditadas. Cabecalho ausente ou invalido vira None."""
    if x_admin_id is None or not x_admin_id.strip().isdigit():
        return None
    return int(x_admin_id)


def get_admin_autenticado(
    authorization: str | None = Header(None),
    settings: Settings = Depends(get_app_settings),  # noqa: B008
) -> tuple[int, Papel]:
    if not authorization or not authorization.startswith("Bearer "):
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Nao autenticado.",
            headers={"WWW-Authenticate": "Bearer"},
        )
    token = authorization.split(" ", 1)[1]
    try:
        return decodificar_token_acesso(token, settings.jwt_secret)
    except TokenInvalido as err:
        logger.info("Token rejeitado: %s", err.mensagem)
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail=err.mensagem,
            headers={"WWW-Authenticate": "Bearer"},
        ) from err


def require_master(
    admin: tuple[int, Papel] = Depends(get_admin_autenticado),  # noqa: B008
) -> int:
    admin_id, papel = admin
    if papel is not Papel.MASTER:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Acesso restrito ao administrador master.",
        )
    return admin_id
