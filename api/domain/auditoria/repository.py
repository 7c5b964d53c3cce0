# api/domain/auditoria/repository.py
from __future__ import annotations

from typing import Protocol

from .entities import AcaoAuditoria, RegistroAuditoria


class AuditoriaRepository(Protocol):
    def inserir(self, registro: RegistroAuditoria) -> None: ...
    def listar_recentes(self, limit: int) -> list[RegistroAuditoria]: ...


class RegistradorAuditoria(Protocol):
    """Colaborador best-effort: nunca levanta excecao para quem chama."""

    def registrar(
        self,
        admin_id: int | None,
        acao: AcaoAuditoria,
        alvo_id: int | None,
        detalhes: str,
    ) -> None: ...
