# api/domain/administrador/repository.py
from __future__ import annotations

from datetime import datetime
from typing import Protocol

from .entities import Administrador, DadosAdministrador, Papel


class AdministradorRepository(Protocol):
    def buscar_por_email(self, email: str) -> Administrador | None: ...
    def buscar_por_id(self, admin_id: int) -> Administrador | None: ...
    def buscar_por_reset_token(self, token: str) -> Administrador | None: ...
    def listar(self) -> list[Administrador]: ...
    def inserir(
        self, dados: DadosAdministrador, senha_hash: str, papel: Papel, primeiro_acesso: bool,
    ) -> int: ...
    def atualizar_dados(self, admin_id: int, dados: DadosAdministrador) -> bool: ...
    def atualizar_senha(self, admin_id: int, senha_hash: str, primeiro_acesso: bool | None) -> bool: ...
    def gravar_reset_token(self, admin_id: int, token: str | None, expira_em: datetime | None) -> None: ...
    def excluir_nao_master(self, admin_id: int) -> bool: ...
