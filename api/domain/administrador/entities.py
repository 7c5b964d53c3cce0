# api/domain/administrador/entities.py
from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from enum import Enum


class Papel(str, Enum):
    MASTER = "master"
    ADMIN = "admin"


@dataclass(frozen=True)
class Administrador:
    id: int
    email: str
    senha_hash: str
    papel: Papel
    primeiro_acesso: bool
    nome: str | None = None
    cpf: str | None = None
    telefone: str | None = None
    reset_token: str | None = None
    reset_expires: datetime | None = None

    def token_valido(self, token: str, agora: datetime) -> bool:
        """Recebe o instante de referencia; nunca chama datetime.now()."""
        if self.reset_token is None or self.reset_expires is None:
            return False
        return self.reset_token == token and self.reset_expires > agora


@dataclass(frozen=True)
class DadosAdministrador:
    """Campos editaveis de um administrador."""
    email: str
    nome: str | None = None
    cpf: str | None = None
    telefone: str | None = None

    def __post_init__(self) -> None:
        email = self.email.strip().lower()
        if not email:
            raise ValueError("Email do administrador nao pode ser vazio")
        object.__setattr__(self, "email", email)
