# api/application/dtos/administrador_dto.py
from __future__ import annotations

from pydantic import BaseModel

from api.domain.administrador.entities import Administrador, DadosAdministrador

from .cadastro_dto import CamelModel


class LoginDTO(BaseModel):
    email: str
    senha: str


class SessaoDTO(CamelModel):
    message: str
    token: str
    role: str
    id: int
    primeiro_acesso: bool


class EmailDTO(BaseModel):
    email: str


class RedefinirSenhaDTO(CamelModel):
    token: str
    nova_senha: str


class DefinirSenhaDTO(BaseModel):
    id: int | None = None
    senha: str


class SenhaDTO(BaseModel):
    senha: str


class DadosAdministradorDTO(BaseModel):
    email: str
    nome: str | None = None
    cpf: str | None = None
    telefone: str | None = None

    def to_domain(self) -> DadosAdministrador:
        return DadosAdministrador(
            email=self.email, nome=self.nome, cpf=self.cpf, telefone=self.telefone,
        )


class AdministradorDTO(BaseModel):
    """Nunca expoe hash de senha nem token de reset."""
    id: int
    nome: str | None
    cpf: str | None
    telefone: str | None
    email: str
    role: str

    @classmethod
    def from_domain(cls, admin: Administrador) -> AdministradorDTO:
        return cls(
            id=admin.id,
            nome=admin.nome,
            cpf=admin.cpf,
            telefone=admin.telefone,
            email=admin.email,
            role=admin.papel.value,
        )
