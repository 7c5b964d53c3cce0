# api/domain/administrador/exceptions.py
from __future__ import annotations


class ErroAdministrador(Exception):
    def __init__(self, mensagem: str) -> None:
        super().__init__(mensagem)
        self.mensagem = mensagem


class CredenciaisInvalidas(ErroAdministrador):
    pass


class AdministradorNaoEncontrado(ErroAdministrador):
    pass


class EmailJaCadastrado(ErroAdministrador):
    pass


class TokenInvalido(ErroAdministrador):
    pass


class ExclusaoNaoPermitida(ErroAdministrador):
    """Alvo inexistente ou com papel master."""


class SenhaInvalida(ErroAdministrador):
    pass


class FalhaEnvioEmail(ErroAdministrador):
    """A operacao foi gravada, mas o email nao saiu."""
