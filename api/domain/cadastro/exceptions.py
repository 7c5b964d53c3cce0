# api/domain/cadastro/exceptions.py
from __future__ import annotations


class ErroCadastro(Exception):
    """Base de todos os erros do cadastro de servidores."""

    def __init__(self, mensagem: str) -> None:
        super().__init__(mensagem)
        self.mensagem = mensagem


class ErroValidacao(ErroCadastro, ValueError):
    pass


class CadastroDuplicado(ErroCadastro):
    pass


class ConflitoNaGravacao(CadastroDuplicado):
    """Indice unico de CPF disparou no banco apesar da verificacao previa."""


class CadastroNaLixeira(ErroCadastro):
    pass


class AnexosExcedemLimite(ErroCadastro):
    pass


class CadastroNaoEncontrado(ErroCadastro):
    pass


class AnexoNaoEncontrado(ErroCadastro):
    pass


class ErroPersistencia(ErroCadastro):
    pass
