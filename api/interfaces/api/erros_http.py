# api/interfaces/api/erros_http.py
#
# Traducao de erros de dominio para HTTPException. As rotas capturam o erro
# base do dominio e chamam http_error(); excecoes inesperadas seguem para o
# FastAPI.
from __future__ import annotations

import logging
from urllib.parse import quote

from fastapi import HTTPException

from api.domain.administrador.exceptions import (
    AdministradorNaoEncontrado,
    CredenciaisInvalidas,
    EmailJaCadastrado,
    ErroAdministrador,
    ExclusaoNaoPermitida,
    FalhaEnvioEmail,
    SenhaInvalida,
    TokenInvalido,
)
from api.domain.cadastro.exceptions import (
    AnexoNaoEncontrado,
    AnexosExcedemLimite,
    CadastroDuplicado,
    CadastroNaLixeira,
    CadastroNaoEncontrado,
    ErroCadastro,
    ErroPersistencia,
    ErroValidacao,
)

logger = logging.getLogger(__name__)

_STATUS: dict[type[Exception], int] = {
    ErroValidacao: 422,
    CadastroDuplicado: 409,
    CadastroNaLixeira: 409,
    AnexosExcedemLimite: 413,
    CadastroNaoEncontrado: 404,
    AnexoNaoEncontrado: 404,
    ErroPersistencia: 500,
    CredenciaisInvalidas: 401,
    AdministradorNaoEncontrado: 404,
    EmailJaCadastrado: 409,
    TokenInvalido: 400,
    ExclusaoNaoPermitida: 403,
    SenhaInvalida: 422,
    FalhaEnvioEmail: 500,
}


def http_error(err: ErroCadastro | ErroAdministrador) -> HTTPException:
    # A classe mais especifica vence (ConflitoNaGravacao herda de CadastroDuplicado).
    status = next((_STATUS[c] for c in type(err).__mro__ if c in _STATUS), 500)
    if status >= 500:
        logger.error("%s: %s", type(err).__name__, err.mensagem)
    return HTTPException(status_code=status, detail=err.mensagem)


def content_disposition(nome: str, inline: bool = False) -> str:
    """Cabecalho com fallback ASCII e filename* em UTF-8 (RFC 6266)."""
    ascii_nome = nome.encode("ascii", "replace").decode("ascii").replace('"', "_")
    tipo = "inline" if inline else "attachment"
    return f"{tipo}; filename=\"{ascii_nome}\"; filename*=UTF-8''{quote(nome)}"
