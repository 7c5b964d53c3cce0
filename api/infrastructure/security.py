# api/infrastructure/security.py
#
# Senhas com bcrypt (hash com salt) e sessoes de administrador em JWT HS256.
from __future__ import annotations

import secrets
from datetime import UTC, datetime, timedelta

import bcrypt
from jose import JWTError, jwt

from api.domain.administrador.entities import Papel
from api.domain.administrador.exceptions import TokenInvalido

ALGORITHM = "HS256"


def gerar_hash_senha(senha: str) -> str:
    return bcrypt.hashpw(senha.encode("utf-8"), bcrypt.gensalt()).decode("utf-8")


def verificar_senha(senha_plana: str, senha_hash: str) -> bool:
    """Hash ilegivel (ex.: valor legado em texto puro) conta como senha errada."""
    try:
        return bcrypt.checkpw(senha_plana.encode("utf-8"), senha_hash.encode("utf-8"))
    except ValueError:
        return False


def gerar_senha_temporaria() -> str:
    """8 caracteres hexadecimais."""
    return secrets.token_hex(4)


def gerar_token_reset() -> str:
    """40 caracteres hexadecimais."""
    return secrets.token_hex(20)


def criar_token_acesso(
    admin_id: int, papel: Papel, secret: str, expira_em_minutos: int,
) -> str:
    expira = datetime.now(UTC) + timedelta(minutes=expira_em_minutos)
    payload = {"sub": str(admin_id), "role": papel.value, "exp": expira}
    return jwt.encode(payload, secret, algorithm=ALGORITHM)


def decodificar_token_acesso(token: str, secret: str) -> tuple[int, Papel]:
    """(admin_id, papel) do token. Assinatura, expiracao e claims sao conferidas."""
    try:
        payload = jwt.decode(token, secret, algorithms=[ALGORITHM])
        return int(payload["sub"]), Papel(payload["role"])
    except (JWTError, KeyError, ValueError) as err:
        raise TokenInvalido("Token de acesso invalido ou expirado.") from err
