# tests/domain/test_administrador_entity.py
from datetime import datetime, timedelta

import pytest

from api.domain.administrador.entities import Administrador, DadosAdministrador, Papel

AGORA = datetime(2026, 3, 1, 12, 0, 0)


def _admin(token: str | None, expira: datetime | None) -> Administrador:
    return Administrador(
        id=2,
        email="ana@orgao.gov.br",
        senha_hash="x",
        papel=Papel.ADMIN,
        primeiro_acesso=False,
        reset_token=token,
        reset_expires=expira,
    )


def test_token_valido_dentro_do_prazo():
    admin = _admin("abc", AGORA + timedelta(minutes=5))
    assert admin.token_valido("abc", AGORA) is True


def test_token_expirado():
    admin = _admin("abc", AGORA - timedelta(seconds=1))
    assert admin.token_valido("abc", AGORA) is False


def test_token_diferente():
    admin = _admin("abc", AGORA + timedelta(minutes=5))
    assert admin.token_valido("xyz", AGORA) is False


def test_sem_token_gravado():
    assert _admin(None, None).token_valido("abc", AGORA) is False


def test_email_normalizado():
    dados = DadosAdministrador(email="  Ana@Orgao.GOV.br ")
    assert dados.email == "ana@orgao.gov.br"


def test_email_vazio_rejeitado():
    with pytest.raises(ValueError):
        DadosAdministrador(email="   ")
