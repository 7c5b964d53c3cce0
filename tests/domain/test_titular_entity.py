# tests/domain/test_titular_entity.py
from dataclasses import fields
from datetime import date, datetime
from decimal import Decimal

import pytest

from api.domain.cadastro.entities import (
    CAMPOS_TITULAR,
    CadastroCompleto,
    Conjuge,
    Dependente,
    StatusCadastro,
    Titular,
)
from api.domain.cadastro.value_objects import normalizar_salario, vazio_para_none


def test_string_vazia_vira_none():
    t = Titular(nome="Ana Silva", cpf="111.222.333-44", rg="", cargo="   ", data_nasc=None)
    assert t.rg is None
    assert t.cargo is None


def test_valores_preenchidos_sao_preservados():
    t = Titular(nome="Ana Silva", cpf="111.222.333-44", data_nasc=date(1990, 5, 10), uf="SP")
    assert t.data_nasc == date(1990, 5, 10)
    assert t.uf == "SP"


def test_conjuge_e_dependente_tambem_sao_sanitizados():
    c = Conjuge(nome="", cpf="", data_nasc=None)
    d = Dependente(nome="Filho", cpf="", parentesco="", data_nasc=None)
    assert c.nome is None and c.cpf is None
    assert d.nome == "Filho"
    assert d.cpf is None and d.parentesco is None


def test_salario_texto_com_virgula_decimal():
    t = Titular(nome="Ana", cpf="111.222.333-44", salario_base="R$ 3.500,75")  # type: ignore[arg-type]
    assert t.salario_base == Decimal("3500.75")


@pytest.mark.parametrize(
    ("entrada", "esperado"),
    [
        ("1200", Decimal("1200")),
        ("1.200,00", Decimal("1200.00")),
        ("3.500", Decimal("3500")),
        ("3500.75", Decimal("3500.75")),
        ("3500.5", Decimal("3500.5")),
        ("-3500.75", Decimal("3500.75")),
        ("-3.500,75", Decimal("3500.75")),
        (1500, Decimal("1500")),
        (1500.5, Decimal("1500.5")),
        (Decimal("99.90"), Decimal("99.90")),
        ("", None),
        ("R$ ", None),
        (None, None),
    ],
)
def test_normalizar_salario(entrada, esperado):
    assert normalizar_salario(entrada) == esperado


def test_normalizar_salario_invalido():
    with pytest.raises(ValueError, match="Salario base invalido"):
        normalizar_salario("1,2,3")


def test_vazio_para_none_nao_toca_outros_tipos():
    assert vazio_para_none(0) == 0
    assert vazio_para_none(False) is False
    assert vazio_para_none("x") == "x"


def test_campos_titular_seguem_ordem_da_dataclass():
    assert CAMPOS_TITULAR == tuple(f.name for f in fields(Titular))
    assert CAMPOS_TITULAR[:2] == ("nome", "cpf")
    assert "status" not in CAMPOS_TITULAR
    assert "deleted_at" not in CAMPOS_TITULAR


def test_titular_imutavel():
    t = Titular(nome="Ana", cpf="111.222.333-44")
    with pytest.raises(AttributeError):
        t.nome = "Outra"  # type: ignore[misc]


def test_cadastro_na_lixeira():
    t = Titular(nome="Ana", cpf="111.222.333-44")
    ativo = CadastroCompleto(id=1, titular=t, status=StatusCadastro.FINALIZADO)
    excluido = CadastroCompleto(
        id=1, titular=t, status=StatusCadastro.FINALIZADO, deleted_at=datetime(2025, 1, 1),
    )
    assert ativo.na_lixeira is False
    assert excluido.na_lixeira is True
