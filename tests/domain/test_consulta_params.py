# tests/domain/test_consulta_params.py
import pytest

from api.domain.cadastro.consulta import FiltrosListagem, Ordenacao, Paginacao
from api.domain.cadastro.entities import StatusCadastro


def test_ordenacao_padrao_nome_asc():
    o = Ordenacao.a_partir_de(None, None)
    assert (o.coluna, o.direcao) == ("nome", "ASC")


@pytest.mark.parametrize("campo", ["nome", "matricula", "cargo"])
def test_ordenacao_campos_permitidos(campo):
    assert Ordenacao.a_partir_de(campo, "asc").coluna == campo


@pytest.mark.parametrize("campo", ["unknown_field", "cpf", "nome; DROP TABLE titulares", ""])
def test_ordenacao_campo_desconhecido_cai_em_nome(campo):
    assert Ordenacao.a_partir_de(campo, None).coluna == "nome"


@pytest.mark.parametrize(("order", "esperado"), [("desc", "DESC"), ("DESC", "DESC"),
                                                 ("Desc ", "DESC"), ("asc", "ASC"),
                                                 ("sideways", "ASC")])
def test_ordenacao_direcao_case_insensitive(order, esperado):
    assert Ordenacao.a_partir_de("nome", order).direcao == esperado


def test_paginacao_offset():
    assert Paginacao(pagina=1, limite=10).offset == 0
    assert Paginacao(pagina=2, limite=10).offset == 10
    assert Paginacao(pagina=0, limite=10).offset == 0


def test_paginacao_limite_nao_positivo_traz_tudo():
    assert Paginacao(limite=10).paginada is True
    assert Paginacao(limite=0).paginada is False
    assert Paginacao(limite=-1).paginada is False


def test_filtro_status_padrao_finalizado():
    assert FiltrosListagem().status is StatusCadastro.FINALIZADO
