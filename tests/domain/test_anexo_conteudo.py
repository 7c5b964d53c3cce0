# tests/domain/test_anexo_conteudo.py
import pytest

from api.domain.cadastro.value_objects import (
    decodificar_conteudo,
    e_data_uri,
    payload_base64,
    tamanho_decodificado,
)


def test_data_uri_png_decodifica_mime_e_bytes():
    conteudo = decodificar_conteudo("data:image/png;base64,QUJD")
    assert conteudo.mime == "image/png"
    assert conteudo.dados == b"ABC"


def test_base64_puro_sem_prefixo():
    conteudo = decodificar_conteudo("QUJD")
    assert conteudo.mime is None
    assert conteudo.dados == b"ABC"


def test_mime_com_sinal_e_ponto():
    uri = "data:application/vnd.openxmlformats-officedocument.wordprocessingml.document;base64,QUJD"
    assert decodificar_conteudo(uri).mime == (
        "application/vnd.openxmlformats-officedocument.wordprocessingml.document"
    )


def test_base64_invalido():
    with pytest.raises(ValueError, match="base64"):
        decodificar_conteudo("QUJ")


def test_e_data_uri():
    assert e_data_uri("data:image/jpeg;base64,QUJD")
    assert not e_data_uri("QUJD")


def test_payload_remove_prefixo_ate_a_primeira_virgula():
    assert payload_base64("data:image/png;base64,QUJD") == "QUJD"
    assert payload_base64("QUJD") == "QUJD"


def test_tamanho_decodificado_estimado():
    # 4 caracteres base64 -> 3 bytes
    assert tamanho_decodificado("data:image/png;base64,QUJD") == 3
    assert tamanho_decodificado("QUJDREVG") == 6
    assert tamanho_decodificado("") == 0
    assert tamanho_decodificado(None) == 0
