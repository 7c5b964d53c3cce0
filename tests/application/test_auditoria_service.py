# tests/application/test_auditoria_service.py
import logging

import pytest

from api.application.services.auditoria_service import AuditoriaService
from api.domain.auditoria.entities import AcaoAuditoria, RegistroAuditoria
from api.infrastructure.repositories.duckdb_auditoria_repo import DuckDBAuditoriaRepo


class RepoQuebrado:
    def inserir(self, registro: RegistroAuditoria) -> None:
        raise RuntimeError("disco cheio")

    def listar_recentes(self, limit: int) -> list[RegistroAuditoria]:
        return []


def test_registra_em_segundo_plano(db):
    service = AuditoriaService(DuckDBAuditoriaRepo(db), max_workers=1)
    service.registrar(1, AcaoAuditoria.CRIACAO, 10, "Cadastro criado: Ana")
    service.registrar(1, AcaoAuditoria.EDICAO, 10, "Cadastro atualizado: Ana")
    service.registrar(None, AcaoAuditoria.EXCLUSAO, 10, "Cadastro movido para a lixeira")
    service.aguardar_pendentes(timeout=5)

    recentes = service.listar_recentes()
    assert [r.acao for r in recentes] == [
        AcaoAuditoria.EXCLUSAO, AcaoAuditoria.EDICAO, AcaoAuditoria.CRIACAO,
    ]
    assert recentes[0].admin_id is None
    assert recentes[-1].detalhes == "Cadastro criado: Ana"
    assert service.listar_recentes(limit=1)[0].acao is AcaoAuditoria.EXCLUSAO
    service.fechar()


def test_falha_de_gravacao_e_logada_e_nao_propaga(caplog: pytest.LogCaptureFixture):
    service = AuditoriaService(RepoQuebrado())
    with caplog.at_level(logging.ERROR):
        service.registrar(1, AcaoAuditoria.CRIACAO, 10, "x")
        service.aguardar_pendentes(timeout=5)
    service.fechar()
    assert "Falha ao gravar auditoria CRIACAO" in caplog.text


def test_registrar_apos_fechar_descarta(db, caplog: pytest.LogCaptureFixture):
    repo = DuckDBAuditoriaRepo(db)
    service = AuditoriaService(repo)
    service.fechar()
    service.registrar(1, AcaoAuditoria.CRIACAO, 10, "x")
    assert "descartada" in caplog.text
    assert repo.listar_recentes(10) == []
