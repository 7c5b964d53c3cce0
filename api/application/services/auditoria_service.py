# api/application/services/auditoria_service.py
#
# Registro de auditoria fire-and-forget.
#
# Design decisions:
#   - registrar() agenda a gravacao num ThreadPoolExecutor e retorna na hora;
#     a operacao que disparou o registro nunca espera nem falha por causa dele.
#   - Falhas de gravacao sao logadas com logger.exception dentro da propria
#     tarefa. Nenhuma excecao sai de registrar().
#   - O instante e capturado no momento da chamada, nao no momento da escrita.
#   - aguardar_pendentes() existe para shutdown ordenado e para os testes.
from __future__ import annotations

import logging
import threading
from concurrent.futures import Future, ThreadPoolExecutor, wait
from datetime import datetime

from api.domain.auditoria.entities import AcaoAuditoria, RegistroAuditoria
from api.domain.auditoria.repository import AuditoriaRepository

logger = logging.getLogger(__name__)


class AuditoriaService:
    def __init__(self, repo: AuditoriaRepository, max_workers: int = 2) -> None:
        self._repo = repo
        self._executor = ThreadPoolExecutor(max_workers=max_workers, thread_name_prefix="auditoria")
        self._pendentes: set[Future[None]] = set()
        self._lock = threading.Lock()

    def registrar(
        self,
        admin_id: int | None,
        acao: AcaoAuditoria,
        alvo_id: int | None,
        detalhes: str,
    ) -> None:
        registro = RegistroAuditoria(
            acao=acao,
            data_hora=datetime.now(),
            admin_id=admin_id,
            alvo_id=alvo_id,
            detalhes=detalhes,
        )
        try:
            future = self._executor.submit(self._gravar, registro)
        except RuntimeError:
            # Executor ja encerrado (shutdown em andamento).
            logger.warning("Auditoria descartada apos shutdown: %s alvo=%s", acao.value, alvo_id)
            return
        with self._lock:
            self._pendentes.add(future)
        future.add_done_callback(self._descartar)

    def listar_recentes(self, limit: int = 100) -> list[RegistroAuditoria]:
        return self._repo.listar_recentes(limit)

    def aguardar_pendentes(self, timeout: float | None = None) -> None:
        with self._lock:
            pendentes = list(self._pendentes)
        wait(pendentes, timeout=timeout)

    def fechar(self) -> None:
        self._executor.shutdown(wait=True)

    def _gravar(self, registro: RegistroAuditoria) -> None:
        try:
            self._repo.inserir(registro)
        except Exception:
            logger.exception(
                "Falha ao gravar auditoria %s alvo=%s", registro.acao.value, registro.alvo_id,
            )

    def _descartar(self, future: Future[None]) -> None:
        with self._lock:
            self._pendentes.discard(future)
