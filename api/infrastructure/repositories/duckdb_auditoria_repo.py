# api/infrastructure/repositories/duckdb_auditoria_repo.py
from __future__ import annotations

from api.domain.auditoria.entities import AcaoAuditoria, RegistroAuditoria
from api.infrastructure.duckdb_connection import Database


class DuckDBAuditoriaRepo:
    def __init__(self, db: Database) -> None:
        self._db = db

    def inserir(self, registro: RegistroAuditoria) -> None:
        with self._db.cursor() as cur:
            cur.execute(
                "INSERT INTO audit_logs (admin_id, acao, alvo_id, detalhes, data_hora) "
                "VALUES (?, ?, ?, ?, ?)",
                [
                    registro.admin_id,
                    registro.acao.value,
                    registro.alvo_id,
                    registro.detalhes,
                    registro.data_hora,
                ],
            )

    def listar_recentes(self, limit: int) -> list[RegistroAuditoria]:
        with self._db.cursor() as cur:
            rows = cur.execute(
                "SELECT id, admin_id, acao, alvo_id, detalhes, data_hora FROM audit_logs "
                "ORDER BY data_hora DESC, id DESC LIMIT ?",
                [limit],
            ).fetchall()
        return [
            RegistroAuditoria(
                id=int(r[0]),
                admin_id=r[1],
                acao=AcaoAuditoria(str(r[2])),
                alvo_id=r[3],
                detalhes=r[4] or "",
                data_hora=r[5],
            )
            for r in rows
        ]
