# api/domain/auditoria/entities.py
from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from enum import Enum


class AcaoAuditoria(str, Enum):
    CRIACAO = "CRIACAO"
    EDICAO = "EDICAO"
    EXCLUSAO = "EXCLUSAO"
    RESTAURACAO = "RESTAURACAO"
    EXCLUSAO_PERMANENTE = "EXCLUSAO_PERMANENTE"
    UPLOAD_ANEXO = "UPLOAD_ANEXO"
    LIMPEZA_TESTES = "LIMPEZA_TESTES"


@dataclass(frozen=True)
class RegistroAuditoria:
    """Entrada imutavel do log de auditoria (append-only)."""
    acao: AcaoAuditoria
    data_hora: datetime
    admin_id: int | None = None
    alvo_id: int | None = None
    detalhes: str = ""
    id: int | None = None
