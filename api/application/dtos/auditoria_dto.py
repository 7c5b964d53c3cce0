# api/application/dtos/auditoria_dto.py
from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel

from api.domain.auditoria.entities import RegistroAuditoria


class RegistroAuditoriaDTO(BaseModel):
    id: int | None
    admin_id: int | None
    acao: str
    alvo_id: int | None
    detalhes: str
    data_hora: datetime

    @classmethod
    def from_domain(cls, registro: RegistroAuditoria) -> RegistroAuditoriaDTO:
        return cls(
            id=registro.id,
            admin_id=registro.admin_id,
            acao=registro.acao.value,
            alvo_id=registro.alvo_id,
            detalhes=registro.detalhes,
            data_hora=registro.data_hora,
        )
