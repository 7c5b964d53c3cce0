# api/application/dtos/cadastro_dto.py
#
# Formato JSON do cadastro (camelCase) <-> entidades de dominio.
#
# Os campos do titular sao declarados um a um: nenhuma chave desconhecida da
# requisicao chega ao dominio ou ao SQL.
from __future__ import annotations

from datetime import date, datetime
from decimal import Decimal
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, model_validator
from pydantic.alias_generators import to_camel

from api.domain.cadastro.entities import (
    CAMPOS_TITULAR,
    Anexo,
    CadastroCompleto,
    Conjuge,
    Dependente,
    ItemLixeira,
    ResumoTitular,
    StatusCadastro,
    Titular,
)
from api.domain.cadastro.value_objects import normalizar_salario, vazio_para_none


class CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class _SanitizadoModel(CamelModel):
    @model_validator(mode="before")
    @classmethod
    def _vazio_para_none(cls, data: Any) -> Any:
        if isinstance(data, dict):
            return {k: vazio_para_none(v) for k, v in data.items()}
        return data


class TitularDTO(_SanitizadoModel):
    nome: str | None = None
    cpf: str | None = None
    rg: str | None = None
    data_emissao_rg: date | None = None
    orgao_emissor_rg: str | None = None
    num_ctps: str | None = None
    serie_ctps: str | None = None
    uf_ctps: str | None = None
    data_emissao_ctps: date | None = None
    num_titulo: str | None = None
    zona_titulo: str | None = None
    secao_titulo: str | None = None
    cidade_uf_titulo: str | None = None
    num_pis: str | None = None
    data_emissao_pis: date | None = None
    cnh: str | None = None
    registro_profissional: str | None = None
    data_nasc: date | None = None
    sexo: str | None = None
    raca: str | None = None
    estado_civil: str | None = None
    nacionalidade: str | None = None
    naturalidade: str | None = None
    grau_instrucao: str | None = None
    nome_pai: str | None = None
    nome_mae: str | None = None
    email: str | None = None
    telefone: str | None = None
    celular: str | None = None
    cep: str | None = None
    endereco: str | None = None
    numero: str | None = None
    bairro: str | None = None
    cidade: str | None = None
    uf: str | None = None
    matricula: str | None = None
    tipo_admissao: str | None = None
    data_admissao: date | None = None
    num_portaria: str | None = None
    tipo_cargo: str | None = None
    cargo: str | None = None
    regime_trabalho: str | None = None
    salario_base: Decimal | None = None
    secretaria: str | None = None
    setor: str | None = None
    unidade_trabalho: str | None = None
    lotacao: str | None = None
    foto_perfil: str | None = None

    @model_validator(mode="before")
    @classmethod
    def _normalizar_salario(cls, data: Any) -> Any:
        if isinstance(data, dict):
            for chave in ("salarioBase", "salario_base"):
                if chave in data:
                    data = {**data, chave: normalizar_salario(data[chave])}
        return data

    def to_domain(self) -> Titular:
        return Titular(**{campo: getattr(self, campo) for campo in CAMPOS_TITULAR})

    @classmethod
    def campos_de(cls, titular: Titular) -> dict[str, Any]:
        return {campo: getattr(titular, campo) for campo in CAMPOS_TITULAR}


class ConjugeDTO(_SanitizadoModel):
    tem_conjuge: bool = False
    nome: str | None = None
    cpf: str | None = None
    data_nasc: date | None = None

    def to_domain(self) -> Conjuge | None:
        if not self.tem_conjuge:
            return None
        return Conjuge(nome=self.nome, cpf=self.cpf, data_nasc=self.data_nasc)


class DependenteDTO(_SanitizadoModel):
    nome: str | None = None
    cpf: str | None = None
    parentesco: str | None = None
    data_nasc: date | None = None

    def to_domain(self) -> Dependente:
        return Dependente(
            nome=self.nome, cpf=self.cpf, parentesco=self.parentesco, data_nasc=self.data_nasc,
        )

    @classmethod
    def from_domain(cls, dep: Dependente) -> DependenteDTO:
        return cls(nome=dep.nome, cpf=dep.cpf, parentesco=dep.parentesco, data_nasc=dep.data_nasc)


class AnexoDTO(CamelModel):
    id: int | None = None
    nome: str
    tipo: str | None = None
    conteudo: str | None = None

    def to_domain(self) -> Anexo:
        return Anexo(nome=self.nome, tipo=self.tipo, conteudo=self.conteudo)

    @classmethod
    def from_domain(cls, anexo: Anexo) -> AnexoDTO:
        return cls(id=anexo.id, nome=anexo.nome, tipo=anexo.tipo, conteudo=anexo.conteudo)


class NovoAnexoDTO(CamelModel):
    nome: str = Field(min_length=1)
    tipo: str = Field(min_length=1)
    conteudo: str = Field(min_length=1)

    def to_domain(self) -> Anexo:
        return Anexo(nome=self.nome, tipo=self.tipo, conteudo=self.conteudo)


class CadastroPayloadDTO(CamelModel):
    """Corpo de POST /api/cadastro e PUT /api/servidor/{id}.

    anexos ausente (ou null) significa "nao mexer nos anexos" na substituicao;
    lista vazia significa "remover todos".
    """
    titular: TitularDTO
    conjuge: ConjugeDTO | None = None
    dependentes: list[DependenteDTO] = []
    anexos: list[AnexoDTO] | None = None
    status: StatusCadastro | None = None

    def conjuge_domain(self) -> Conjuge | None:
        return self.conjuge.to_domain() if self.conjuge else None

    def dependentes_domain(self) -> list[Dependente]:
        return [d.to_domain() for d in self.dependentes]

    def anexos_domain(self) -> list[Anexo] | None:
        if self.anexos is None:
            return None
        return [a.to_domain() for a in self.anexos]


class ConjugeRespostaDTO(CamelModel):
    tem_conjuge: bool
    nome: str = ""
    cpf: str = ""
    data_nasc: str = ""

    @classmethod
    def from_domain(cls, conjuge: Conjuge | None) -> ConjugeRespostaDTO:
        if conjuge is None:
            return cls(tem_conjuge=False)
        return cls(
            tem_conjuge=True,
            nome=conjuge.nome or "",
            cpf=conjuge.cpf or "",
            data_nasc=conjuge.data_nasc.isoformat() if conjuge.data_nasc else "",
        )


class CadastroCompletoDTO(TitularDTO):
    """Campos do titular no nivel raiz, mais id, status e os filhos."""
    id: int
    status: StatusCadastro
    deleted_at: datetime | None = None
    conjuge: ConjugeRespostaDTO
    dependentes: list[DependenteDTO]
    anexos: list[AnexoDTO]

    @classmethod
    def from_domain(cls, cadastro: CadastroCompleto) -> CadastroCompletoDTO:
        return cls(
            **TitularDTO.campos_de(cadastro.titular),
            id=cadastro.id,
            status=cadastro.status,
            deleted_at=cadastro.deleted_at,
            conjuge=ConjugeRespostaDTO.from_domain(cadastro.conjuge),
            dependentes=[DependenteDTO.from_domain(d) for d in cadastro.dependentes],
            anexos=[AnexoDTO.from_domain(a) for a in cadastro.anexos],
        )


class ResumoTitularDTO(CamelModel):
    id: int
    matricula: str | None
    nome: str
    cpf: str
    cargo: str | None
    lotacao: str | None
    status: StatusCadastro

    @classmethod
    def from_domain(cls, resumo: ResumoTitular) -> ResumoTitularDTO:
        return cls(
            id=resumo.id,
            matricula=resumo.matricula,
            nome=resumo.nome,
            cpf=resumo.cpf,
            cargo=resumo.cargo,
            lotacao=resumo.lotacao,
            status=resumo.status,
        )


class ListagemDTO(BaseModel):
    data: list[ResumoTitularDTO]
    total: int
    page: int
    limit: int


class ItemLixeiraDTO(BaseModel):
    id: int
    nome: str
    cpf: str
    cargo: str | None
    deleted_at: datetime

    @classmethod
    def from_domain(cls, item: ItemLixeira) -> ItemLixeiraDTO:
        return cls(
            id=item.id, nome=item.nome, cpf=item.cpf, cargo=item.cargo, deleted_at=item.deleted_at,
        )


class MensagemDTO(BaseModel):
    message: str
    id: int | None = None
