# api/domain/cadastro/entities.py
from __future__ import annotations

from dataclasses import dataclass, fields
from datetime import date, datetime
from decimal import Decimal
from enum import Enum

from .value_objects import normalizar_salario, vazio_para_none


class StatusCadastro(str, Enum):
    RASCUNHO = "rascunho"
    FINALIZADO = "finalizado"


def _sanitizar(instancia: object) -> None:
    """Strings vazias viram None em todos os campos da dataclass congelada."""
    for campo in fields(instancia):  # type: ignore[arg-type]
        valor = getattr(instancia, campo.name)
        limpo = vazio_para_none(valor)
        if limpo is not valor:
            object.__setattr__(instancia, campo.name, limpo)


@dataclass(frozen=True)
class Titular:
    """Dados descritivos do servidor. Cada campo corresponde a uma coluna de
    `titulares`; id, status e deleted_at ficam em CadastroCompleto."""
    nome: str
    cpf: str
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

    def __post_init__(self) -> None:
        _sanitizar(self)
        object.__setattr__(self, "salario_base", normalizar_salario(self.salario_base))


@dataclass(frozen=True)
class Conjuge:
    nome: str | None = None
    cpf: str | None = None
    data_nasc: date | None = None

    def __post_init__(self) -> None:
        _sanitizar(self)


@dataclass(frozen=True)
class Dependente:
    nome: str | None = None
    cpf: str | None = None
    parentesco: str | None = None
    data_nasc: date | None = None

    def __post_init__(self) -> None:
        _sanitizar(self)


@dataclass(frozen=True)
class Anexo:
    nome: str
    tipo: str | None
    conteudo: str | None  # data-URI ou base64 puro; None quando nao carregado
    id: int | None = None


@dataclass(frozen=True)
class CadastroCompleto:
    """Aggregate Root: titular + conjuge + dependentes + anexos."""
    id: int
    titular: Titular
    status: StatusCadastro
    deleted_at: datetime | None = None
    conjuge: Conjuge | None = None
    dependentes: tuple[Dependente, ...] = ()
    anexos: tuple[Anexo, ...] = ()

    @property
    def na_lixeira(self) -> bool:
        return self.deleted_at is not None


@dataclass(frozen=True)
class ResumoTitular:
    """Projecao estreita usada na listagem."""
    id: int
    matricula: str | None
    nome: str
    cpf: str
    cargo: str | None
    lotacao: str | None
    status: StatusCadastro


@dataclass(frozen=True)
class ItemLixeira:
    id: int
    nome: str
    cpf: str
    cargo: str | None
    deleted_at: datetime


CAMPOS_TITULAR: tuple[str, ...] = tuple(f.name for f in fields(Titular))
