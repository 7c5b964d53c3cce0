# api/domain/cadastro/consulta.py
#
# Parametros da listagem de servidores.
#
# Invariant: o campo de ordenacao e a direcao so podem assumir valores da
# allow-list abaixo. Sao os unicos trechos interpolados no SQL da listagem;
# todo o resto vai como parametro.
from __future__ import annotations

from dataclasses import dataclass

from .entities import StatusCadastro

# chave aceita na query string -> coluna
CAMPOS_ORDENAVEIS: dict[str, str] = {
    "nome": "nome",
    "matricula": "matricula",
    "cargo": "cargo",
}


@dataclass(frozen=True)
class FiltrosListagem:
    busca: str | None = None
    cargo: str | None = None
    secretaria: str | None = None
    tipo_admissao: str | None = None
    status: StatusCadastro = StatusCadastro.FINALIZADO


@dataclass(frozen=True)
class Ordenacao:
    coluna: str = "nome"
    direcao: str = "ASC"

    @classmethod
    def a_partir_de(cls, sort_by: str | None, order: str | None) -> Ordenacao:
        """Campo desconhecido cai em nome; direcao desconhecida cai em ASC."""
        coluna = CAMPOS_ORDENAVEIS.get(sort_by or "", "nome")
        direcao = "DESC" if (order or "").strip().upper() == "DESC" else "ASC"
        return cls(coluna=coluna, direcao=direcao)


@dataclass(frozen=True)
class Paginacao:
    """limite <= 0 significa 'todas as linhas' (exportacao)."""
    pagina: int = 1
    limite: int = 10

    @property
    def paginada(self) -> bool:
        return self.limite > 0

    @property
    def offset(self) -> int:
        return (max(self.pagina, 1) - 1) * self.limite
