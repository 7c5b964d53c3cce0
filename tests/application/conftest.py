# tests/application/conftest.py
from __future__ import annotations

from collections.abc import Callable, Generator, Iterator
from contextlib import contextmanager
from dataclasses import dataclass, field

import duckdb
import pytest

from api.domain.auditoria.entities import AcaoAuditoria
from api.domain.cadastro.entities import Titular
from api.infrastructure.duckdb_connection import Database
from api.infrastructure.repositories.duckdb_cadastro_repo import DuckDBCadastroRepo


@dataclass
class AuditoriaFalsa:
    """Guarda as chamadas em memoria em vez de gravar."""
    registros: list[tuple[int | None, AcaoAuditoria, int | None, str]] = field(
        default_factory=list,
    )

    def registrar(
        self,
        admin_id: int | None,
        acao: AcaoAuditoria,
        alvo_id: int | None,
        detalhes: str,
    ) -> None:
        self.registros.append((admin_id, acao, alvo_id, detalhes))

    @property
    def acoes(self) -> list[AcaoAuditoria]:
        return [r[1] for r in self.registros]


@pytest.fixture()
def db() -> Generator[Database, None, None]:
    """DuckDB in-memory com o schema da aplicacao. Um banco por teste."""
    database = Database()
    database.inicializar_schema()
    yield database
    database.close()


@pytest.fixture()
def repo(db: Database) -> DuckDBCadastroRepo:
    return DuckDBCadastroRepo(db)


@pytest.fixture()
def auditoria() -> AuditoriaFalsa:
    return AuditoriaFalsa()


@pytest.fixture()
def novo_titular() -> Callable[..., Titular]:
    """Fabrica de Titular com dados minimos validos; kwargs sobrescrevem."""
    def _fabrica(**campos: object) -> Titular:
        base: dict[str, object] = {
            "nome": "Ana Silva",
            "cpf": "111.222.333-44",
            "matricula": "M-001",
            "cargo": "Analista",
            "secretaria": "Educacao",
            "lotacao": "Escola Central",
            "tipo_admissao": "Concurso",
        }
        base.update(campos)
        return Titular(**base)  # type: ignore[arg-type]
    return _fabrica


@pytest.fixture()
def contar(db: Database) -> Callable[[str], int]:
    def _contar(tabela: str) -> int:
        with db.cursor() as cur:
            row = cur.execute(f"SELECT count(*) FROM {tabela}").fetchone()  # noqa: S608
        assert row is not None
        return int(row[0])
    return _contar


class BancoComConcorrente(Database):
    """Database em que outra sessao grava logo antes do proximo commit.

    `concorrente` roda uma unica vez, por um cursor proprio em autocommit,
    depois de todos os comandos da transacao e antes do commit dela.
    """

    def __init__(self) -> None:
        super().__init__()
        self.concorrente: Callable[[duckdb.DuckDBPyConnection], None] | None = None

    @contextmanager
    def transacao(self) -> Iterator[duckdb.DuckDBPyConnection]:
        with super().transacao() as cur:
            yield cur
            acao, self.concorrente = self.concorrente, None
            if acao is not None:
                with self.cursor() as outro:
                    acao(outro)


@pytest.fixture()
def banco_concorrente() -> Generator[BancoComConcorrente, None, None]:
    database = BancoComConcorrente()
    database.inicializar_schema()
    yield database
    database.close()
