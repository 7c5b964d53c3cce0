# api/infrastructure/duckdb_connection.py
#
# Handle explicito para o banco DuckDB.
#
# Design decisions:
#   - Nenhum estado global: o handle e construido no lifespan da aplicacao (ou
#     pelos testes) e injetado nos repositorios.
#   - DuckDBPyConnection nao e thread-safe. Cada operacao abre um cursor
#     proprio (conn.cursor()), que compartilha a mesma instancia de banco mas
#     tem contexto de transacao independente. E o equivalente a um pool.
#   - transacao() cobre apenas os passos atomicos de escrita. Se commit falhar
#     o DuckDB desfaz a transacao sozinho, por isso o rollback so acontece para
#     excecoes levantadas dentro do bloco.
from __future__ import annotations

from collections.abc import Iterator
from contextlib import contextmanager
from pathlib import Path

import duckdb

SCHEMA_PATH = Path(__file__).parent / "schema.sql"


class Database:
    def __init__(self, path: str = ":memory:") -> None:
        if path != ":memory:":
            Path(path).parent.mkdir(parents=True, exist_ok=True)
        self._path = path
        self._conn = duckdb.connect(path)

    @property
    def path(self) -> str:
        return self._path

    def inicializar_schema(self) -> None:
        """Cria sequencias e tabelas. Idempotente (IF NOT EXISTS)."""
        self._conn.execute(SCHEMA_PATH.read_text(encoding="utf-8"))

    @contextmanager
    def cursor(self) -> Iterator[duckdb.DuckDBPyConnection]:
        cur = self._conn.cursor()
        try:
            yield cur
        finally:
            cur.close()

    @contextmanager
    def transacao(self) -> Iterator[duckdb.DuckDBPyConnection]:
        with self.cursor() as cur:
            cur.begin()
            try:
                yield cur
            except BaseException:
                cur.rollback()
                raise
            cur.commit()

    def close(self) -> None:
        self._conn.close()


def violou_chave_unica(err: duckdb.Error) -> bool:
    """Violacao de indice unico, no INSERT/UPDATE ou so no commit.

    Com duas transacoes concorrentes a colisao aparece como TransactionException
    ao confirmar a segunda. A mensagem varia entre versoes do DuckDB.
    """
    if not isinstance(err, (duckdb.ConstraintException, duckdb.TransactionException)):
        return False
    mensagem = str(err).lower()
    return "duplicate key" in mensagem or "unique constraint" in mensagem
