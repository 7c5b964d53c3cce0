# api/infrastructure/repositories/duckdb_backup_repo.py
#
# Leitura e substituicao integral das tabelas para backup/restore em Parquet.
#
# Design decisions:
#   - Cada tabela vira um DataFrame Polars com schema explicito derivado do
#     information_schema. DECIMAL vai como texto e volta via CAST, sem perda.
#   - A leitura de cada tabela e um unico SELECT; a codificacao em Parquet
#     acontece depois, fora de qualquer transacao.
#   - O restore carrega os arquivos com read_parquet() dentro de UMA transacao:
#     apaga tudo (filhas primeiro), insere as colunas presentes tanto na tabela
#     quanto no arquivo, e avanca as sequencias para alem dos ids restaurados.
#     Qualquer falha desfaz o restore inteiro.
from __future__ import annotations

import logging
from pathlib import Path

import duckdb
import polars as pl

from api.domain.cadastro.exceptions import ErroPersistencia
from api.infrastructure.duckdb_connection import Database

logger = logging.getLogger(__name__)

# Ordem de insercao: pais antes das filhas. A exclusao usa a ordem inversa.
TABELAS: tuple[str, ...] = (
    "administradores",
    "titulares",
    "conjuges",
    "dependentes",
    "anexos",
    "audit_logs",
)

_TIPOS_POLARS: dict[str, pl.DataType] = {
    "INTEGER": pl.Int32(),
    "BIGINT": pl.Int64(),
    "BOOLEAN": pl.Boolean(),
    "DATE": pl.Date(),
    "TIMESTAMP": pl.Datetime("us"),
}


def _colunas(cur: duckdb.DuckDBPyConnection, tabela: str) -> list[tuple[str, str]]:
    """(nome, tipo DuckDB) na ordem de definicao da tabela."""
    rows = cur.execute(
        "SELECT column_name, data_type FROM information_schema.columns "
        "WHERE table_name = ? ORDER BY ordinal_position",
        [tabela],
    ).fetchall()
    return [(str(r[0]), str(r[1])) for r in rows]


def _avancar_sequencia(cur: duckdb.DuckDBPyConnection, tabela: str) -> None:
    """Garante que o proximo nextval da sequencia seja maior que max(id)."""
    row = cur.execute(f"SELECT max(id) FROM {tabela}").fetchone()  # noqa: S608
    maior_id = int(row[0]) if row and row[0] is not None else 0
    sequencia = f"seq_{tabela}"
    atual_row = cur.execute(f"SELECT nextval('{sequencia}')").fetchone()  # noqa: S608
    atual = int(atual_row[0]) if atual_row else 0
    faltam = maior_id - atual
    if faltam > 0:
        cur.execute(
            f"SELECT max(nextval('{sequencia}')) FROM range(?)",  # noqa: S608
            [faltam],
        )


class DuckDBBackupRepo:
    def __init__(self, db: Database) -> None:
        self._db = db

    def ler_tabela(self, tabela: str) -> pl.DataFrame:
        if tabela not in TABELAS:
            raise ValueError(f"Tabela desconhecida: {tabela}")
        with self._db.cursor() as cur:
            colunas = _colunas(cur, tabela)
            nomes = ", ".join(nome for nome, _ in colunas)
            rows = cur.execute(f"SELECT {nomes} FROM {tabela} ORDER BY id").fetchall()  # noqa: S608

        schema = {nome: _TIPOS_POLARS.get(tipo, pl.Utf8()) for nome, tipo in colunas}
        if not rows:
            return pl.DataFrame(schema=schema)

        decimais = {i for i, (_, tipo) in enumerate(colunas) if tipo.startswith("DECIMAL")}
        if decimais:
            rows = [
                tuple(
                    str(valor) if i in decimais and valor is not None else valor
                    for i, valor in enumerate(row)
                )
                for row in rows
            ]
        return pl.DataFrame(rows, schema=schema, orient="row")

    def substituir_tudo(self, arquivos: dict[str, Path]) -> dict[str, int]:
        """Troca o conteudo de todas as tabelas pelos Parquet informados.

        Args:
            arquivos: nome da tabela -> caminho do .parquet. Deve cobrir TABELAS.

        Returns:
            Quantidade de linhas restauradas por tabela.
        """
        faltando = [t for t in TABELAS if t not in arquivos]
        if faltando:
            raise ValueError(f"Backup incompleto, faltam tabelas: {', '.join(faltando)}")

        contagem: dict[str, int] = {}
        try:
            with self._db.transacao() as cur:
                for tabela in reversed(TABELAS):
                    cur.execute(f"DELETE FROM {tabela}")  # noqa: S608

                for tabela in TABELAS:
                    posix_path = arquivos[tabela].as_posix()
                    no_arquivo = {
                        str(r[0])
                        for r in cur.execute(
                            f"SELECT name FROM parquet_schema('{posix_path}')"  # noqa: S608
                        ).fetchall()
                    }
                    compartilhadas = [(n, t) for n, t in _colunas(cur, tabela) if n in no_arquivo]
                    if not compartilhadas:
                        raise ValueError(f"Arquivo de {tabela} nao tem colunas reconhecidas")
                    destino = ", ".join(n for n, _ in compartilhadas)
                    origem = ", ".join(f"CAST({n} AS {t}) AS {n}" for n, t in compartilhadas)
                    cur.execute(
                        f"INSERT INTO {tabela} ({destino}) "  # noqa: S608
                        f"SELECT {origem} FROM read_parquet('{posix_path}')"
                    )
                    total = cur.execute(f"SELECT count(*) FROM {tabela}").fetchone()  # noqa: S608
                    contagem[tabela] = int(total[0]) if total else 0

                for tabela in TABELAS:
                    _avancar_sequencia(cur, tabela)
        except duckdb.Error as err:
            raise ErroPersistencia(f"Erro ao restaurar backup: {err}") from err

        logger.info("Backup restaurado: %s", contagem)
        return contagem
