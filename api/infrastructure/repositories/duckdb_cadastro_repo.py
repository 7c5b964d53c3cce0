# api/infrastructure/repositories/duckdb_cadastro_repo.py
#
# Repositorio do agregado titular (titulares + conjuges + dependentes + anexos).
#
# Design decisions:
#   - O mapeamento campo -> coluna vem da dataclass Titular (CAMPOS_TITULAR).
#     Nenhum dict vindo da requisicao chega ao SQL.
#   - Os unicos trechos interpolados no SQL sao nomes de colunas internos e a
#     ordenacao ja validada pela allow-list de Ordenacao. Valores vao sempre
#     como parametros.
#   - transacao() converte erros do DuckDB em erros de dominio: violacao do
#     indice unico de CPF vira ConflitoNaGravacao, o resto vira ErroPersistencia.
#   - Leituras que combinam varias consultas rodam numa transacao curta para
#     enxergar um snapshot consistente.
from __future__ import annotations

from collections.abc import Iterator
from contextlib import contextmanager
from datetime import datetime

import duckdb

from api.domain.cadastro.consulta import FiltrosListagem, Ordenacao, Paginacao
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
from api.domain.cadastro.exceptions import ConflitoNaGravacao, ErroPersistencia
from api.infrastructure.duckdb_connection import Database, violou_chave_unica

_COLUNAS_TITULAR = ", ".join(CAMPOS_TITULAR)
_SELECT_TITULAR = f"SELECT id, {_COLUNAS_TITULAR}, status, deleted_at FROM titulares"  # noqa: S608
_INSERT_TITULAR = (
    f"INSERT INTO titulares ({_COLUNAS_TITULAR}, status) "  # noqa: S608
    f"VALUES ({', '.join('?' for _ in CAMPOS_TITULAR)}, ?) RETURNING id"
)
_TABELAS_FILHAS = ("anexos", "dependentes", "conjuges")


def _padrao_contem(texto: str) -> str:
    """Substring para ILIKE, escapando os curingas digitados pelo usuario."""
    escapado = texto.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")
    return f"%{escapado}%"


def montar_filtros(filtros: FiltrosListagem) -> tuple[str, list[object]]:
    """Clausula WHERE (sempre com deleted_at IS NULL) e seus parametros."""
    condicoes: list[str] = []
    params: list[object] = []

    if filtros.busca:
        condicoes.append(
            "(nome ILIKE ? ESCAPE '\\' OR cpf ILIKE ? ESCAPE '\\' OR matricula ILIKE ? ESCAPE '\\')"
        )
        padrao = _padrao_contem(filtros.busca)
        params.extend([padrao, padrao, padrao])
    if filtros.cargo:
        condicoes.append("cargo ILIKE ? ESCAPE '\\'")
        params.append(_padrao_contem(filtros.cargo))
    if filtros.secretaria:
        condicoes.append("secretaria ILIKE ? ESCAPE '\\'")
        params.append(_padrao_contem(filtros.secretaria))
    if filtros.tipo_admissao:
        condicoes.append("tipo_admissao = ?")
        params.append(filtros.tipo_admissao)

    condicoes.append("status = ?")
    params.append(filtros.status.value)

    # Soft delete: nunca aparece na listagem, independente do status pedido.
    condicoes.append("deleted_at IS NULL")
    return " AND ".join(condicoes), params


def _valores_titular(titular: Titular, campos: tuple[str, ...] = CAMPOS_TITULAR) -> list[object]:
    return [getattr(titular, campo) for campo in campos]


class _EscritaDuckDB:
    def __init__(self, cur: duckdb.DuckDBPyConnection) -> None:
        self._cur = cur

    def inserir_titular(self, titular: Titular, status: StatusCadastro) -> int:
        row = self._cur.execute(
            _INSERT_TITULAR, [*_valores_titular(titular), status.value],
        ).fetchone()
        assert row is not None
        return int(row[0])

    def atualizar_titular(self, titular_id: int, titular: Titular, status: StatusCadastro) -> bool:
        atual = self._cur.execute(
            "SELECT cpf FROM titulares WHERE id = ?", [titular_id],
        ).fetchone()
        if atual is None:
            return False
        # CPF inalterado fica fora do SET para nao tocar o indice unico.
        campos = tuple(c for c in CAMPOS_TITULAR if c != "cpf" or atual[0] != titular.cpf)
        atribuicoes = ", ".join(f"{c} = ?" for c in campos)
        self._cur.execute(
            f"UPDATE titulares SET {atribuicoes}, status = ? WHERE id = ?",  # noqa: S608
            [*_valores_titular(titular, campos), status.value, titular_id],
        )
        return True

    def remover_conjuge(self, titular_id: int) -> None:
        self._cur.execute("DELETE FROM conjuges WHERE titular_id = ?", [titular_id])

    def remover_dependentes(self, titular_id: int) -> None:
        self._cur.execute("DELETE FROM dependentes WHERE titular_id = ?", [titular_id])

    def remover_anexos(self, titular_id: int) -> None:
        self._cur.execute("DELETE FROM anexos WHERE titular_id = ?", [titular_id])

    def inserir_conjuge(self, titular_id: int, conjuge: Conjuge) -> None:
        self._cur.execute(
            "INSERT INTO conjuges (titular_id, nome, cpf, data_nasc) VALUES (?, ?, ?, ?)",
            [titular_id, conjuge.nome, conjuge.cpf, conjuge.data_nasc],
        )

    def inserir_dependentes(self, titular_id: int, dependentes: list[Dependente]) -> None:
        # Ordem preservada: um INSERT por dependente, todos na mesma transacao.
        for dep in dependentes:
            self._cur.execute(
                "INSERT INTO dependentes (titular_id, nome, cpf, parentesco, data_nasc) "
                "VALUES (?, ?, ?, ?, ?)",
                [titular_id, dep.nome, dep.cpf, dep.parentesco, dep.data_nasc],
            )

    def inserir_anexos(self, titular_id: int, anexos: list[Anexo]) -> None:
        for anexo in anexos:
            self._cur.execute(
                "INSERT INTO anexos (titular_id, nome_arquivo, tipo_arquivo, conteudo) "
                "VALUES (?, ?, ?, ?)",
                [titular_id, anexo.nome, anexo.tipo, anexo.conteudo],
            )

    def excluir_permanente(self, titular_id: int) -> bool:
        for tabela in _TABELAS_FILHAS:
            self._cur.execute(
                f"DELETE FROM {tabela} WHERE titular_id = ?", [titular_id],  # noqa: S608
            )
        removidos = self._cur.execute(
            "DELETE FROM titulares WHERE id = ? RETURNING id", [titular_id],
        ).fetchall()
        return len(removidos) > 0

    def excluir_testes(self) -> int:
        filtro = "SELECT id FROM titulares WHERE matricula ILIKE 'TESTE%'"
        for tabela in _TABELAS_FILHAS:
            self._cur.execute(f"DELETE FROM {tabela} WHERE titular_id IN ({filtro})")  # noqa: S608
        removidos = self._cur.execute(
            "DELETE FROM titulares WHERE matricula ILIKE 'TESTE%' RETURNING id",
        ).fetchall()
        return len(removidos)


class DuckDBCadastroRepo:
    def __init__(self, db: Database) -> None:
        self._db = db

    # ---- escrita ---------------------------------------------------------

    @contextmanager
    def transacao(self) -> Iterator[_EscritaDuckDB]:
        try:
            with self._db.transacao() as cur:
                yield _EscritaDuckDB(cur)
        except duckdb.Error as err:
            # cpf e a unica chave unica de titulares que a entrada pode repetir.
            if violou_chave_unica(err):
                raise ConflitoNaGravacao("Este CPF ja esta cadastrado no sistema.") from err
            raise ErroPersistencia(f"Erro ao gravar cadastro: {err}") from err

    def marcar_excluido(self, titular_id: int, quando: datetime) -> bool:
        with self._db.cursor() as cur:
            rows = cur.execute(
                "UPDATE titulares SET deleted_at = ? WHERE id = ? RETURNING id",
                [quando, titular_id],
            ).fetchall()
        return len(rows) > 0

    def restaurar(self, titular_id: int) -> bool:
        with self._db.cursor() as cur:
            rows = cur.execute(
                "UPDATE titulares SET deleted_at = NULL WHERE id = ? RETURNING id",
                [titular_id],
            ).fetchall()
        return len(rows) > 0

    def adicionar_anexo(self, titular_id: int, anexo: Anexo) -> int:
        with self._db.cursor() as cur:
            row = cur.execute(
                "INSERT INTO anexos (titular_id, nome_arquivo, tipo_arquivo, conteudo) "
                "VALUES (?, ?, ?, ?) RETURNING id",
                [titular_id, anexo.nome, anexo.tipo, anexo.conteudo],
            ).fetchone()
        assert row is not None
        return int(row[0])

    def excluir_testes(self) -> int:
        """Remove permanentemente titulares com matricula TESTE*, filhos inclusive."""
        with self.transacao() as escrita:
            return escrita.excluir_testes()

    # ---- leitura ---------------------------------------------------------

    def situacao_cpf(self, cpf: str) -> tuple[int, datetime | None] | None:
        """(id, deleted_at) do titular com este CPF, em qualquer estado."""
        with self._db.cursor() as cur:
            row = cur.execute(
                "SELECT id, deleted_at FROM titulares WHERE cpf = ?", [cpf],
            ).fetchone()
        if row is None:
            return None
        return int(row[0]), row[1]

    def cpf_em_uso_por_outro(self, cpf: str, titular_id: int) -> bool:
        with self._db.cursor() as cur:
            row = cur.execute(
                "SELECT 1 FROM titulares WHERE cpf = ? AND id <> ? LIMIT 1", [cpf, titular_id],
            ).fetchone()
        return row is not None

    def existe(self, titular_id: int) -> bool:
        with self._db.cursor() as cur:
            row = cur.execute(
                "SELECT 1 FROM titulares WHERE id = ? AND deleted_at IS NULL", [titular_id],
            ).fetchone()
        return row is not None

    def nome_do_titular(self, titular_id: int) -> str | None:
        with self._db.cursor() as cur:
            row = cur.execute("SELECT nome FROM titulares WHERE id = ?", [titular_id]).fetchone()
        return str(row[0]) if row else None

    def foto_perfil(self, titular_id: int) -> str | None:
        with self._db.cursor() as cur:
            row = cur.execute(
                "SELECT foto_perfil FROM titulares WHERE id = ?", [titular_id],
            ).fetchone()
        return str(row[0]) if row and row[0] else None

    def buscar_por_id(self, titular_id: int, incluir_conteudo: bool) -> CadastroCompleto | None:
        return self._carregar("id = ? AND deleted_at IS NULL", titular_id, incluir_conteudo)

    def buscar_por_cpf(self, cpf: str) -> CadastroCompleto | None:
        return self._carregar("cpf = ? AND deleted_at IS NULL", cpf, incluir_conteudo=True)

    def listar(
        self,
        filtros: FiltrosListagem,
        ordenacao: Ordenacao,
        paginacao: Paginacao,
    ) -> tuple[list[ResumoTitular], int]:
        where, params = montar_filtros(filtros)
        sql = (
            f"SELECT id, matricula, nome, cpf, cargo, lotacao, status FROM titulares "  # noqa: S608
            f"WHERE {where} ORDER BY {ordenacao.coluna} {ordenacao.direcao}, id ASC"
        )
        params_pagina = list(params)
        if paginacao.paginada:
            sql += " LIMIT ? OFFSET ?"
            params_pagina.extend([paginacao.limite, paginacao.offset])

        with self._db.transacao() as cur:
            total_row = cur.execute(
                f"SELECT count(*) FROM titulares WHERE {where}", params,  # noqa: S608
            ).fetchone()
            rows = cur.execute(sql, params_pagina).fetchall()

        total = int(total_row[0]) if total_row else 0
        resumos = [
            ResumoTitular(
                id=int(r[0]),
                matricula=r[1],
                nome=str(r[2]),
                cpf=str(r[3]),
                cargo=r[4],
                lotacao=r[5],
                status=StatusCadastro(str(r[6])),
            )
            for r in rows
        ]
        return resumos, total

    def listar_lixeira(self) -> list[ItemLixeira]:
        with self._db.cursor() as cur:
            rows = cur.execute(
                "SELECT id, nome, cpf, cargo, deleted_at FROM titulares "
                "WHERE deleted_at IS NOT NULL ORDER BY deleted_at DESC, id DESC",
            ).fetchall()
        return [
            ItemLixeira(id=int(r[0]), nome=str(r[1]), cpf=str(r[2]), cargo=r[3], deleted_at=r[4])
            for r in rows
        ]

    def iterar_agregados(self) -> Iterator[CadastroCompleto]:
        """Todos os agregados, inclusive os da lixeira, um por vez.

        Cada agregado e lido numa transacao curta; nada fica aberto enquanto o
        consumidor processa o item.
        """
        with self._db.cursor() as cur:
            ids = [int(r[0]) for r in cur.execute("SELECT id FROM titulares ORDER BY id").fetchall()]
        for titular_id in ids:
            agregado = self._carregar("id = ?", titular_id, incluir_conteudo=True)
            if agregado is not None:
                yield agregado

    def buscar_anexo(self, anexo_id: int) -> Anexo | None:
        with self._db.cursor() as cur:
            row = cur.execute(
                "SELECT id, nome_arquivo, tipo_arquivo, conteudo FROM anexos WHERE id = ?",
                [anexo_id],
            ).fetchone()
        if row is None:
            return None
        return Anexo(id=int(row[0]), nome=str(row[1] or ""), tipo=row[2], conteudo=row[3])

    def listar_anexos(self, titular_id: int) -> list[Anexo]:
        with self._db.cursor() as cur:
            return self._anexos(cur, titular_id, incluir_conteudo=True)

    # ---- hidratacao ------------------------------------------------------

    def _carregar(
        self, condicao: str, chave: object, incluir_conteudo: bool,
    ) -> CadastroCompleto | None:
        with self._db.transacao() as cur:
            row = cur.execute(f"{_SELECT_TITULAR} WHERE {condicao}", [chave]).fetchone()
            if row is None:
                return None
            titular_id = int(row[0])
            conjuge_row = cur.execute(
                "SELECT nome, cpf, data_nasc FROM conjuges WHERE titular_id = ? ORDER BY id LIMIT 1",
                [titular_id],
            ).fetchone()
            dependentes_rows = cur.execute(
                "SELECT nome, cpf, parentesco, data_nasc FROM dependentes "
                "WHERE titular_id = ? ORDER BY id",
                [titular_id],
            ).fetchall()
            anexos = self._anexos(cur, titular_id, incluir_conteudo)
        return self._hidratar(row, conjuge_row, dependentes_rows, anexos)

    def _anexos(
        self, cur: duckdb.DuckDBPyConnection, titular_id: int, incluir_conteudo: bool,
    ) -> list[Anexo]:
        coluna_conteudo = "conteudo" if incluir_conteudo else "NULL"
        rows = cur.execute(
            f"SELECT id, nome_arquivo, tipo_arquivo, {coluna_conteudo} FROM anexos "  # noqa: S608
            "WHERE titular_id = ? ORDER BY id",
            [titular_id],
        ).fetchall()
        return [Anexo(id=int(r[0]), nome=str(r[1] or ""), tipo=r[2], conteudo=r[3]) for r in rows]

    def _hidratar(
        self,
        row: tuple,  # type: ignore[type-arg]
        conjuge_row: tuple | None,  # type: ignore[type-arg]
        dependentes_rows: list[tuple],  # type: ignore[type-arg]
        anexos: list[Anexo],
    ) -> CadastroCompleto:
        """Colunas: id(0), CAMPOS_TITULAR(1..n), status(n+1), deleted_at(n+2)."""
        n = len(CAMPOS_TITULAR)
        titular = Titular(**dict(zip(CAMPOS_TITULAR, row[1 : n + 1], strict=True)))
        conjuge = (
            Conjuge(nome=conjuge_row[0], cpf=conjuge_row[1], data_nasc=conjuge_row[2])
            if conjuge_row is not None
            else None
        )
        return CadastroCompleto(
            id=int(row[0]),
            titular=titular,
            status=StatusCadastro(str(row[n + 1])),
            deleted_at=row[n + 2],
            conjuge=conjuge,
            dependentes=tuple(
                Dependente(nome=d[0], cpf=d[1], parentesco=d[2], data_nasc=d[3])
                for d in dependentes_rows
            ),
            anexos=tuple(anexos),
        )
