# api/infrastructure/repositories/duckdb_administrador_repo.py
from __future__ import annotations

from datetime import datetime

import duckdb

from api.domain.administrador.entities import Administrador, DadosAdministrador, Papel
from api.domain.administrador.exceptions import EmailJaCadastrado
from api.infrastructure.duckdb_connection import Database, violou_chave_unica

_SELECT_ADMIN = (
    "SELECT id, email, senha_hash, role, primeiro_acesso, nome, cpf, telefone, "
    "reset_token, reset_expires FROM administradores"
)


class DuckDBAdministradorRepo:
    def __init__(self, db: Database) -> None:
        self._db = db

    def buscar_por_email(self, email: str) -> Administrador | None:
        return self._buscar_um("email = ?", email.strip().lower())

    def buscar_por_id(self, admin_id: int) -> Administrador | None:
        return self._buscar_um("id = ?", admin_id)

    def buscar_por_reset_token(self, token: str) -> Administrador | None:
        return self._buscar_um("reset_token = ?", token)

    def listar(self) -> list[Administrador]:
        with self._db.cursor() as cur:
            rows = cur.execute(f"{_SELECT_ADMIN} ORDER BY nome ASC, id ASC").fetchall()  # noqa: S608
        return [self._hidratar(r) for r in rows]

    def inserir(
        self, dados: DadosAdministrador, senha_hash: str, papel: Papel, primeiro_acesso: bool,
    ) -> int:
        try:
            with self._db.cursor() as cur:
                row = cur.execute(
                    "INSERT INTO administradores "
                    "(nome, cpf, telefone, email, senha_hash, role, primeiro_acesso) "
                    "VALUES (?, ?, ?, ?, ?, ?, ?) RETURNING id",
                    [
                        dados.nome,
                        dados.cpf,
                        dados.telefone,
                        dados.email,
                        senha_hash,
                        papel.value,
                        primeiro_acesso,
                    ],
                ).fetchone()
        except duckdb.Error as err:
            if violou_chave_unica(err):
                raise EmailJaCadastrado("Este email ja esta cadastrado.") from err
            raise
        assert row is not None
        return int(row[0])

    def atualizar_dados(self, admin_id: int, dados: DadosAdministrador) -> bool:
        try:
            with self._db.transacao() as cur:
                atual = cur.execute(
                    "SELECT email FROM administradores WHERE id = ?", [admin_id],
                ).fetchone()
                if atual is None:
                    return False
                # Email inalterado fica fora do SET para nao tocar o indice unico.
                if atual[0] == dados.email:
                    cur.execute(
                        "UPDATE administradores SET nome = ?, cpf = ?, telefone = ? WHERE id = ?",
                        [dados.nome, dados.cpf, dados.telefone, admin_id],
                    )
                else:
                    cur.execute(
                        "UPDATE administradores SET nome = ?, cpf = ?, telefone = ?, email = ? "
                        "WHERE id = ?",
                        [dados.nome, dados.cpf, dados.telefone, dados.email, admin_id],
                    )
        except duckdb.Error as err:
            if violou_chave_unica(err):
                raise EmailJaCadastrado("Este email ja esta cadastrado.") from err
            raise
        return True

    def atualizar_senha(
        self, admin_id: int, senha_hash: str, primeiro_acesso: bool | None,
    ) -> bool:
        """primeiro_acesso None preserva o valor atual. Sempre invalida o reset token."""
        with self._db.cursor() as cur:
            rows = cur.execute(
                "UPDATE administradores SET senha_hash = ?, "
                "primeiro_acesso = coalesce(CAST(? AS BOOLEAN), primeiro_acesso), "
                "reset_token = NULL, reset_expires = NULL "
                "WHERE id = ? RETURNING id",
                [senha_hash, primeiro_acesso, admin_id],
            ).fetchall()
        return len(rows) > 0

    def gravar_reset_token(
        self, admin_id: int, token: str | None, expira_em: datetime | None,
    ) -> None:
        with self._db.cursor() as cur:
            cur.execute(
                "UPDATE administradores SET reset_token = ?, reset_expires = ? WHERE id = ?",
                [token, expira_em, admin_id],
            )

    def excluir_nao_master(self, admin_id: int) -> bool:
        """Remove no maximo uma linha e nunca uma conta master."""
        with self._db.cursor() as cur:
            rows = cur.execute(
                "DELETE FROM administradores WHERE id = ? AND role <> 'master' RETURNING id",
                [admin_id],
            ).fetchall()
        return len(rows) == 1

    def _buscar_um(self, condicao: str, valor: object) -> Administrador | None:
        with self._db.cursor() as cur:
            row = cur.execute(f"{_SELECT_ADMIN} WHERE {condicao}", [valor]).fetchone()  # noqa: S608
        return self._hidratar(row) if row else None

    def _hidratar(self, row: tuple) -> Administrador:  # type: ignore[type-arg]
        """Colunas: id(0), email(1), senha_hash(2), role(3), primeiro_acesso(4),
        nome(5), cpf(6), telefone(7), reset_token(8), reset_expires(9)."""
        return Administrador(
            id=int(row[0]),
            email=str(row[1]),
            senha_hash=str(row[2]),
            papel=Papel(str(row[3])),
            primeiro_acesso=bool(row[4]),
            nome=row[5],
            cpf=row[6],
            telefone=row[7],
            reset_token=row[8],
            reset_expires=row[9],
        )
