# api/domain/cadastro/repository.py
from __future__ import annotations

from collections.abc import Iterator
from contextlib import AbstractContextManager
from datetime import datetime
from typing import Protocol

from .consulta import FiltrosListagem, Ordenacao, Paginacao
from .entities import (
    Anexo,
    CadastroCompleto,
    Conjuge,
    Dependente,
    ItemLixeira,
    ResumoTitular,
    StatusCadastro,
    Titular,
)


class EscritaCadastro(Protocol):
    """Operacoes de escrita ligadas a uma transacao aberta."""

    def inserir_titular(self, titular: Titular, status: StatusCadastro) -> int: ...
    def atualizar_titular(self, titular_id: int, titular: Titular, status: StatusCadastro) -> bool: ...
    def remover_conjuge(self, titular_id: int) -> None: ...
    def remover_dependentes(self, titular_id: int) -> None: ...
    def remover_anexos(self, titular_id: int) -> None: ...
    def inserir_conjuge(self, titular_id: int, conjuge: Conjuge) -> None: ...
    def inserir_dependentes(self, titular_id: int, dependentes: list[Dependente]) -> None: ...
    def inserir_anexos(self, titular_id: int, anexos: list[Anexo]) -> None: ...
    def excluir_permanente(self, titular_id: int) -> bool: ...


class CadastroRepository(Protocol):
    def transacao(self) -> AbstractContextManager[EscritaCadastro]: ...
    def situacao_cpf(self, cpf: str) -> tuple[int, datetime | None] | None: ...
    def cpf_em_uso_por_outro(self, cpf: str, titular_id: int) -> bool: ...
    def marcar_excluido(self, titular_id: int, quando: datetime) -> bool: ...
    def restaurar(self, titular_id: int) -> bool: ...
    def buscar_por_id(self, titular_id: int, incluir_conteudo: bool) -> CadastroCompleto | None: ...
    def buscar_por_cpf(self, cpf: str) -> CadastroCompleto | None: ...
    def listar(
        self, filtros: FiltrosListagem, ordenacao: Ordenacao, paginacao: Paginacao,
    ) -> tuple[list[ResumoTitular], int]: ...
    def listar_lixeira(self) -> list[ItemLixeira]: ...
    def iterar_agregados(self) -> Iterator[CadastroCompleto]: ...
    def existe(self, titular_id: int) -> bool: ...
    def nome_do_titular(self, titular_id: int) -> str | None: ...
    def foto_perfil(self, titular_id: int) -> str | None: ...
    def buscar_anexo(self, anexo_id: int) -> Anexo | None: ...
    def listar_anexos(self, titular_id: int) -> list[Anexo]: ...
    def adicionar_anexo(self, titular_id: int, anexo: Anexo) -> int: ...
    def excluir_testes(self) -> int: ...
