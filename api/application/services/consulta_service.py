# api/application/services/consulta_service.py
from __future__ import annotations

from api.domain.cadastro.consulta import FiltrosListagem, Ordenacao, Paginacao
from api.domain.cadastro.entities import StatusCadastro
from api.domain.cadastro.exceptions import CadastroNaoEncontrado, ErroValidacao
from api.domain.cadastro.repository import CadastroRepository
from api.domain.cadastro.value_objects import CPF

from ..dtos.cadastro_dto import (
    CadastroCompletoDTO,
    ItemLixeiraDTO,
    ListagemDTO,
    ResumoTitularDTO,
)


class ConsultaService:
    """Lado de leitura do cadastro: listagem, detalhe e lixeira."""

    def __init__(self, repo: CadastroRepository) -> None:
        self._repo = repo

    def listar(
        self,
        page: int = 1,
        limit: int = 10,
        search: str | None = None,
        cargo: str | None = None,
        secretaria: str | None = None,
        tipo_admissao: str | None = None,
        status: str | None = None,
        sort_by: str | None = None,
        order: str | None = None,
    ) -> ListagemDTO:
        try:
            status_filtro = StatusCadastro(status) if status else StatusCadastro.FINALIZADO
        except ValueError as err:
            raise ErroValidacao(f"Status invalido: {status}") from err

        filtros = FiltrosListagem(
            busca=search or None,
            cargo=cargo or None,
            secretaria=secretaria or None,
            tipo_admissao=tipo_admissao or None,
            status=status_filtro,
        )
        resumos, total = self._repo.listar(
            filtros, Ordenacao.a_partir_de(sort_by, order), Paginacao(pagina=page, limite=limit),
        )
        return ListagemDTO(
            data=[ResumoTitularDTO.from_domain(r) for r in resumos],
            total=total,
            page=page,
            limit=limit,
        )

    def obter_por_id(self, titular_id: int, incluir_conteudo: bool = False) -> CadastroCompletoDTO:
        cadastro = self._repo.buscar_por_id(titular_id, incluir_conteudo)
        if cadastro is None:
            raise CadastroNaoEncontrado("Nenhum cadastro encontrado para este ID.")
        return CadastroCompletoDTO.from_domain(cadastro)

    def obter_por_cpf(self, cpf_raw: str) -> CadastroCompletoDTO:
        try:
            cpf = CPF.de_digitos(cpf_raw)
        except ValueError as err:
            raise ErroValidacao("CPF deve conter exatamente 11 digitos numericos.") from err
        cadastro = self._repo.buscar_por_cpf(cpf.formatado)
        if cadastro is None:
            raise CadastroNaoEncontrado("Nenhum cadastro encontrado para este CPF.")
        return CadastroCompletoDTO.from_domain(cadastro)

    def lixeira(self) -> list[ItemLixeiraDTO]:
        return [ItemLixeiraDTO.from_domain(item) for item in self._repo.listar_lixeira()]
