# api/application/services/cadastro_service.py
#
# Transicoes de estado do agregado titular: criar, substituir, excluir (soft),
# restaurar e excluir permanentemente.
#
# Design decisions:
#   - Toda validacao que nao depende da transacao (campos obrigatorios, CPF,
#     unicidade, limite de anexos) roda ANTES de abrir a transacao.
#   - A gravacao titular + conjuge + dependentes + anexos acontece dentro de um
#     unico repo.transacao(); qualquer falha desfaz tudo.
#   - O pre-check de CPF pode perder uma corrida com outra requisicao; nesse
#     caso o indice unico do banco dispara e o repositorio levanta
#     ConflitoNaGravacao, que e um CadastroDuplicado.
#   - Auditoria so e registrada apos o commit e nunca afeta o resultado.
from __future__ import annotations

import dataclasses
import logging
from collections.abc import Sequence
from datetime import datetime

from api.domain.auditoria.entities import AcaoAuditoria
from api.domain.auditoria.repository import RegistradorAuditoria
from api.domain.cadastro.entities import Anexo, Conjuge, Dependente, StatusCadastro, Titular
from api.domain.cadastro.exceptions import (
    AnexosExcedemLimite,
    CadastroDuplicado,
    CadastroNaLixeira,
    CadastroNaoEncontrado,
    ErroValidacao,
)
from api.domain.cadastro.repository import CadastroRepository
from api.domain.cadastro.value_objects import CPF, tamanho_decodificado

logger = logging.getLogger(__name__)

LIMITE_ANEXOS_PADRAO = 25 * 1024 * 1024


def validar_titular(titular: Titular) -> tuple[Titular, CPF]:
    """Nome e CPF obrigatorios; CPF gravado na forma 000.000.000-00."""
    if not titular.nome or not titular.cpf:
        raise ErroValidacao("Nome e CPF do titular sao obrigatorios.")
    try:
        cpf = CPF(titular.cpf)
    except ValueError as err:
        raise ErroValidacao("CPF do titular invalido: informe 11 digitos.") from err
    return dataclasses.replace(titular, cpf=cpf.formatado), cpf


def verificar_tamanho_anexos(anexos: Sequence[Anexo], limite_bytes: int) -> None:
    """Soma o tamanho decodificado estimado e compara com o limite."""
    total = sum(tamanho_decodificado(a.conteudo) for a in anexos)
    if total > limite_bytes:
        limite_mb = limite_bytes // (1024 * 1024)
        raise AnexosExcedemLimite(
            f"O tamanho total dos anexos excede o limite de {limite_mb} MB."
        )


class CadastroService:
    def __init__(
        self,
        repo: CadastroRepository,
        auditoria: RegistradorAuditoria,
        limite_anexos_bytes: int = LIMITE_ANEXOS_PADRAO,
    ) -> None:
        self._repo = repo
        self._auditoria = auditoria
        self._limite_anexos_bytes = limite_anexos_bytes

    def criar(
        self,
        titular: Titular,
        conjuge: Conjuge | None = None,
        dependentes: Sequence[Dependente] = (),
        anexos: Sequence[Anexo] = (),
        status: StatusCadastro | None = None,
        admin_id: int | None = None,
    ) -> int:
        titular, cpf = validar_titular(titular)

        existente = self._repo.situacao_cpf(titular.cpf)
        if existente is not None:
            _, deleted_at = existente
            if deleted_at is not None:
                raise CadastroNaLixeira(
                    "Este CPF pertence a um cadastro que esta na lixeira. "
                    "Restaure o cadastro em vez de criar um novo."
                )
            raise CadastroDuplicado("Este CPF ja esta cadastrado no sistema.")

        verificar_tamanho_anexos(anexos, self._limite_anexos_bytes)

        with self._repo.transacao() as escrita:
            novo_id = escrita.inserir_titular(titular, status or StatusCadastro.FINALIZADO)
            if conjuge is not None:
                escrita.inserir_conjuge(novo_id, conjuge)
            escrita.inserir_dependentes(novo_id, list(dependentes))
            escrita.inserir_anexos(novo_id, list(anexos))

        logger.info("Cadastro %s criado (cpf=%s)", novo_id, cpf.mascarado)
        self._auditoria.registrar(
            admin_id, AcaoAuditoria.CRIACAO, novo_id, f"Cadastro criado: {titular.nome}",
        )
        return novo_id

    def substituir(
        self,
        titular_id: int,
        titular: Titular,
        conjuge: Conjuge | None = None,
        dependentes: Sequence[Dependente] = (),
        anexos: Sequence[Anexo] | None = None,
        status: StatusCadastro | None = None,
        admin_id: int | None = None,
    ) -> None:
        """Substituicao integral. anexos=None preserva os anexos gravados;
        uma lista (mesmo vazia) substitui o conjunto inteiro."""
        titular, cpf = validar_titular(titular)

        # Colide tambem com cadastros na lixeira de outro id.
        if self._repo.cpf_em_uso_por_outro(titular.cpf, titular_id):
            raise CadastroDuplicado("Este CPF ja pertence a outro cadastro.")

        if anexos is not None:
            verificar_tamanho_anexos(anexos, self._limite_anexos_bytes)

        with self._repo.transacao() as escrita:
            if not escrita.atualizar_titular(
                titular_id, titular, status or StatusCadastro.FINALIZADO,
            ):
                raise CadastroNaoEncontrado("Nenhum cadastro encontrado para este ID.")
            escrita.remover_conjuge(titular_id)
            escrita.remover_dependentes(titular_id)
            if anexos is not None:
                escrita.remover_anexos(titular_id)
                escrita.inserir_anexos(titular_id, list(anexos))
            if conjuge is not None:
                escrita.inserir_conjuge(titular_id, conjuge)
            escrita.inserir_dependentes(titular_id, list(dependentes))

        logger.info("Cadastro %s atualizado (cpf=%s)", titular_id, cpf.mascarado)
        self._auditoria.registrar(
            admin_id, AcaoAuditoria.EDICAO, titular_id, f"Cadastro atualizado: {titular.nome}",
        )

    def excluir(self, titular_id: int, admin_id: int | None = None) -> None:
        """Soft delete: so o titular recebe deleted_at; os filhos ficam intactos."""
        if not self._repo.marcar_excluido(titular_id, datetime.now()):
            raise CadastroNaoEncontrado("Nenhum cadastro encontrado para este ID.")
        self._auditoria.registrar(
            admin_id, AcaoAuditoria.EXCLUSAO, titular_id, "Cadastro movido para a lixeira",
        )

    def restaurar(self, titular_id: int, admin_id: int | None = None) -> None:
        if not self._repo.restaurar(titular_id):
            raise CadastroNaoEncontrado("Nenhum cadastro encontrado para este ID.")
        self._auditoria.registrar(
            admin_id, AcaoAuditoria.RESTAURACAO, titular_id, "Cadastro restaurado da lixeira",
        )

    def excluir_permanente(self, titular_id: int, admin_id: int | None = None) -> None:
        with self._repo.transacao() as escrita:
            removido = escrita.excluir_permanente(titular_id)
        if not removido:
            raise CadastroNaoEncontrado("Nenhum cadastro encontrado para este ID.")
        self._auditoria.registrar(
            admin_id,
            AcaoAuditoria.EXCLUSAO_PERMANENTE,
            titular_id,
            "Cadastro excluido permanentemente",
        )

    def excluir_testes(self, admin_id: int | None = None) -> int:
        """Remove de vez os cadastros com matricula iniciada por TESTE."""
        removidos = self._repo.excluir_testes()
        logger.info("Limpeza de testes removeu %s cadastro(s)", removidos)
        self._auditoria.registrar(
            admin_id,
            AcaoAuditoria.LIMPEZA_TESTES,
            None,
            f"{removidos} cadastro(s) de teste removido(s)",
        )
        return removidos
