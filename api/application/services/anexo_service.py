# api/application/services/anexo_service.py
#
# Anexos individuais, ZIP com todos os anexos de um titular e foto de perfil.
#
# Design decisions:
#   - Leituras terminam antes de qualquer decodificacao ou compactacao; nenhum
#     cursor fica aberto enquanto o ZIP e montado.
#   - Conteudo aceito em data-URI ou base64 puro. Para o MIME, o prefixo do
#     data-URI tem prioridade sobre tipo_arquivo.
from __future__ import annotations

import io
import logging
import re
import zipfile
from dataclasses import dataclass

from api.domain.auditoria.entities import AcaoAuditoria
from api.domain.auditoria.repository import RegistradorAuditoria
from api.domain.cadastro.entities import Anexo
from api.domain.cadastro.exceptions import (
    AnexoNaoEncontrado,
    CadastroNaoEncontrado,
    ErroValidacao,
)
from api.domain.cadastro.repository import CadastroRepository
from api.domain.cadastro.value_objects import (
    ConteudoDecodificado,
    decodificar_conteudo,
    e_data_uri,
)

from ..dtos.cadastro_dto import AnexoDTO
from .cadastro_service import LIMITE_ANEXOS_PADRAO, verificar_tamanho_anexos

logger = logging.getLogger(__name__)

_NAO_ALFANUMERICO = re.compile(r"[^a-z0-9]", re.IGNORECASE)


@dataclass(frozen=True)
class Arquivo:
    nome: str
    mime: str
    dados: bytes


def slug_nome(nome: str) -> str:
    """'Ana Silva' -> 'ana_silva'."""
    return _NAO_ALFANUMERICO.sub("_", nome).lower()


def _nomes_unicos(nomes: list[str]) -> list[str]:
    """Entradas do ZIP com nomes repetidos recebem sufixo ' (n)'."""
    vistos: dict[str, int] = {}
    resultado = []
    for nome in nomes:
        nome = nome or "anexo"
        n = vistos.get(nome, 0)
        vistos[nome] = n + 1
        if n == 0:
            resultado.append(nome)
        else:
            base, ponto, ext = nome.rpartition(".")
            resultado.append(f"{base} ({n + 1}).{ext}" if ponto else f"{nome} ({n + 1})")
    return resultado


def _decodificar(conteudo: str, nome: str) -> ConteudoDecodificado:
    try:
        return decodificar_conteudo(conteudo)
    except ValueError as err:
        raise ErroValidacao(f"Conteudo de '{nome}' nao e base64 valido.") from err


class AnexoService:
    def __init__(
        self,
        repo: CadastroRepository,
        auditoria: RegistradorAuditoria,
        limite_anexos_bytes: int = LIMITE_ANEXOS_PADRAO,
    ) -> None:
        self._repo = repo
        self._auditoria = auditoria
        self._limite_anexos_bytes = limite_anexos_bytes

    def obter(self, anexo_id: int) -> AnexoDTO:
        anexo = self._repo.buscar_anexo(anexo_id)
        if anexo is None:
            raise AnexoNaoEncontrado("Anexo nao encontrado.")
        return AnexoDTO.from_domain(anexo)

    def download(self, anexo_id: int) -> Arquivo:
        anexo = self._repo.buscar_anexo(anexo_id)
        if anexo is None:
            raise AnexoNaoEncontrado("Anexo nao encontrado.")
        if not anexo.conteudo:
            raise AnexoNaoEncontrado("Anexo sem conteudo.")
        decodificado = _decodificar(anexo.conteudo, anexo.nome)
        mime = decodificado.mime or anexo.tipo or "application/octet-stream"
        return Arquivo(nome=anexo.nome, mime=mime, dados=decodificado.dados)

    def zip_do_titular(self, titular_id: int) -> Arquivo:
        nome = self._repo.nome_do_titular(titular_id)
        if nome is None:
            raise CadastroNaoEncontrado("Servidor nao encontrado.")
        anexos = self._repo.listar_anexos(titular_id)
        if not anexos:
            raise AnexoNaoEncontrado("Nenhum anexo encontrado.")

        buffer = io.BytesIO()
        with zipfile.ZipFile(buffer, "w", compression=zipfile.ZIP_DEFLATED, compresslevel=9) as zf:
            for anexo, nome_entrada in zip(
                anexos, _nomes_unicos([a.nome for a in anexos]), strict=True,
            ):
                zf.writestr(nome_entrada, _decodificar(anexo.conteudo or "", anexo.nome).dados)
        logger.info("ZIP com %s anexo(s) gerado para o cadastro %s", len(anexos), titular_id)
        return Arquivo(
            nome=f"documentos_{slug_nome(nome)}.zip",
            mime="application/zip",
            dados=buffer.getvalue(),
        )

    def foto(self, titular_id: int) -> Arquivo:
        foto = self._repo.foto_perfil(titular_id)
        if foto is None:
            raise AnexoNaoEncontrado("Sem foto.")
        if not e_data_uri(foto):
            raise AnexoNaoEncontrado("Formato de foto invalido.")
        decodificado = _decodificar(foto, "foto de perfil")
        return Arquivo(
            nome=f"foto_{titular_id}",
            mime=decodificado.mime or "application/octet-stream",
            dados=decodificado.dados,
        )

    def adicionar(self, titular_id: int, anexo: Anexo, admin_id: int | None = None) -> int:
        """Acrescenta um anexo. O limite vale para os existentes mais o novo."""
        if not self._repo.existe(titular_id):
            raise CadastroNaoEncontrado("Servidor nao encontrado.")
        existentes = self._repo.listar_anexos(titular_id)
        verificar_tamanho_anexos([*existentes, anexo], self._limite_anexos_bytes)

        anexo_id = self._repo.adicionar_anexo(titular_id, anexo)
        self._auditoria.registrar(
            admin_id, AcaoAuditoria.UPLOAD_ANEXO, titular_id, f"Anexo enviado: {anexo.nome}",
        )
        return anexo_id
