# api/application/services/administrador_service.py
#
# Contas de administrador: login, primeiro acesso, redefinicao de senha por
# link e gestao de contas pelo master.
#
# Design decisions:
#   - Senhas so existem como hash bcrypt no banco.
#   - Emails saem pelo EmailService, que nunca levanta. Quando o envio falha
#     depois da gravacao, a gravacao permanece e quem chama e avisado.
#   - O relogio e injetavel (agora) para testar expiracao de token sem sleep.
from __future__ import annotations

import logging
from collections.abc import Callable
from datetime import datetime, timedelta

from api.domain.administrador.entities import DadosAdministrador, Papel
from api.domain.administrador.exceptions import (
    AdministradorNaoEncontrado,
    CredenciaisInvalidas,
    ExclusaoNaoPermitida,
    FalhaEnvioEmail,
    SenhaInvalida,
    TokenInvalido,
)
from api.domain.administrador.repository import AdministradorRepository
from api.infrastructure.email_service import EmailService
from api.infrastructure.security import (
    criar_token_acesso,
    gerar_hash_senha,
    gerar_senha_temporaria,
    gerar_token_reset,
    verificar_senha,
)

from ..dtos.administrador_dto import AdministradorDTO, SessaoDTO

logger = logging.getLogger(__name__)


def _exigir_senha(senha: str | None) -> str:
    if not senha or not senha.strip():
        raise SenhaInvalida("Nova senha e obrigatoria.")
    return senha


class AdministradorService:
    def __init__(
        self,
        repo: AdministradorRepository,
        email_service: EmailService,
        jwt_secret: str,
        jwt_expire_minutes: int = 480,
        reset_token_ttl_minutes: int = 60,
        agora: Callable[[], datetime] = datetime.now,
    ) -> None:
        self._repo = repo
        self._email = email_service
        self._jwt_secret = jwt_secret
        self._jwt_expire_minutes = jwt_expire_minutes
        self._reset_ttl = timedelta(minutes=reset_token_ttl_minutes)
        self._agora = agora

    def garantir_master(self, email: str, senha: str) -> None:
        """Cria a conta master configurada se ela ainda nao existir."""
        if self._repo.buscar_por_email(email) is not None:
            return
        self._repo.inserir(
            DadosAdministrador(email=email, nome="Administrador Master"),
            gerar_hash_senha(senha),
            Papel.MASTER,
            primeiro_acesso=False,
        )
        logger.info("Conta master criada para %s", email)

    def login(self, email: str, senha: str) -> SessaoDTO:
        admin = self._repo.buscar_por_email(email)
        if admin is None or not verificar_senha(senha, admin.senha_hash):
            raise CredenciaisInvalidas("Credenciais invalidas.")
        token = criar_token_acesso(
            admin.id, admin.papel, self._jwt_secret, self._jwt_expire_minutes,
        )
        return SessaoDTO(
            message="Login OK",
            token=token,
            role=admin.papel.value,
            id=admin.id,
            primeiro_acesso=admin.primeiro_acesso,
        )

    def definir_senha_primeiro_acesso(self, admin_id: int, senha: str) -> None:
        senha = _exigir_senha(senha)
        if not self._repo.atualizar_senha(admin_id, gerar_hash_senha(senha), primeiro_acesso=False):
            raise AdministradorNaoEncontrado("Administrador nao encontrado.")

    def solicitar_redefinicao(self, email: str) -> None:
        admin = self._repo.buscar_por_email(email)
        if admin is None:
            raise AdministradorNaoEncontrado("Email nao encontrado.")
        token = gerar_token_reset()
        self._repo.gravar_reset_token(admin.id, token, self._agora() + self._reset_ttl)
        validade = int(self._reset_ttl.total_seconds() // 60)
        if not self._email.enviar_link_redefinicao(admin.email, token, validade):
            raise FalhaEnvioEmail("Erro ao enviar email.")

    def redefinir_senha(self, token: str, nova_senha: str) -> None:
        nova_senha = _exigir_senha(nova_senha)
        admin = self._repo.buscar_por_reset_token(token) if token else None
        if admin is None or not admin.token_valido(token, self._agora()):
            raise TokenInvalido("Token invalido ou expirado.")
        # atualizar_senha tambem limpa o token: uso unico.
        self._repo.atualizar_senha(admin.id, gerar_hash_senha(nova_senha), primeiro_acesso=None)

    # ---- gestao pelo master ---------------------------------------------

    def listar(self) -> list[AdministradorDTO]:
        return [AdministradorDTO.from_domain(a) for a in self._repo.listar()]

    def criar(self, dados: DadosAdministrador) -> str:
        """Cria um admin com senha provisoria. Retorna a mensagem para o master."""
        senha = gerar_senha_temporaria()
        self._repo.inserir(dados, gerar_hash_senha(senha), Papel.ADMIN, primeiro_acesso=True)
        logger.info("Administrador %s criado", dados.email)
        if self._email.enviar_senha_temporaria(dados.email, dados.nome, senha):
            return "Admin criado. Credenciais enviadas para o email informado."
        return f"Admin criado, mas falha ao enviar email. Senha temporaria: {senha}"

    def atualizar(self, admin_id: int, dados: DadosAdministrador) -> None:
        if not self._repo.atualizar_dados(admin_id, dados):
            raise AdministradorNaoEncontrado("Administrador nao encontrado.")

    def alterar_senha(self, admin_id: int, senha: str) -> None:
        senha = _exigir_senha(senha)
        if not self._repo.atualizar_senha(admin_id, gerar_hash_senha(senha), primeiro_acesso=None):
            raise AdministradorNaoEncontrado("Administrador nao encontrado.")

    def resetar_senha(self, email: str) -> None:
        """Nova senha provisoria; obriga a troca no proximo login."""
        admin = self._repo.buscar_por_email(email)
        if admin is None:
            raise AdministradorNaoEncontrado("Email nao encontrado.")
        senha = gerar_senha_temporaria()
        self._repo.atualizar_senha(admin.id, gerar_hash_senha(senha), primeiro_acesso=True)
        if not self._email.enviar_senha_temporaria(admin.email, admin.nome, senha):
            raise FalhaEnvioEmail(
                "Senha resetada no sistema, mas houve erro ao enviar o email."
            )

    def excluir(self, admin_id: int) -> None:
        if not self._repo.excluir_nao_master(admin_id):
            raise ExclusaoNaoPermitida("Nao foi possivel excluir (verifique se e Master).")
        logger.info("Administrador %s excluido", admin_id)
