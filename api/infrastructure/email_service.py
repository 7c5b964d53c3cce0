# api/infrastructure/email_service.py
#
# Envio de emails transacionais pela API HTTP do Resend.
#
# Design decisions:
#   - Todo envio retorna bool e nunca levanta excecao: a falha de email nao
#     pode desfazer a operacao que o disparou (cadastro de admin, reset).
#   - O httpx.Client e injetado para que os testes usem httpx.MockTransport.
from __future__ import annotations

import logging
from html import escape

import httpx

logger = logging.getLogger(__name__)

RESEND_API_URL = "https://api.resend.com/emails"

_LAYOUT = """
<!DOCTYPE html>
<html>
<head><meta charset="utf-8"></head>
<body style="font-family: sans-serif; max-width: 480px; margin: 0 auto; padding: 20px;">
    <h2 style="color: #1e3a8a;">{titulo}</h2>
    {corpo}
    <p style="color: #666; font-size: 14px;">Equipe SICASV</p>
</body>
</html>
"""


class EmailService:
    def __init__(
        self,
        api_key: str,
        remetente: str,
        base_url: str,
        client: httpx.Client | None = None,
    ) -> None:
        self._api_key = api_key
        self._remetente = remetente
        self._base_url = base_url
        self._client = client or httpx.Client(timeout=10)

    def enviar_link_redefinicao(self, destino: str, token: str, validade_minutos: int) -> bool:
        link = f"{self._base_url}/redefinir-senha.html?token={token}"
        corpo = (
            "<p>Recebemos um pedido para redefinir a senha da sua conta.</p>"
            f'<p style="margin: 28px 0;"><a href="{escape(link)}">Redefinir senha</a></p>'
            f"<p>O link expira em {validade_minutos} minutos. "
            "Se voce nao pediu a redefinicao, ignore este email.</p>"
        )
        return self._enviar(destino, "Redefinicao de senha - SICASV", "Redefinir senha", corpo)

    def enviar_senha_temporaria(self, destino: str, nome: str | None, senha: str) -> bool:
        """Boas-vindas (conta nova) ou nova senha provisoria (reset pelo master)."""
        saudacao = f"<p>Ola, {escape(nome)}.</p>" if nome else "<p>Ola.</p>"
        corpo = (
            f"{saudacao}"
            "<p>Sua senha provisoria de acesso ao SICASV e:</p>"
            f'<p style="font-size: 20px; font-weight: bold;">{escape(senha)}</p>'
            f'<p>Acesse <a href="{escape(self._base_url)}">{escape(self._base_url)}</a>; '
            "a troca de senha sera exigida no primeiro login.</p>"
        )
        return self._enviar(destino, "Acesso ao SICASV", "Senha provisoria", corpo)

    def close(self) -> None:
        self._client.close()

    def _enviar(self, destino: str, assunto: str, titulo: str, corpo: str) -> bool:
        if not self._api_key:
            logger.warning("RESEND_API_KEY nao configurada; email '%s' nao enviado.", assunto)
            return False
        try:
            resposta = self._client.post(
                RESEND_API_URL,
                headers={"Authorization": f"Bearer {self._api_key}"},
                json={
                    "from": self._remetente,
                    "to": [destino],
                    "subject": assunto,
                    "html": _LAYOUT.format(titulo=titulo, corpo=corpo),
                },
            )
        except httpx.HTTPError:
            logger.exception("Falha ao enviar email '%s'", assunto)
            return False
        if resposta.is_success:
            return True
        logger.warning("Resend retornou status %s para '%s'", resposta.status_code, assunto)
        return False
