# tests/integration/test_api_auth.py
import re

from fastapi.testclient import TestClient

from api.infrastructure.repositories.duckdb_administrador_repo import DuckDBAdministradorRepo

MASTER_EMAIL = "admin@sicasv.com"


def _login(client: TestClient, email: str, senha: str) -> dict:
    response = client.post("/api/login", json={"email": email, "senha": senha})
    assert response.status_code == 200, response.text
    return response.json()


def _bearer(sessao: dict) -> dict[str, str]:
    return {"Authorization": f"Bearer {sessao['token']}"}


def _criar_admin(client: TestClient, master_headers: dict[str, str], email: str) -> str:
    """Cria um admin e devolve a senha provisoria (email nunca sai nos testes)."""
    response = client.post(
        "/api/admin/novo", json={"email": email, "nome": "Ana"}, headers=master_headers,
    )
    assert response.status_code == 200, response.text
    match = re.search(r"Senha temporaria: ([0-9a-f]{8})", response.json()["message"])
    assert match is not None
    return match.group(1)


def test_login_master(client: TestClient) -> None:
    sessao = _login(client, MASTER_EMAIL, "master123")
    assert sessao["message"] == "Login OK"
    assert sessao["role"] == "master"
    assert sessao["primeiroAcesso"] is False
    assert sessao["token"]


def test_login_invalido_401(client: TestClient) -> None:
    response = client.post("/api/login", json={"email": MASTER_EMAIL, "senha": "errada"})
    assert response.status_code == 401
    assert response.json()["detail"] == "Credenciais invalidas."


def test_rotas_de_admin_exigem_token(client: TestClient) -> None:
    assert client.get("/api/admins").status_code == 401
    response = client.get("/api/admins", headers={"Authorization": "Bearer nao-e-um-jwt"})
    assert response.status_code == 401


def test_admin_comum_nao_acessa_rotas_master(
    client: TestClient, master_headers: dict[str, str],
) -> None:
    senha = _criar_admin(client, master_headers, "ana@orgao.gov.br")
    sessao = _login(client, "ana@orgao.gov.br", senha)
    assert sessao["role"] == "admin"
    assert sessao["primeiroAcesso"] is True

    assert client.get("/api/admins", headers=_bearer(sessao)).status_code == 403
    assert client.get("/api/admin/backup", headers=_bearer(sessao)).status_code == 403


def test_primeiro_acesso(client: TestClient, master_headers: dict[str, str]) -> None:
    senha = _criar_admin(client, master_headers, "ana@orgao.gov.br")
    sessao = _login(client, "ana@orgao.gov.br", senha)

    response = client.post(
        "/api/admin/definir-senha", json={"id": sessao["id"], "senha": "minha-senha"},
        headers=_bearer(sessao),
    )
    assert response.status_code == 200
    assert _login(client, "ana@orgao.gov.br", "minha-senha")["primeiroAcesso"] is False


def test_definir_senha_de_outra_conta_403(client: TestClient, master_headers: dict[str, str]) -> None:
    senha = _criar_admin(client, master_headers, "ana@orgao.gov.br")
    sessao = _login(client, "ana@orgao.gov.br", senha)
    response = client.post(
        "/api/admin/definir-senha", json={"id": 1, "senha": "invasao"}, headers=_bearer(sessao),
    )
    assert response.status_code == 403
    assert client.post("/api/admin/definir-senha", json={"senha": "x"}).status_code == 401


def test_esqueci_senha(client: TestClient) -> None:
    response = client.post("/api/auth/esqueci-senha", json={"email": "ninguem@x.com"})
    assert response.status_code == 404
    assert response.json()["detail"] == "Email nao encontrado."

    # Sem RESEND_API_KEY o envio falha, mas o token fica gravado.
    response = client.post("/api/auth/esqueci-senha", json={"email": MASTER_EMAIL})
    assert response.status_code == 500
    assert response.json()["detail"] == "Erro ao enviar email."


def test_redefinir_senha_com_token(client: TestClient) -> None:
    client.post("/api/auth/esqueci-senha", json={"email": MASTER_EMAIL})
    repo = DuckDBAdministradorRepo(client.app.state.database)  # type: ignore[attr-defined]
    admin = repo.buscar_por_email(MASTER_EMAIL)
    assert admin is not None and admin.reset_token is not None

    response = client.post(
        "/api/auth/redefinir-senha", json={"token": admin.reset_token, "novaSenha": "nova-senha"},
    )
    assert response.status_code == 200
    assert _login(client, MASTER_EMAIL, "nova-senha")["role"] == "master"

    response = client.post(
        "/api/auth/redefinir-senha", json={"token": admin.reset_token, "novaSenha": "outra"},
    )
    assert response.status_code == 400
    assert response.json()["detail"] == "Token invalido ou expirado."


def test_gestao_de_admins(client: TestClient, master_headers: dict[str, str]) -> None:
    _criar_admin(client, master_headers, "ana@orgao.gov.br")
    admins = client.get("/api/admins", headers=master_headers).json()
    assert [a["email"] for a in admins] == [MASTER_EMAIL, "ana@orgao.gov.br"]
    assert all("senha_hash" not in a and "reset_token" not in a for a in admins)
    ana_id = admins[1]["id"]

    response = client.put(
        f"/api/admin/{ana_id}",
        json={"email": "ana@orgao.gov.br", "nome": "Ana Paula", "telefone": "11 9999-0000"},
        headers=master_headers,
    )
    assert response.status_code == 200
    admins = client.get("/api/admins", headers=master_headers).json()
    assert admins[1]["nome"] == "Ana Paula"

    response = client.put(f"/api/admin/{ana_id}/senha", json={"senha": "senha-nova"}, headers=master_headers)
    assert response.status_code == 200
    assert _login(client, "ana@orgao.gov.br", "senha-nova")["id"] == ana_id

    response = client.put(f"/api/admin/{ana_id}", json={"email": MASTER_EMAIL}, headers=master_headers)
    assert response.status_code == 409


def test_email_repetido_409(client: TestClient, master_headers: dict[str, str]) -> None:
    response = client.post("/api/admin/novo", json={"email": MASTER_EMAIL}, headers=master_headers)
    assert response.status_code == 409


def test_reset_senha_pelo_master(client: TestClient, master_headers: dict[str, str]) -> None:
    _criar_admin(client, master_headers, "ana@orgao.gov.br")
    response = client.post(
        "/api/admin/reset-senha", json={"email": "ana@orgao.gov.br"}, headers=master_headers,
    )
    # Senha trocada no banco; sem RESEND_API_KEY o email nao sai.
    assert response.status_code == 500
    repo = DuckDBAdministradorRepo(client.app.state.database)  # type: ignore[attr-defined]
    admin = repo.buscar_por_email("ana@orgao.gov.br")
    assert admin is not None and admin.primeiro_acesso is True


def test_excluir_admin(client: TestClient, master_headers: dict[str, str]) -> None:
    _criar_admin(client, master_headers, "ana@orgao.gov.br")
    admins = client.get("/api/admins", headers=master_headers).json()
    master_id, ana_id = admins[0]["id"], admins[1]["id"]

    response = client.delete(f"/api/admin/{master_id}", headers=master_headers)
    assert response.status_code == 403

    response = client.delete(f"/api/admin/{ana_id}", headers=master_headers)
    assert response.status_code == 200
    assert len(client.get("/api/admins", headers=master_headers).json()) == 1
