# tests/integration/conftest.py
from __future__ import annotations

import os
from collections.abc import Generator
from typing import Any

import pytest
from fastapi.testclient import TestClient

from api.infrastructure.duckdb_connection import Database
from api.infrastructure.email_service import EmailService

# Desabilitar rate limit em testes
os.environ["API_RATE_LIMIT_PER_MINUTE"] = "0"
os.environ["MASTER_EMAIL"] = "admin@sicasv.com"
os.environ["MASTER_PASSWORD"] = "master123"
os.environ["JWT_SECRET"] = "segredo-dos-testes"
os.environ["RESEND_API_KEY"] = ""
os.environ["FRONTEND_DIR"] = "/nao/existe"

MASTER_EMAIL = "admin@sicasv.com"
MASTER_SENHA = "master123"


@pytest.fixture()
def client() -> Generator[TestClient, None, None]:
    """TestClient com DuckDB in-memory novo e email sem chave (nunca envia)."""
    from api.infrastructure.config import get_settings
    get_settings.cache_clear()

    from api.interfaces.api.main import create_app
    db = Database()
    email = EmailService("", "SICASV <teste@sicasv.com>", "http://localhost:3000")
    app = create_app(database=db, email_service=email)
    with TestClient(app) as c:
        yield c
    email.close()
    db.close()


@pytest.fixture()
def master_headers(client: TestClient) -> dict[str, str]:
    response = client.post("/api/login", json={"email": MASTER_EMAIL, "senha": MASTER_SENHA})
    assert response.status_code == 200
    return {"Authorization": f"Bearer {response.json()['token']}"}


@pytest.fixture()
def payload_cadastro() -> dict[str, Any]:
    """Corpo camelCase como o front-end envia."""
    return {
        "titular": {
            "nome": "Ana Silva",
            "cpf": "111.222.333-44",
            "rg": "",
            "dataNasc": "1990-05-10",
            "matricula": "M-001",
            "cargo": "Analista",
            "secretaria": "Educacao",
            "lotacao": "Escola Central",
            "tipoAdmissao": "Concurso",
            "salarioBase": "R$ 3.500,75",
            "fotoPerfil": "data:image/png;base64,QUJD",
        },
        "conjuge": {"temConjuge": True, "nome": "Bruno Silva", "cpf": "", "dataNasc": "1988-01-02"},
        "dependentes": [
            {"nome": "Clara", "parentesco": "Filha", "dataNasc": "2015-03-04"},
            {"nome": "Davi", "parentesco": "Filho", "dataNasc": ""},
        ],
        "anexos": [
            {"nome": "rg.pdf", "tipo": "application/pdf", "conteudo": "data:application/pdf;base64,QUJD"},
        ],
    }
