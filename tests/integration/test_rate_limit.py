# tests/integration/test_rate_limit.py
from __future__ import annotations

import os
from collections.abc import Generator

import pytest
from fastapi.testclient import TestClient

from api.infrastructure.duckdb_connection import Database
from api.infrastructure.email_service import EmailService


@pytest.fixture()
def rate_limited_client() -> Generator[TestClient, None, None]:
    """Client com rate limit ativo (3 req/min para teste rapido)."""
    old_val = os.environ.get("API_RATE_LIMIT_PER_MINUTE", "0")
    os.environ["API_RATE_LIMIT_PER_MINUTE"] = "3"

    from api.infrastructure.config import get_settings
    get_settings.cache_clear()

    from api.interfaces.api.main import create_app
    db = Database()
    email = EmailService("", "x@sicasv.com", "http://localhost:3000")
    with TestClient(create_app(database=db, email_service=email)) as c:
        yield c

    os.environ["API_RATE_LIMIT_PER_MINUTE"] = old_val
    get_settings.cache_clear()
    email.close()
    db.close()


def _tentar_login(client: TestClient) -> int:
    return client.post("/api/login", json={"email": "x@x.com", "senha": "errada"}).status_code


def test_rate_limit_permite_dentro_do_limite(rate_limited_client: TestClient) -> None:
    for _ in range(3):
        assert _tentar_login(rate_limited_client) == 401


def test_rate_limit_bloqueia_apos_limite(rate_limited_client: TestClient) -> None:
    for _ in range(3):
        _tentar_login(rate_limited_client)
    response = rate_limited_client.post("/api/login", json={"email": "x@x.com", "senha": "errada"})
    assert response.status_code == 429
    assert "Muitas tentativas" in response.json()["detail"]


def test_fluxo_de_senha_tambem_limitado(rate_limited_client: TestClient) -> None:
    for _ in range(3):
        rate_limited_client.post("/api/auth/esqueci-senha", json={"email": "x@x.com"})
    assert _tentar_login(rate_limited_client) == 429


def test_rotas_de_cadastro_nao_limitadas(rate_limited_client: TestClient) -> None:
    for _ in range(5):
        assert rate_limited_client.get("/api/servidores").status_code == 200
