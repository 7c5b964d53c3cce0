# tests/integration/test_api_manutencao.py
import copy
import io
import zipfile

from fastapi.testclient import TestClient

TABELAS = ["administradores", "titulares", "conjuges", "dependentes", "anexos", "audit_logs"]


def test_excluir_testes(
    client: TestClient, payload_cadastro: dict, master_headers: dict[str, str],
) -> None:
    teste = copy.deepcopy(payload_cadastro)
    teste["titular"].update({"cpf": "999.999.999-99", "matricula": "TESTE-001"})
    client.post("/api/cadastro", json=payload_cadastro)
    client.post("/api/cadastro", json=teste)

    assert client.delete("/api/admin/excluir-testes").status_code == 401

    response = client.delete("/api/admin/excluir-testes", headers=master_headers)
    assert response.status_code == 200
    assert response.json() == {"message": "1 cadastro(s) de teste excluido(s)."}
    assert client.get("/api/servidores").json()["total"] == 1


def test_backup_zip(client: TestClient, payload_cadastro: dict, master_headers: dict[str, str]) -> None:
    client.post("/api/cadastro", json=payload_cadastro)
    response = client.get("/api/admin/backup", headers=master_headers)
    assert response.status_code == 200
    assert response.headers["content-type"] == "application/zip"
    assert "backup_sicasv_" in response.headers["content-disposition"]
    with zipfile.ZipFile(io.BytesIO(response.content)) as zf:
        assert sorted(zf.namelist()) == sorted(f"{t}.parquet" for t in TABELAS)


def test_backup_exige_master(client: TestClient) -> None:
    assert client.get("/api/admin/backup").status_code == 401


def test_restore_rejeita_arquivo_invalido(client: TestClient, master_headers: dict[str, str]) -> None:
    response = client.post("/api/admin/restore", content=b"nao e zip", headers=master_headers)
    assert response.status_code == 422

    response = client.post("/api/admin/restore", content=b"", headers=master_headers)
    assert response.status_code == 422


def test_restore_incompleto_422(client: TestClient, master_headers: dict[str, str]) -> None:
    buffer = io.BytesIO()
    with zipfile.ZipFile(buffer, "w") as zf:
        zf.writestr("titulares.parquet", b"")
    response = client.post("/api/admin/restore", content=buffer.getvalue(), headers=master_headers)
    assert response.status_code == 422
    assert "faltam" in response.json()["detail"]


def test_auditoria_limite(client: TestClient, payload_cadastro: dict, master_headers: dict[str, str]) -> None:
    novo_id = client.post("/api/cadastro", json=payload_cadastro).json()["id"]
    client.delete(f"/api/servidor/{novo_id}")
    client.put(f"/api/servidor/{novo_id}/restaurar")
    client.app.state.auditoria.aguardar_pendentes(timeout=5)  # type: ignore[attr-defined]

    registros = client.get("/api/admin/auditoria", headers=master_headers).json()
    assert {r["acao"] for r in registros} == {"CRIACAO", "EXCLUSAO", "RESTAURACAO"}

    limitado = client.get("/api/admin/auditoria", params={"limit": 1}, headers=master_headers).json()
    assert len(limitado) == 1
    assert client.get("/api/admin/auditoria", params={"limit": 0}, headers=master_headers).status_code == 422
