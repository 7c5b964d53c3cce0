# api/application/services/backup_service.py
#
# Backup e restore do banco inteiro como ZIP de arquivos Parquet.
#
# Design decisions:
#   - Um arquivo <tabela>.parquet por tabela, gerado com Polars a partir de
#     uma leitura por tabela. A compactacao acontece depois das leituras.
#   - O restore extrai o ZIP num diretorio temporario (so os nomes esperados,
#     nunca caminhos vindos do arquivo) e delega a troca atomica ao repo.
from __future__ import annotations

import io
import logging
import tempfile
import zipfile
from datetime import datetime
from pathlib import Path

from api.domain.cadastro.exceptions import ErroValidacao
from api.infrastructure.repositories.duckdb_backup_repo import TABELAS, DuckDBBackupRepo

logger = logging.getLogger(__name__)


class BackupService:
    def __init__(self, repo: DuckDBBackupRepo) -> None:
        self._repo = repo

    def nome_arquivo(self, agora: datetime | None = None) -> str:
        momento = (agora or datetime.now()).strftime("%Y-%m-%d_%H-%M-%S")
        return f"backup_sicasv_{momento}.zip"

    def gerar_zip(self) -> bytes:
        quadros = {tabela: self._repo.ler_tabela(tabela) for tabela in TABELAS}

        buffer = io.BytesIO()
        with zipfile.ZipFile(buffer, "w", compression=zipfile.ZIP_DEFLATED) as zf:
            for tabela, df in quadros.items():
                parquet = io.BytesIO()
                df.write_parquet(parquet)
                zf.writestr(f"{tabela}.parquet", parquet.getvalue())
        logger.info(
            "Backup gerado: %s",
            {tabela: df.height for tabela, df in quadros.items()},
        )
        return buffer.getvalue()

    def restaurar_zip(self, conteudo: bytes) -> dict[str, int]:
        if not conteudo:
            raise ErroValidacao("Nenhum arquivo de backup enviado.")
        try:
            with zipfile.ZipFile(io.BytesIO(conteudo)) as zf, tempfile.TemporaryDirectory() as tmp:
                presentes = set(zf.namelist())
                arquivos: dict[str, Path] = {}
                for tabela in TABELAS:
                    nome = f"{tabela}.parquet"
                    if nome not in presentes:
                        continue
                    destino = Path(tmp) / nome
                    destino.write_bytes(zf.read(nome))
                    arquivos[tabela] = destino
                return self._repo.substituir_tudo(arquivos)
        except zipfile.BadZipFile as err:
            raise ErroValidacao("Arquivo de backup invalido: ZIP esperado.") from err
        except ValueError as err:
            raise ErroValidacao(str(err)) from err
