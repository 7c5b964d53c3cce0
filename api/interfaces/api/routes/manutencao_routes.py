# api/interfaces/api/routes/manutencao_routes.py
#
# Rotas de manutencao (master): limpeza de testes, backup, restore e consulta
# da auditoria. Registrar ANTES de admin_routes: /admin/excluir-testes
# colidiria com DELETE /admin/{admin_id}.
from fastapi import APIRouter, Depends, Query, Request
from fastapi.responses import Response
from starlette.concurrency import run_in_threadpool

from api.application.dtos.auditoria_dto import RegistroAuditoriaDTO
from api.application.dtos.cadastro_dto import MensagemDTO
from api.application.services.auditoria_service import AuditoriaService
from api.application.services.backup_service import BackupService
from api.application.services.cadastro_service import CadastroService
from api.domain.cadastro.exceptions import ErroCadastro
from api.interfaces.api.dependencies import (
    get_auditoria_service,
    get_backup_service,
    get_cadastro_service,
    require_master,
)
from api.interfaces.api.erros_http import content_disposition, http_error

router = APIRouter()


@router.delete("/admin/excluir-testes", response_model=MensagemDTO, response_model_exclude_none=True)
def excluir_testes(
    admin_id: int = Depends(require_master),
    service: CadastroService = Depends(get_cadastro_service),  # noqa: B008
) -> MensagemDTO:
    try:
        removidos = service.excluir_testes(admin_id=admin_id)
    except ErroCadastro as err:
        raise http_error(err) from err
    return MensagemDTO(message=f"{removidos} cadastro(s) de teste excluido(s).")


@router.get("/admin/backup", dependencies=[Depends(require_master)])
def baixar_backup(
    service: BackupService = Depends(get_backup_service),  # noqa: B008
) -> Response:
    conteudo = service.gerar_zip()
    return Response(
        content=conteudo,
        media_type="application/zip",
        headers={"Content-Disposition": content_disposition(service.nome_arquivo())},
    )


@router.post(
    "/admin/restore",
    response_model=MensagemDTO,
    response_model_exclude_none=True,
    dependencies=[Depends(require_master)],
)
async def restaurar_backup(
    request: Request,
    service: BackupService = Depends(get_backup_service),  # noqa: B008
) -> MensagemDTO:
    """Corpo da requisicao: o ZIP gerado por /admin/backup (application/zip)."""
    conteudo = await request.body()
    try:
        contagem = await run_in_threadpool(service.restaurar_zip, conteudo)
    except ErroCadastro as err:
        raise http_error(err) from err
    return MensagemDTO(
        message=f"Backup restaurado com sucesso ({contagem.get('titulares', 0)} cadastro(s)).",
    )


@router.get(
    "/admin/auditoria",
    response_model=list[RegistroAuditoriaDTO],
    dependencies=[Depends(require_master)],
)
def listar_auditoria(
    limit: int = Query(100, ge=1, le=1000),
    service: AuditoriaService = Depends(get_auditoria_service),  # noqa: B008
) -> list[RegistroAuditoriaDTO]:
    return [RegistroAuditoriaDTO.from_domain(r) for r in service.listar_recentes(limit)]
