# api/interfaces/api/routes/admin_routes.py
#
# Gestao de administradores. Todas as rotas exigem token de master.
from fastapi import APIRouter, Depends, HTTPException

from api.application.dtos.administrador_dto import (
    AdministradorDTO,
    DadosAdministradorDTO,
    EmailDTO,
    SenhaDTO,
)
from api.application.dtos.cadastro_dto import MensagemDTO
from api.application.services.administrador_service import AdministradorService
from api.domain.administrador.entities import DadosAdministrador
from api.domain.administrador.exceptions import ErroAdministrador
from api.interfaces.api.dependencies import get_administrador_service, require_master
from api.interfaces.api.erros_http import http_error

router = APIRouter(dependencies=[Depends(require_master)])


def _dados(payload: DadosAdministradorDTO) -> DadosAdministrador:
    try:
        return payload.to_domain()
    except ValueError as err:
        raise HTTPException(status_code=422, detail=str(err)) from err


@router.get("/admins", response_model=list[AdministradorDTO])
def listar_admins(
    service: AdministradorService = Depends(get_administrador_service),  # noqa: B008
) -> list[AdministradorDTO]:
    return service.listar()


@router.post("/admin/novo", response_model=MensagemDTO, response_model_exclude_none=True)
def criar_admin(
    payload: DadosAdministradorDTO,
    service: AdministradorService = Depends(get_administrador_service),  # noqa: B008
) -> MensagemDTO:
    try:
        mensagem = service.criar(_dados(payload))
    except ErroAdministrador as err:
        raise http_error(err) from err
    return MensagemDTO(message=mensagem)


@router.post("/admin/reset-senha", response_model=MensagemDTO, response_model_exclude_none=True)
def resetar_senha(
    payload: EmailDTO,
    service: AdministradorService = Depends(get_administrador_service),  # noqa: B008
) -> MensagemDTO:
    try:
        service.resetar_senha(payload.email)
    except ErroAdministrador as err:
        raise http_error(err) from err
    return MensagemDTO(message="Uma nova senha foi enviada para o email.")


@router.put("/admin/{admin_id}", response_model=MensagemDTO, response_model_exclude_none=True)
def atualizar_admin(
    admin_id: int,
    payload: DadosAdministradorDTO,
    service: AdministradorService = Depends(get_administrador_service),  # noqa: B008
) -> MensagemDTO:
    try:
        service.atualizar(admin_id, _dados(payload))
    except ErroAdministrador as err:
        raise http_error(err) from err
    return MensagemDTO(message="Dados do administrador atualizados com sucesso.")


@router.put(
    "/admin/{admin_id}/senha",
    response_model=MensagemDTO,
    response_model_exclude_none=True,
)
def alterar_senha_admin(
    admin_id: int,
    payload: SenhaDTO,
    service: AdministradorService = Depends(get_administrador_service),  # noqa: B008
) -> MensagemDTO:
    try:
        service.alterar_senha(admin_id, payload.senha)
    except ErroAdministrador as err:
        raise http_error(err) from err
    return MensagemDTO(message="Senha alterada com sucesso.")


@router.delete("/admin/{admin_id}", response_model=MensagemDTO, response_model_exclude_none=True)
def excluir_admin(
    admin_id: int,
    service: AdministradorService = Depends(get_administrador_service),  # noqa: B008
) -> MensagemDTO:
    try:
        service.excluir(admin_id)
    except ErroAdministrador as err:
        raise http_error(err) from err
    return MensagemDTO(message="Administrador excluido com sucesso.")
