# api/interfaces/api/routes/auth_routes.py
from fastapi import APIRouter, Depends, HTTPException

from api.application.dtos.administrador_dto import (
    DefinirSenhaDTO,
    EmailDTO,
    LoginDTO,
    RedefinirSenhaDTO,
    SessaoDTO,
)
from api.application.dtos.cadastro_dto import MensagemDTO
from api.application.services.administrador_service import AdministradorService
from api.domain.administrador.entities import Papel
from api.domain.administrador.exceptions import ErroAdministrador
from api.interfaces.api.dependencies import get_admin_autenticado, get_administrador_service
from api.interfaces.api.erros_http import http_error

router = APIRouter()


@router.post("/login", response_model=SessaoDTO)
def login(
    payload: LoginDTO,
    service: AdministradorService = Depends(get_administrador_service),  # noqa: B008
) -> SessaoDTO:
    try:
        return service.login(payload.email, payload.senha)
    except ErroAdministrador as err:
        raise http_error(err) from err


@router.post("/auth/esqueci-senha", response_model=MensagemDTO, response_model_exclude_none=True)
def esqueci_senha(
    payload: EmailDTO,
    service: AdministradorService = Depends(get_administrador_service),  # noqa: B008
) -> MensagemDTO:
    try:
        service.solicitar_redefinicao(payload.email)
    except ErroAdministrador as err:
        raise http_error(err) from err
    return MensagemDTO(message="Link de redefinicao enviado para seu email.")


@router.post("/auth/redefinir-senha", response_model=MensagemDTO, response_model_exclude_none=True)
def redefinir_senha(
    payload: RedefinirSenhaDTO,
    service: AdministradorService = Depends(get_administrador_service),  # noqa: B008
) -> MensagemDTO:
    try:
        service.redefinir_senha(payload.token, payload.nova_senha)
    except ErroAdministrador as err:
        raise http_error(err) from err
    return MensagemDTO(message="Senha alterada com sucesso! Voce ja pode fazer login.")


@router.post("/admin/definir-senha", response_model=MensagemDTO, response_model_exclude_none=True)
def definir_senha(
    payload: DefinirSenhaDTO,
    admin: tuple[int, Papel] = Depends(get_admin_autenticado),  # noqa: B008
    service: AdministradorService = Depends(get_administrador_service),  # noqa: B008
) -> MensagemDTO:
    """Troca obrigatoria do primeiro acesso, sempre para a propria conta."""
    admin_id, _ = admin
    if payload.id is not None and payload.id != admin_id:
        raise HTTPException(status_code=403, detail="So e possivel definir a propria senha.")
    try:
        service.definir_senha_primeiro_acesso(admin_id, payload.senha)
    except ErroAdministrador as err:
        raise http_error(err) from err
    return MensagemDTO(message="Senha definida com sucesso! Acesso liberado.")
