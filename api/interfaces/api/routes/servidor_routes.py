# api/interfaces/api/routes/servidor_routes.py
from fastapi import APIRouter, Depends, Query

from api.application.dtos.cadastro_dto import (
    CadastroCompletoDTO,
    CadastroPayloadDTO,
    ItemLixeiraDTO,
    ListagemDTO,
    MensagemDTO,
)
from api.application.services.cadastro_service import CadastroService
from api.application.services.consulta_service import ConsultaService
from api.domain.cadastro.exceptions import ErroCadastro
from api.interfaces.api.dependencies import (
    get_admin_id,
    get_cadastro_service,
    get_consulta_service,
)
from api.interfaces.api.erros_http import http_error

router = APIRouter()


@router.get("/servidores", response_model=ListagemDTO)
def listar_servidores(
    page: int = Query(1),
    limit: int = Query(10),
    search: str | None = Query(None),
    cargo: str | None = Query(None),
    secretaria: str | None = Query(None),
    tipo_admissao: str | None = Query(None, alias="tipoAdmissao"),
    status: str | None = Query(None),
    sort_by: str | None = Query(None, alias="sortBy"),
    order: str | None = Query(None),
    service: ConsultaService = Depends(get_consulta_service),  # noqa: B008
) -> ListagemDTO:
    try:
        return service.listar(
            page=page,
            limit=limit,
            search=search,
            cargo=cargo,
            secretaria=secretaria,
            tipo_admissao=tipo_admissao,
            status=status,
            sort_by=sort_by,
            order=order,
        )
    except ErroCadastro as err:
        raise http_error(err) from err


@router.get("/servidor/{titular_id}", response_model=CadastroCompletoDTO)
def obter_servidor(
    titular_id: int,
    edit: bool = Query(False),
    service: ConsultaService = Depends(get_consulta_service),  # noqa: B008
) -> CadastroCompletoDTO:
    try:
        return service.obter_por_id(titular_id, incluir_conteudo=edit)
    except ErroCadastro as err:
        raise http_error(err) from err


@router.get("/cadastro/{cpf}", response_model=CadastroCompletoDTO)
def obter_por_cpf(
    cpf: str,
    service: ConsultaService = Depends(get_consulta_service),  # noqa: B008
) -> CadastroCompletoDTO:
    try:
        return service.obter_por_cpf(cpf)
    except ErroCadastro as err:
        raise http_error(err) from err


@router.post("/cadastro", response_model=MensagemDTO, response_model_exclude_none=True)
def criar_cadastro(
    payload: CadastroPayloadDTO,
    admin_id: int | None = Depends(get_admin_id),
    service: CadastroService = Depends(get_cadastro_service),  # noqa: B008
) -> MensagemDTO:
    try:
        novo_id = service.criar(
            payload.titular.to_domain(),
            conjuge=payload.conjuge_domain(),
            dependentes=payload.dependentes_domain(),
            anexos=payload.anexos_domain() or [],
            status=payload.status,
            admin_id=admin_id,
        )
    except ErroCadastro as err:
        raise http_error(err) from err
    return MensagemDTO(message="Cadastro realizado com sucesso!", id=novo_id)


@router.put("/servidor/{titular_id}", response_model=MensagemDTO, response_model_exclude_none=True)
def substituir_cadastro(
    titular_id: int,
    payload: CadastroPayloadDTO,
    admin_id: int | None = Depends(get_admin_id),
    service: CadastroService = Depends(get_cadastro_service),  # noqa: B008
) -> MensagemDTO:
    try:
        service.substituir(
            titular_id,
            payload.titular.to_domain(),
            conjuge=payload.conjuge_domain(),
            dependentes=payload.dependentes_domain(),
            anexos=payload.anexos_domain(),
            status=payload.status,
            admin_id=admin_id,
        )
    except ErroCadastro as err:
        raise http_error(err) from err
    return MensagemDTO(message="Cadastro atualizado com sucesso!")


@router.delete("/servidor/{titular_id}", response_model=MensagemDTO, response_model_exclude_none=True)
def excluir_servidor(
    titular_id: int,
    admin_id: int | None = Depends(get_admin_id),
    service: CadastroService = Depends(get_cadastro_service),  # noqa: B008
) -> MensagemDTO:
    try:
        service.excluir(titular_id, admin_id=admin_id)
    except ErroCadastro as err:
        raise http_error(err) from err
    return MensagemDTO(message="Servidor movido para a lixeira.")


@router.put(
    "/servidor/{titular_id}/restaurar",
    response_model=MensagemDTO,
    response_model_exclude_none=True,
)
def restaurar_servidor(
    titular_id: int,
    admin_id: int | None = Depends(get_admin_id),
    service: CadastroService = Depends(get_cadastro_service),  # noqa: B008
) -> MensagemDTO:
    try:
        service.restaurar(titular_id, admin_id=admin_id)
    except ErroCadastro as err:
        raise http_error(err) from err
    return MensagemDTO(message="Servidor restaurado com sucesso.")


@router.get("/lixeira", response_model=list[ItemLixeiraDTO])
def listar_lixeira(
    service: ConsultaService = Depends(get_consulta_service),  # noqa: B008
) -> list[ItemLixeiraDTO]:
    return service.lixeira()


@router.delete("/lixeira/{titular_id}", response_model=MensagemDTO, response_model_exclude_none=True)
def excluir_permanente(
    titular_id: int,
    admin_id: int | None = Depends(get_admin_id),
    service: CadastroService = Depends(get_cadastro_service),  # noqa: B008
) -> MensagemDTO:
    try:
        service.excluir_permanente(titular_id, admin_id=admin_id)
    except ErroCadastro as err:
        raise http_error(err) from err
    return MensagemDTO(message="Servidor excluido permanentemente.")
