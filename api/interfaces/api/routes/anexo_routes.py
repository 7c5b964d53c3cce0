# api/interfaces/api/routes/anexo_routes.py
from fastapi import APIRouter, Depends
from fastapi.responses import Response

from api.application.dtos.cadastro_dto import AnexoDTO, MensagemDTO, NovoAnexoDTO
from api.application.services.anexo_service import AnexoService
from api.domain.cadastro.exceptions import ErroCadastro
from api.interfaces.api.dependencies import get_admin_id, get_anexo_service
from api.interfaces.api.erros_http import content_disposition, http_error

router = APIRouter()


@router.get("/anexo/{anexo_id}", response_model=AnexoDTO)
def obter_anexo(
    anexo_id: int,
    service: AnexoService = Depends(get_anexo_service),  # noqa: B008
) -> AnexoDTO:
    try:
        return service.obter(anexo_id)
    except ErroCadastro as err:
        raise http_error(err) from err


@router.get("/anexo/{anexo_id}/download")
def baixar_anexo(
    anexo_id: int,
    service: AnexoService = Depends(get_anexo_service),  # noqa: B008
) -> Response:
    try:
        arquivo = service.download(anexo_id)
    except ErroCadastro as err:
        raise http_error(err) from err
    return Response(
        content=arquivo.dados,
        media_type=arquivo.mime,
        headers={"Content-Disposition": content_disposition(arquivo.nome)},
    )


@router.get("/servidor/{titular_id}/anexos/zip")
def baixar_anexos_zip(
    titular_id: int,
    service: AnexoService = Depends(get_anexo_service),  # noqa: B008
) -> Response:
    try:
        arquivo = service.zip_do_titular(titular_id)
    except ErroCadastro as err:
        raise http_error(err) from err
    return Response(
        content=arquivo.dados,
        media_type=arquivo.mime,
        headers={"Content-Disposition": content_disposition(arquivo.nome)},
    )


@router.post("/servidor/{titular_id}/anexo", response_model=MensagemDTO)
def enviar_anexo(
    titular_id: int,
    payload: NovoAnexoDTO,
    admin_id: int | None = Depends(get_admin_id),
    service: AnexoService = Depends(get_anexo_service),  # noqa: B008
) -> MensagemDTO:
    try:
        anexo_id = service.adicionar(titular_id, payload.to_domain(), admin_id=admin_id)
    except ErroCadastro as err:
        raise http_error(err) from err
    return MensagemDTO(message="Documento anexado com sucesso!", id=anexo_id)


@router.get("/servidor/{titular_id}/foto")
def obter_foto(
    titular_id: int,
    service: AnexoService = Depends(get_anexo_service),  # noqa: B008
) -> Response:
    try:
        arquivo = service.foto(titular_id)
    except ErroCadastro as err:
        raise http_error(err) from err
    return Response(
        content=arquivo.dados,
        media_type=arquivo.mime,
        headers={"Cache-Control": "public, max-age=86400"},
    )
