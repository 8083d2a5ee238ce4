import logging
from datetime import datetime
from fastapi import APIRouter, Depends, HTTPException, status
from typing import List, Optional

from dondesalimos.core.api import ApiClient
from dondesalimos.core.estados import Estado, es_aprobado
from dondesalimos.core.exceptions import NotFoundException
from dondesalimos.core.security import get_api_client, get_usuario_actual, require_comercio
from dondesalimos.core.temporal import a_datetime
from dondesalimos.schemas.auth import TokenData
from dondesalimos.schemas.resenia import Resenia, ReseniaCreate, ReseniaResponse, ResultadoElegibilidad
from dondesalimos.services.comercios_service import ComerciosService, get_comercios_service
from dondesalimos.services.elegibilidad_service import verificar_elegibilidad
from dondesalimos.services.resenias_service import ReseniasService, get_resenias_service
from dondesalimos.services.reservas_service import filtrar_por_estado

logger = logging.getLogger(__name__)

router = APIRouter()

def _respuesta(resenias: List[Resenia]) -> List[ReseniaResponse]:
    ordenadas = sorted(
        resenias,
        key=lambda r: (r.fecha_creacion is not None, a_datetime(r.fecha_creacion) or datetime.min),
        reverse=True,
    )
    return [ReseniaResponse.desde_resenia(r) for r in ordenadas]

def _mis_resenias(resenias: ReseniasService, usuario: TokenData) -> List[ReseniaResponse]:
    return _respuesta([r for r in resenias.listar() if r.id_usuario == usuario.id_usuario])

@router.get("/mias", response_model=List[ReseniaResponse])
def mis_resenias(
    usuario: TokenData = Depends(get_usuario_actual),
    resenias: ReseniasService = Depends(get_resenias_service),
):
    return _mis_resenias(resenias, usuario)

@router.get("/recibidas", response_model=List[ReseniaResponse])
def resenias_recibidas(
    estado: Optional[Estado] = None,
    usuario: TokenData = Depends(require_comercio),
    resenias: ReseniasService = Depends(get_resenias_service),
    comercios: ComerciosService = Depends(get_comercios_service),
):
    """Reseñas (en cualquier estado) de los comercios del usuario."""
    ids = {c.id_comercio for c in comercios.listar_por_usuario(usuario.id_usuario)}
    recibidas = _respuesta([r for r in resenias.listar() if r.id_comercio in ids])
    if estado:
        recibidas = filtrar_por_estado(recibidas, estado)
    return recibidas

@router.get("/elegibilidad/{id_comercio}", response_model=ResultadoElegibilidad)
def elegibilidad(
    id_comercio: int,
    usuario: TokenData = Depends(get_usuario_actual),
    api: ApiClient = Depends(get_api_client),
):
    return verificar_elegibilidad(api, usuario.id_usuario, id_comercio)

@router.post("/", response_model=List[ReseniaResponse], status_code=status.HTTP_201_CREATED)
def crear_resenia(
    datos: ReseniaCreate,
    usuario: TokenData = Depends(get_usuario_actual),
    api: ApiClient = Depends(get_api_client),
    resenias: ReseniasService = Depends(get_resenias_service),
    comercios: ComerciosService = Depends(get_comercios_service),
):
    comercio = comercios.obtener(datos.id_comercio)
    if not comercio or not es_aprobado(comercio):
        raise NotFoundException("Comercio no encontrado")

    resultado = verificar_elegibilidad(api, usuario.id_usuario, datos.id_comercio)
    if not resultado.puede_reseniar:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=resultado.mensaje)

    resenias.crear(usuario.id_usuario, datos)
    return _mis_resenias(resenias, usuario)
