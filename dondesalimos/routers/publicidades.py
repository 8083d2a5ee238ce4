import logging
from fastapi import APIRouter, Depends, Response, status
from typing import List

from dondesalimos.core.constants import ROL_ADMINISTRADOR
from dondesalimos.core.exceptions import ForbiddenException, NotFoundException
from dondesalimos.core.security import require_comercio
from dondesalimos.schemas.auth import TokenData
from dondesalimos.schemas.publicidad import EstadoPublicidad, PublicidadCreate, PublicidadResponse
from dondesalimos.services.comercios_service import ComerciosService, get_comercios_service
from dondesalimos.services.publicidades_service import PublicidadesService, a_response, get_publicidades_service

logger = logging.getLogger(__name__)

router = APIRouter()

VISIBLES = (EstadoPublicidad.activa, EstadoPublicidad.por_expirar)

def _ids_comercios(comercios: ComerciosService, usuario: TokenData) -> set:
    return {c.id_comercio for c in comercios.listar_por_usuario(usuario.id_usuario)}

def _mis_publicidades(publicidades: PublicidadesService, comercios: ComerciosService, usuario: TokenData) -> List[PublicidadResponse]:
    ids = _ids_comercios(comercios, usuario)
    return [a_response(p) for p in publicidades.listar() if p.id_comercio in ids]

def _verificar_comercio_propio(comercios: ComerciosService, id_comercio: int, usuario: TokenData):
    if usuario.rol == ROL_ADMINISTRADOR:
        return
    if id_comercio not in _ids_comercios(comercios, usuario):
        raise ForbiddenException("El comercio no te pertenece")

@router.get("/activas", response_model=List[PublicidadResponse])
def publicidades_activas(publicidades: PublicidadesService = Depends(get_publicidades_service)):
    """Carrusel de la home: aprobadas, pagas y sin expirar."""
    respuestas = [a_response(p) for p in publicidades.listar()]
    return [p for p in respuestas if p.estado_publicidad in VISIBLES]

@router.post("/{id_publicidad}/visualizacion", status_code=status.HTTP_204_NO_CONTENT)
def registrar_visualizacion(id_publicidad: int, publicidades: PublicidadesService = Depends(get_publicidades_service)):
    publicidades.incrementar_visualizacion(id_publicidad)
    return Response(status_code=status.HTTP_204_NO_CONTENT)

@router.get("/mias", response_model=List[PublicidadResponse])
def mis_publicidades(
    usuario: TokenData = Depends(require_comercio),
    publicidades: PublicidadesService = Depends(get_publicidades_service),
    comercios: ComerciosService = Depends(get_comercios_service),
):
    return _mis_publicidades(publicidades, comercios, usuario)

@router.post("/mias", response_model=List[PublicidadResponse], status_code=status.HTTP_201_CREATED)
def crear_publicidad(
    datos: PublicidadCreate,
    usuario: TokenData = Depends(require_comercio),
    publicidades: PublicidadesService = Depends(get_publicidades_service),
    comercios: ComerciosService = Depends(get_comercios_service),
):
    _verificar_comercio_propio(comercios, datos.id_comercio, usuario)
    publicidades.crear(datos)
    return _mis_publicidades(publicidades, comercios, usuario)

@router.delete("/mias/{id_publicidad}", response_model=List[PublicidadResponse])
def eliminar_publicidad(
    id_publicidad: int,
    usuario: TokenData = Depends(require_comercio),
    publicidades: PublicidadesService = Depends(get_publicidades_service),
    comercios: ComerciosService = Depends(get_comercios_service),
):
    publicidad = publicidades.obtener(id_publicidad)
    if not publicidad:
        raise NotFoundException("Publicidad no encontrada")
    _verificar_comercio_propio(comercios, publicidad.id_comercio, usuario)
    publicidades.eliminar(id_publicidad)
    return _mis_publicidades(publicidades, comercios, usuario)
