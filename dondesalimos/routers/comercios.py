import logging
from fastapi import APIRouter, Depends, Query, status
from typing import List, Optional, Union

from dondesalimos.core.api import ApiClient
from dondesalimos.core.constants import ROL_ADMINISTRADOR
from dondesalimos.core.cuit import formatear_cuit, obtener_error_cuit
from dondesalimos.core.estados import es_aprobado
from dondesalimos.core.exceptions import ForbiddenException, NotFoundException
from dondesalimos.core.security import get_api_client, get_usuario_opcional, require_comercio
from dondesalimos.schemas.auth import TokenData
from dondesalimos.schemas.comercio import (
    Comercio,
    ComercioCreate,
    ComercioDetalle,
    ComercioResponse,
    LugarGoogle,
    ValidacionCuit,
)
from dondesalimos.schemas.resenia import ReseniaResponse, ReseniasComercio
from dondesalimos.services.busqueda import ORDEN_NOMBRE, FiltrosBusqueda, aplicar_filtros
from dondesalimos.services.comercios_service import (
    ComerciosService,
    filtrar_aprobados,
    get_comercios_service,
    normalizar_imagen,
)
from dondesalimos.services.elegibilidad_service import verificar_elegibilidad
from dondesalimos.services.google_places_service import GooglePlacesService, get_google_places_service
from dondesalimos.services.resenias_service import ReseniasService, estadisticas_resenias, get_resenias_service

logger = logging.getLogger(__name__)

router = APIRouter()

def _mis_comercios(comercios: ComerciosService, usuario: TokenData) -> List[ComercioResponse]:
    return [ComercioResponse.desde_comercio(c) for c in comercios.listar_por_usuario(usuario.id_usuario)]

def _comercio_propio(comercios: ComerciosService, id_comercio: int, usuario: TokenData) -> Comercio:
    comercio = comercios.obtener(id_comercio)
    if not comercio:
        raise NotFoundException("Comercio no encontrado")
    if usuario.rol != ROL_ADMINISTRADOR and comercio.id_usuario != usuario.id_usuario:
        raise ForbiddenException("El comercio no te pertenece")
    return comercio

def _puede_ver(comercio: Comercio, usuario: Optional[TokenData]) -> bool:
    # Pendientes y rechazados solo los ve el dueño o un admin
    if es_aprobado(comercio):
        return True
    if not usuario:
        return False
    return usuario.rol == ROL_ADMINISTRADOR or comercio.id_usuario == usuario.id_usuario

@router.get("/", response_model=List[Union[ComercioResponse, LugarGoogle]])
def listar_comercios(
    texto: str = "",
    tipo: Optional[int] = None,
    generos: List[str] = Query([]),
    orden: str = ORDEN_NOMBRE,
    lat: Optional[float] = None,
    lng: Optional[float] = None,
    incluir_google: bool = False,
    comercios: ComerciosService = Depends(get_comercios_service),
    google: GooglePlacesService = Depends(get_google_places_service),
):
    """Home: comercios aprobados y, opcionalmente, lugares cercanos de Google."""
    lugares = [ComercioResponse.desde_comercio(c) for c in filtrar_aprobados(comercios.listar())]

    if incluir_google and lat is not None and lng is not None:
        lugares += google.buscar_cercanos_normalizados(lat, lng)

    filtros = FiltrosBusqueda(texto=texto, tipo=tipo, generos=generos, orden=orden)
    return aplicar_filtros(lugares, filtros, lat, lng)

@router.get("/mios", response_model=List[ComercioResponse])
def mis_comercios(
    usuario: TokenData = Depends(require_comercio),
    comercios: ComerciosService = Depends(get_comercios_service),
):
    return _mis_comercios(comercios, usuario)

@router.get("/validar-cuit", response_model=ValidacionCuit)
def validar_cuit(cuit: str):
    error = obtener_error_cuit(cuit)
    return ValidacionCuit(valido=error is None, cuit=formatear_cuit(cuit), error=error)

@router.get("/{id_comercio}", response_model=ComercioDetalle)
def obtener_comercio(
    id_comercio: int,
    usuario: Optional[TokenData] = Depends(get_usuario_opcional),
    api: ApiClient = Depends(get_api_client),
    comercios: ComerciosService = Depends(get_comercios_service),
    resenias: ReseniasService = Depends(get_resenias_service),
):
    """Detalle del comercio con sus reseñas aprobadas y, si hay sesión, si el usuario puede reseñar."""
    comercio = comercios.obtener(id_comercio)
    if not comercio or not _puede_ver(comercio, usuario):
        raise NotFoundException("Comercio no encontrado")

    aprobadas = resenias.listar_por_comercio(id_comercio)
    estadisticas = estadisticas_resenias(aprobadas)
    respuesta = ComercioResponse.desde_comercio(comercio, promedio_puntuacion=estadisticas.promedio)
    respuesta.foto = normalizar_imagen(comercio.foto)

    elegibilidad = None
    if usuario and usuario.id_usuario is not None:
        elegibilidad = verificar_elegibilidad(api, usuario.id_usuario, id_comercio)

    return ComercioDetalle(
        comercio=respuesta,
        resenias=ReseniasComercio(
            resenias=[ReseniaResponse.desde_resenia(r) for r in aprobadas],
            estadisticas=estadisticas,
        ),
        elegibilidad=elegibilidad,
    )

@router.post("/", response_model=List[ComercioResponse], status_code=status.HTTP_201_CREATED)
def crear_comercio(
    datos: ComercioCreate,
    usuario: TokenData = Depends(require_comercio),
    comercios: ComerciosService = Depends(get_comercios_service),
):
    comercios.crear(datos, usuario.id_usuario)
    return _mis_comercios(comercios, usuario)

@router.put("/{id_comercio}", response_model=List[ComercioResponse])
def actualizar_comercio(
    id_comercio: int,
    datos: ComercioCreate,
    usuario: TokenData = Depends(require_comercio),
    comercios: ComerciosService = Depends(get_comercios_service),
):
    actual = _comercio_propio(comercios, id_comercio, usuario)
    comercios.actualizar(actual, datos)
    return _mis_comercios(comercios, usuario)

@router.delete("/{id_comercio}", response_model=List[ComercioResponse])
def eliminar_comercio(
    id_comercio: int,
    usuario: TokenData = Depends(require_comercio),
    comercios: ComerciosService = Depends(get_comercios_service),
):
    _comercio_propio(comercios, id_comercio, usuario)
    comercios.eliminar(id_comercio)
    return _mis_comercios(comercios, usuario)
