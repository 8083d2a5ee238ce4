import logging
from fastapi import APIRouter, Depends, HTTPException, status
from typing import List, Optional

from dondesalimos.core.constants import ROL_ADMINISTRADOR
from dondesalimos.core.estados import Estado, es_aprobado
from dondesalimos.core.exceptions import ForbiddenException, NotFoundException, ValidacionError
from dondesalimos.core.mensajes import codigo_error_reserva, mensaje_error_reserva
from dondesalimos.core.temporal import a_datetime
from dondesalimos.core.security import get_usuario_actual, require_comercio
from dondesalimos.schemas.auth import TokenData
from dondesalimos.schemas.reserva import (
    NoAsistioRequest,
    RechazoRequest,
    Reserva,
    ReservaCreate,
    ReservaResponse,
)
from dondesalimos.services.comercios_service import ComerciosService, get_comercios_service
from dondesalimos.services.reservas_service import (
    ReservasService,
    filtrar_por_estado,
    get_reservas_service,
    validar_nueva_reserva,
)

logger = logging.getLogger(__name__)

router = APIRouter()

def _respuesta(reservas: List[Reserva]) -> List[ReservaResponse]:
    ordenadas = sorted(reservas, key=lambda r: a_datetime(r.fecha_reserva), reverse=True)
    return [ReservaResponse.desde_reserva(r) for r in ordenadas]

def _mis_reservas(reservas: ReservasService, usuario: TokenData) -> List[ReservaResponse]:
    return _respuesta(reservas.listar_por_usuario(usuario.id_usuario))

def _recibidas(reservas: ReservasService, comercios: ComerciosService, usuario: TokenData) -> List[ReservaResponse]:
    ids = [c.id_comercio for c in comercios.listar_por_usuario(usuario.id_usuario)]
    return _respuesta(reservas.listar_recibidas(usuario.id_usuario, ids))

def _reserva_o_404(reservas: ReservasService, id_reserva: int) -> Reserva:
    reserva = reservas.obtener(id_reserva)
    if not reserva:
        raise NotFoundException("Reserva no encontrada")
    return reserva

def _verificar_duenio(comercios: ComerciosService, reserva: Reserva, usuario: TokenData):
    if usuario.rol == ROL_ADMINISTRADOR:
        return
    comercio = comercios.obtener(reserva.id_comercio)
    if not comercio or comercio.id_usuario != usuario.id_usuario:
        raise ForbiddenException("La reserva no corresponde a uno de tus comercios")

@router.get("/mias", response_model=List[ReservaResponse])
def mis_reservas(
    usuario: TokenData = Depends(get_usuario_actual),
    reservas: ReservasService = Depends(get_reservas_service),
):
    return _mis_reservas(reservas, usuario)

@router.get("/recibidas", response_model=List[ReservaResponse])
def reservas_recibidas(
    estado: Optional[Estado] = None,
    usuario: TokenData = Depends(require_comercio),
    reservas: ReservasService = Depends(get_reservas_service),
    comercios: ComerciosService = Depends(get_comercios_service),
):
    recibidas = _recibidas(reservas, comercios, usuario)
    if estado:
        recibidas = filtrar_por_estado(recibidas, estado)
    return recibidas

@router.post("/", response_model=List[ReservaResponse], status_code=status.HTTP_201_CREATED)
def crear_reserva(
    datos: ReservaCreate,
    usuario: TokenData = Depends(get_usuario_actual),
    reservas: ReservasService = Depends(get_reservas_service),
    comercios: ComerciosService = Depends(get_comercios_service),
):
    comercio = comercios.obtener(datos.id_comercio)
    if not comercio or not es_aprobado(comercio):
        raise NotFoundException("Comercio no encontrado")

    errores = validar_nueva_reserva(datos, comercio.capacidad)
    if errores:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=errores)

    datos.id_usuario = usuario.id_usuario
    try:
        reservas.crear(datos)
    except ValidacionError as e:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail={"codigo": codigo_error_reserva(e.mensaje).value, "mensaje": mensaje_error_reserva(e)},
        )

    return _mis_reservas(reservas, usuario)

@router.post("/{id_reserva}/aprobar", response_model=List[ReservaResponse])
def aprobar_reserva(
    id_reserva: int,
    usuario: TokenData = Depends(require_comercio),
    reservas: ReservasService = Depends(get_reservas_service),
    comercios: ComerciosService = Depends(get_comercios_service),
):
    reserva = _reserva_o_404(reservas, id_reserva)
    _verificar_duenio(comercios, reserva, usuario)
    reservas.aprobar(reserva)
    return _recibidas(reservas, comercios, usuario)

@router.post("/{id_reserva}/rechazar", response_model=List[ReservaResponse])
def rechazar_reserva(
    id_reserva: int,
    datos: RechazoRequest,
    usuario: TokenData = Depends(require_comercio),
    reservas: ReservasService = Depends(get_reservas_service),
    comercios: ComerciosService = Depends(get_comercios_service),
):
    reserva = _reserva_o_404(reservas, id_reserva)
    _verificar_duenio(comercios, reserva, usuario)
    reservas.rechazar(reserva, datos.motivo)
    return _recibidas(reservas, comercios, usuario)

@router.post("/{id_reserva}/no-asistio", response_model=List[ReservaResponse])
def marcar_no_asistio(
    id_reserva: int,
    datos: Optional[NoAsistioRequest] = None,
    usuario: TokenData = Depends(require_comercio),
    reservas: ReservasService = Depends(get_reservas_service),
    comercios: ComerciosService = Depends(get_comercios_service),
):
    reserva = _reserva_o_404(reservas, id_reserva)
    _verificar_duenio(comercios, reserva, usuario)
    reservas.marcar_no_asistio(reserva, datos.motivo if datos else None)
    return _recibidas(reservas, comercios, usuario)

@router.post("/{id_reserva}/cancelar", response_model=List[ReservaResponse])
def cancelar_reserva(
    id_reserva: int,
    usuario: TokenData = Depends(get_usuario_actual),
    reservas: ReservasService = Depends(get_reservas_service),
):
    reserva = _reserva_o_404(reservas, id_reserva)
    if usuario.rol != ROL_ADMINISTRADOR and reserva.id_usuario != usuario.id_usuario:
        raise ForbiddenException("Solo podés cancelar tus propias reservas")
    reservas.cancelar(reserva)
    return _mis_reservas(reservas, usuario)
