# dondesalimos/services/reservas_service.py

import logging
from datetime import datetime, timedelta
from typing import Iterable, List, Optional

from fastapi import Depends

from dondesalimos.config import settings
from dondesalimos.core.api import ApiClient
from dondesalimos.core.constants import (
    MOTIVO_CANCELACION_USUARIO,
    MOTIVO_NO_ASISTIO,
    TIEMPO_TOLERANCIA_DEFAULT,
)
from dondesalimos.core.estados import Estado, es_aprobado, es_pendiente, es_rechazado
from dondesalimos.core.exceptions import ApiError, NoEncontradoError
from dondesalimos.core.security import get_api_client
from dondesalimos.core.temporal import a_datetime, es_futura, es_hoy, es_pasada
from dondesalimos.schemas.reserva import EstadisticasReservas, Reserva, ReservaCreate

logger = logging.getLogger(__name__)


def get_reservas_service(api: ApiClient = Depends(get_api_client)):
    return ReservasService(api)


def _a_reservas(datos) -> List[Reserva]:
    return [Reserva(**r) for r in (datos or [])]


def _fecha_iso(valor) -> Optional[str]:
    return valor.isoformat() if isinstance(valor, datetime) else valor


class ReservasService:
    def __init__(self, api: ApiClient):
        self.api = api

    # =======================================================
    # Lectura
    # =======================================================
    def listar(self) -> List[Reserva]:
        return _a_reservas(self.api.get("/api/reservas/listado"))

    def obtener(self, id_reserva: int) -> Optional[Reserva]:
        datos = self.api.get(f"/api/reservas/buscarIdReserva/{id_reserva}")
        return Reserva(**datos) if datos else None

    def listar_por_usuario(self, id_usuario: int) -> List[Reserva]:
        # 404 = el usuario no tiene reservas
        return _a_reservas(self.api.get(f"/api/reservas/usuario/{id_usuario}"))

    def listar_por_comercio(self, nombre_comercio: str) -> List[Reserva]:
        return _a_reservas(self.api.get(f"/api/reservas/buscarNombreComercio/{nombre_comercio}"))

    def listar_recibidas(self, id_usuario: int, ids_comercio: Optional[Iterable[int]] = None) -> List[Reserva]:
        """
        Reservas recibidas en los comercios de un dueño.
        Si el endpoint no existe en la API (404) se filtra el listado completo por comercio.
        """
        try:
            datos = self.api.get(f"/api/reservas/recibidasUsuario/{id_usuario}", none_si_404=False)
            return _a_reservas(datos)
        except NoEncontradoError:
            logger.warning("Endpoint recibidasUsuario no disponible, usando el listado completo")

        reservas = self.listar()
        ids = set(ids_comercio or [])
        if ids:
            return [r for r in reservas if r.id_comercio in ids]
        return reservas

    # =======================================================
    # Escritura
    # =======================================================
    @staticmethod
    def _payload(reserva: Reserva, **cambios) -> dict:
        payload = {
            "id_reserva": reserva.id_reserva,
            "id_usuario": reserva.id_usuario,
            "id_comercio": reserva.id_comercio,
            "fecha_reserva": _fecha_iso(reserva.fecha_reserva),
            "tiempo_tolerancia": reserva.tiempo_tolerancia or TIEMPO_TOLERANCIA_DEFAULT,
            "comenzales": reserva.comensales,
            "estado": reserva.estado,
            "fecha_creacion": _fecha_iso(reserva.fecha_creacion),
            "motivo_rechazo": reserva.motivo_rechazo,
        }
        payload.update(cambios)
        return payload

    def crear(self, datos: ReservaCreate, ahora: Optional[datetime] = None) -> Optional[Reserva]:
        payload = {
            "id_usuario": datos.id_usuario,
            "id_comercio": datos.id_comercio,
            "fecha_reserva": _fecha_iso(datos.fecha_reserva),
            "tiempo_tolerancia": datos.tiempo_tolerancia or TIEMPO_TOLERANCIA_DEFAULT,
            "comenzales": datos.comensales,
            "estado": False,
            "fecha_creacion": (ahora or datetime.now()).isoformat(),
            "motivo_rechazo": None,
        }
        respuesta = self.api.post("/api/reservas/crear", payload)
        logger.info(f"Reserva creada para el comercio {datos.id_comercio} (usuario {datos.id_usuario})")
        if isinstance(respuesta, dict) and respuesta.get("id_reserva"):
            return Reserva(**respuesta)
        return None

    def actualizar(self, id_reserva: int, reserva: Reserva, **cambios):
        return self.api.put(f"/api/reservas/actualizar/{id_reserva}", self._payload(reserva, **cambios))

    def eliminar(self, id_reserva: int):
        logger.info(f"Eliminando reserva {id_reserva}")
        return self.api.delete(f"/api/reservas/eliminar/{id_reserva}")

    # RESERVAS - APROBACIÓN Y RECHAZO
    def aprobar(self, reserva: Reserva):
        return self.actualizar(reserva.id_reserva, reserva, estado=True, motivo_rechazo=None)

    def rechazar(self, reserva: Reserva, motivo: str):
        return self.actualizar(reserva.id_reserva, reserva, estado=False, motivo_rechazo=motivo)

    def cancelar(self, reserva: Reserva, motivo: str = MOTIVO_CANCELACION_USUARIO):
        return self.rechazar(reserva, motivo)

    def marcar_no_asistio(self, reserva: Reserva, motivo: Optional[str] = None, ahora: Optional[datetime] = None):
        if not (es_pendiente(reserva) and es_pasada(reserva.fecha_reserva, ahora)):
            raise ApiError("Solo se pueden marcar como 'no asistió' reservas pendientes con fecha pasada", 400)
        return self.rechazar(reserva, motivo or MOTIVO_NO_ASISTIO)


# FILTROS Y BÚSQUEDAS
def filtrar_por_estado(reservas: Iterable[Reserva], estado: Estado) -> List[Reserva]:
    criterio = {Estado.PENDIENTE: es_pendiente, Estado.APROBADO: es_aprobado, Estado.RECHAZADO: es_rechazado}[estado]
    return [r for r in reservas if criterio(r)]


def filtrar_por_comercio(reservas: Iterable[Reserva], id_comercio: int) -> List[Reserva]:
    return [r for r in reservas if r.id_comercio == id_comercio]


def filtrar_por_usuario(reservas: Iterable[Reserva], id_usuario: int) -> List[Reserva]:
    return [r for r in reservas if r.id_usuario == id_usuario]


def filtrar_hoy(reservas: Iterable[Reserva], ahora: Optional[datetime] = None) -> List[Reserva]:
    return [r for r in reservas if es_hoy(r.fecha_reserva, ahora)]


def filtrar_futuras(reservas: Iterable[Reserva], ahora: Optional[datetime] = None) -> List[Reserva]:
    return [r for r in reservas if es_futura(r.fecha_reserva, ahora)]


def filtrar_pasadas(reservas: Iterable[Reserva], ahora: Optional[datetime] = None) -> List[Reserva]:
    return [r for r in reservas if es_pasada(r.fecha_reserva, ahora)]


def estadisticas_reservas(reservas: Iterable[Reserva], ahora: Optional[datetime] = None) -> EstadisticasReservas:
    reservas = list(reservas)
    total = len(reservas)
    aprobadas = len(filtrar_por_estado(reservas, Estado.APROBADO))
    return EstadisticasReservas(
        total=total,
        aprobadas=aprobadas,
        pendientes=len(filtrar_por_estado(reservas, Estado.PENDIENTE)),
        rechazadas=len(filtrar_por_estado(reservas, Estado.RECHAZADO)),
        hoy=len(filtrar_hoy(reservas, ahora)),
        futuras=len(filtrar_futuras(reservas, ahora)),
        pasadas=len(filtrar_pasadas(reservas, ahora)),
        tasa_aprobacion=round(aprobadas / total * 100, 1) if total else 0,
    )


# UTILIDADES
def formatear_tiempo_tolerancia(tiempo_tolerancia: Optional[str]) -> str:
    if not tiempo_tolerancia:
        return "No especificado"

    partes = tiempo_tolerancia.split(":")
    if len(partes) < 2:
        return tiempo_tolerancia
    try:
        horas, minutos = int(partes[0]), int(partes[1])
    except ValueError:
        return tiempo_tolerancia

    if horas > 0 and minutos > 0:
        return f"{horas}h {minutos}min"
    if horas > 0:
        return f"{horas} hora{'s' if horas > 1 else ''}"
    if minutos > 0:
        return f"{minutos} minuto{'s' if minutos > 1 else ''}"
    return tiempo_tolerancia


def validar_nueva_reserva(
    datos: ReservaCreate,
    capacidad: Optional[int] = None,
    ahora: Optional[datetime] = None,
) -> dict:
    """Devuelve {campo: mensaje}; vacío si la reserva es válida."""
    errores = {}
    ahora = a_datetime(ahora) or datetime.now()
    fecha = a_datetime(datos.fecha_reserva)

    if fecha < ahora:
        errores["fecha_reserva"] = "No podés reservar en fechas pasadas"
    elif fecha.date() > (ahora + timedelta(days=settings.MAX_RESERVATION_DAYS_AHEAD)).date():
        errores["fecha_reserva"] = f"Solo se puede reservar hasta {settings.MAX_RESERVATION_DAYS_AHEAD} días antes"

    if not datos.comensales or datos.comensales < 1:
        errores["comensales"] = "Mínimo 1 persona"
    elif capacidad and datos.comensales > capacidad:
        errores["comensales"] = f"Capacidad máxima: {capacidad} personas"

    return errores
