# dondesalimos/services/publicidades_service.py

import logging
import math
from datetime import datetime, timedelta
from typing import Iterable, List, Optional, Union

from fastapi import Depends

from dondesalimos.core.api import ApiClient
from dondesalimos.core.estados import Estado, estado_de
from dondesalimos.core.security import get_api_client
from dondesalimos.core.temporal import a_datetime
from dondesalimos.schemas.publicidad import (
    EstadisticasPublicidades,
    EstadoPublicidad,
    Publicidad,
    PublicidadCreate,
    PublicidadResponse,
)

logger = logging.getLogger(__name__)

DIAS_POR_DEFECTO = 7
# TimeSpan no admite 30 en la posición de horas: 23 representa 30 días
DIAS_MAXIMOS = 30
TIMESPAN_MAXIMO = 23


def get_publicidades_service(api: ApiClient = Depends(get_api_client)):
    return PublicidadesService(api)


def dias_a_timespan(dias) -> str:
    try:
        numero = int(dias) or DIAS_POR_DEFECTO
    except (TypeError, ValueError):
        numero = DIAS_POR_DEFECTO
    if numero >= DIAS_MAXIMOS:
        numero = TIMESPAN_MAXIMO
    return f"{numero}:00:00"


def timespan_a_dias(tiempo: Union[str, int, None]) -> int:
    if not tiempo:
        return DIAS_POR_DEFECTO
    if isinstance(tiempo, int):
        return DIAS_MAXIMOS if tiempo == TIMESPAN_MAXIMO else tiempo

    texto = str(tiempo)
    # "15.00:00:00" (días.horas:min:seg) o "15:00:00"
    primero = texto.split(".")[0] if "." in texto else texto.split(":")[0]
    try:
        dias = int(primero) or DIAS_POR_DEFECTO
    except ValueError:
        dias = DIAS_POR_DEFECTO
    return DIAS_MAXIMOS if dias == TIMESPAN_MAXIMO else dias


class PublicidadesService:
    def __init__(self, api: ApiClient):
        self.api = api

    def listar(self) -> List[Publicidad]:
        return [Publicidad(**p) for p in (self.api.get("/api/Publicidades/listado") or [])]

    def obtener(self, id_publicidad: int) -> Optional[Publicidad]:
        datos = self.api.get(f"/api/Publicidades/buscarIdPublicidad/{id_publicidad}")
        return Publicidad(**datos) if datos else None

    def crear(self, datos: PublicidadCreate, ahora: Optional[datetime] = None):
        # Queda pendiente de aprobación y de pago
        payload = {
            "descripcion": datos.descripcion or "",
            "visualizaciones": 0,
            "tiempo": dias_a_timespan(datos.dias),
            "imagen": datos.imagen or None,
            "estado": False,
            "pago": False,
            "fecha_creacion": (ahora or datetime.now()).isoformat(),
            "id_comercio": datos.id_comercio,
            "motivo_rechazo": None,
        }
        respuesta = self.api.post("/api/Publicidades/crear", payload)
        logger.info(f"Publicidad creada para el comercio {datos.id_comercio} por {datos.dias} días")
        return respuesta

    def actualizar(self, publicidad: Publicidad, **cambios):
        tiempo = publicidad.tiempo
        if isinstance(tiempo, int):
            tiempo = dias_a_timespan(tiempo)
        payload = {
            "id_publicidad": publicidad.id_publicidad,
            "descripcion": publicidad.descripcion or "",
            "visualizaciones": publicidad.visualizaciones or 0,
            "tiempo": tiempo,
            "imagen": publicidad.imagen or "",
            "estado": publicidad.estado,
            "pago": publicidad.pago,
            "fecha_creacion": (publicidad.fecha_creacion or datetime.now()).isoformat(),
            "id_comercio": publicidad.id_comercio,
            "motivo_rechazo": publicidad.motivo_rechazo,
        }
        payload.update(cambios)
        return self.api.put(f"/api/Publicidades/actualizar/{publicidad.id_publicidad}", payload)

    def eliminar(self, id_publicidad: int):
        return self.api.delete(f"/api/Publicidades/eliminar/{id_publicidad}")

    def incrementar_visualizacion(self, id_publicidad: int):
        return self.api.put(f"/api/Publicidades/incrementar-visualizacion/{id_publicidad}")

    # APROBACIÓN/RECHAZO (Admin)
    def aprobar(self, publicidad: Publicidad):
        return self.actualizar(publicidad, estado=True, motivo_rechazo=None)

    def rechazar(self, publicidad: Publicidad, motivo: str):
        return self.actualizar(publicidad, estado=False, motivo_rechazo=motivo)


# UTILIDADES
def fecha_expiracion(publicidad: Publicidad) -> Optional[datetime]:
    creacion = a_datetime(publicidad.fecha_creacion)
    if creacion is None:
        return None
    return creacion + timedelta(days=timespan_a_dias(publicidad.tiempo))


def dias_restantes(publicidad: Publicidad, ahora: Optional[datetime] = None) -> Optional[int]:
    expira = fecha_expiracion(publicidad)
    if expira is None:
        return None
    ahora = a_datetime(ahora) or datetime.now()
    return math.ceil((expira - ahora) / timedelta(days=1))


def estado_publicidad(publicidad: Publicidad, ahora: Optional[datetime] = None) -> EstadoPublicidad:
    tipo = estado_de(publicidad).tipo
    if tipo == Estado.RECHAZADO:
        return EstadoPublicidad.rechazada
    if tipo == Estado.PENDIENTE:
        return EstadoPublicidad.pendiente
    if not publicidad.pago:
        return EstadoPublicidad.sin_pagar

    dias = dias_restantes(publicidad, ahora)
    if dias is None or dias <= 0:
        return EstadoPublicidad.expirada
    if dias <= 2:
        return EstadoPublicidad.por_expirar
    return EstadoPublicidad.activa


def a_response(publicidad: Publicidad, ahora: Optional[datetime] = None) -> PublicidadResponse:
    return PublicidadResponse(
        **publicidad.dict(),
        estado_publicidad=estado_publicidad(publicidad, ahora),
        dias_restantes=dias_restantes(publicidad, ahora),
    )


def estadisticas_publicidades(publicidades: Iterable[Publicidad], ahora: Optional[datetime] = None) -> EstadisticasPublicidades:
    publicidades = list(publicidades)
    estados = [estado_publicidad(p, ahora) for p in publicidades]
    return EstadisticasPublicidades(
        total=len(publicidades),
        activas=sum(1 for e in estados if e in (EstadoPublicidad.activa, EstadoPublicidad.por_expirar)),
        pendientes=estados.count(EstadoPublicidad.pendiente),
        rechazadas=estados.count(EstadoPublicidad.rechazada),
        sin_pagar=estados.count(EstadoPublicidad.sin_pagar),
        total_visualizaciones=sum(p.visualizaciones or 0 for p in publicidades),
    )
