# dondesalimos/services/admin_stats_service.py

import logging
from datetime import datetime, timedelta
from typing import List, Optional

from fastapi import Depends

from dondesalimos.core.api import ApiClient
from dondesalimos.core.constants import ROL_ADMINISTRADOR, ROL_USUARIO_COMERCIO, ROL_USUARIO_COMUN
from dondesalimos.core.estados import Estado, contar_por_estado, es_pendiente
from dondesalimos.core.exceptions import ApiError
from dondesalimos.core.security import get_api_client
from dondesalimos.core.temporal import a_datetime
from dondesalimos.schemas.estadisticas import Actividad, Alerta, EstadisticasAdmin
from dondesalimos.services.comercios_service import ComerciosService
from dondesalimos.services.publicidades_service import (
    PublicidadesService,
    estadisticas_publicidades,
    timespan_a_dias,
)
from dondesalimos.services.resenias_service import ReseniasService, estadisticas_resenias
from dondesalimos.services.reservas_service import ReservasService
from dondesalimos.services.usuarios_service import UsuariosService, estadisticas_usuarios

logger = logging.getLogger(__name__)

DIAS_ACTIVIDAD = 7
MAX_ACTIVIDADES = 10
MAX_POR_TIPO = 5


def get_admin_stats_service(api: ApiClient = Depends(get_api_client)):
    return AdminStatsService(api)


def _porcentaje(parte: int, total: int) -> float:
    return round(parte / total * 100, 1) if total else 0


def _nombre(anidado: Optional[dict], clave: str, defecto: str) -> str:
    return (anidado or {}).get(clave) or defecto


class AdminStatsService:
    def __init__(self, api: ApiClient):
        self.api = api

    def estadisticas_detalladas(self, ahora: Optional[datetime] = None) -> EstadisticasAdmin:
        ahora = a_datetime(ahora) or datetime.now()

        usuarios = UsuariosService(self.api).listar()
        comercios = ComerciosService(self.api).listar()
        publicidades = PublicidadesService(self.api).listar()
        resenias = ReseniasService(self.api).listar()
        try:
            reservas = ReservasService(self.api).listar()
        except ApiError as e:
            logger.warning(f"No se pudieron obtener las reservas para las estadísticas: {e}")
            reservas = []

        stats_usuarios = estadisticas_usuarios(usuarios)
        conteo_comercios = contar_por_estado(comercios)
        conteo_reservas = contar_por_estado(reservas)
        stats_resenias = estadisticas_resenias(resenias)
        stats_publicidades = estadisticas_publicidades(publicidades, ahora)

        por_tipo = {}
        for c in comercios:
            clave = c.id_tipo_comercio or "Sin tipo"
            por_tipo[clave] = por_tipo.get(clave, 0) + 1

        total_reservas = len(reservas)
        return EstadisticasAdmin(
            resumen={
                "total_usuarios": len(usuarios),
                "total_comercios": len(comercios),
                "total_publicidades": len(publicidades),
                "total_resenias": len(resenias),
                "total_reservas": total_reservas,
            },
            usuarios={
                "total": stats_usuarios.total,
                "activos": stats_usuarios.activos,
                "inactivos": stats_usuarios.inactivos,
                "porcentaje_activos": stats_usuarios.porcentaje_activos,
                "por_rol": {
                    "comunes": stats_usuarios.por_rol.get(ROL_USUARIO_COMUN, 0),
                    "admin": stats_usuarios.por_rol.get(ROL_ADMINISTRADOR, 0),
                    "comercios": stats_usuarios.por_rol.get(ROL_USUARIO_COMERCIO, 0),
                },
            },
            comercios={
                "total": conteo_comercios["total"],
                "aprobados": conteo_comercios[Estado.APROBADO.value],
                "pendientes": conteo_comercios[Estado.PENDIENTE.value],
                "rechazados": conteo_comercios[Estado.RECHAZADO.value],
                "por_tipo": por_tipo,
                "porcentaje_aprobados": _porcentaje(conteo_comercios[Estado.APROBADO.value], len(comercios)),
            },
            publicidades={
                **stats_publicidades.dict(),
                "promedio_visualizaciones": round(stats_publicidades.total_visualizaciones / len(publicidades))
                if publicidades else 0,
            },
            resenias={
                "total": stats_resenias.total,
                "promedio_calificacion": stats_resenias.promedio,
                "por_calificacion": stats_resenias.por_estrellas,
            },
            reservas={
                "total": total_reservas,
                "confirmadas": conteo_reservas[Estado.APROBADO.value],
                "pendientes": conteo_reservas[Estado.PENDIENTE.value],
                "canceladas": conteo_reservas[Estado.RECHAZADO.value],
                "tasa_confirmacion": _porcentaje(conteo_reservas[Estado.APROBADO.value], total_reservas),
            },
            actividad_reciente=actividad_reciente(usuarios, comercios, resenias, reservas, ahora),
            alertas={
                "comercios_pendientes": [
                    Alerta(id=c.id_comercio, titulo=c.nombre, descripcion=f"Esperando aprobación desde {_fecha_corta(c.fecha_creacion)}")
                    for c in comercios if es_pendiente(c)
                ],
                "publicidades_pendientes": [
                    Alerta(
                        id=p.id_publicidad,
                        titulo=_nombre(p.comercio, "nombre", "Publicidad"),
                        descripcion=f"{p.descripcion or ''} ({timespan_a_dias(p.tiempo)} días)".strip(),
                    )
                    for p in publicidades if es_pendiente(p)
                ],
            },
        )


def _fecha_corta(fecha) -> str:
    fecha = a_datetime(fecha)
    if fecha is None:
        return "Fecha no disponible"
    return fecha.strftime("%d/%m/%Y")


def actividad_reciente(usuarios, comercios, resenias, reservas, ahora: datetime) -> List[Actividad]:
    desde = ahora - timedelta(days=DIAS_ACTIVIDAD)

    def recientes(items):
        return [i for i in items if i.fecha_creacion and a_datetime(i.fecha_creacion) >= desde]

    actividades = []
    for u in recientes(usuarios):
        actividades.append(Actividad(tipo="usuario", titulo="Nuevo usuario registrado", descripcion=u.nombre_usuario, fecha=a_datetime(u.fecha_creacion)))
    for c in recientes(comercios):
        actividades.append(Actividad(tipo="comercio", titulo="Nuevo comercio registrado", descripcion=c.nombre, fecha=a_datetime(c.fecha_creacion)))
    for r in recientes(resenias)[:MAX_POR_TIPO]:
        descripcion = f"{_nombre(r.usuario, 'nombre_usuario', 'Usuario')} en {_nombre(r.comercio, 'nombre', 'Comercio')}"
        actividades.append(Actividad(tipo="resenia", titulo="Nueva reseña", descripcion=descripcion, fecha=a_datetime(r.fecha_creacion)))
    for r in recientes(reservas)[:MAX_POR_TIPO]:
        descripcion = f"Reserva en {_nombre(r.comercio, 'nombre', 'Comercio')}"
        actividades.append(Actividad(tipo="reserva", titulo="Nueva reserva", descripcion=descripcion, fecha=a_datetime(r.fecha_creacion)))

    actividades.sort(key=lambda a: a.fecha, reverse=True)
    return actividades[:MAX_ACTIVIDADES]
