# dondesalimos/services/elegibilidad_service.py

import logging
from datetime import datetime, timedelta
from typing import Optional

from dondesalimos.config import settings
from dondesalimos.core.api import ApiClient
from dondesalimos.core.estados import es_aprobado
from dondesalimos.core.exceptions import ApiError
from dondesalimos.core.temporal import a_datetime, dentro_de_ultimos_dias
from dondesalimos.schemas.resenia import ResultadoElegibilidad
from dondesalimos.services.resenias_service import ReseniasService
from dondesalimos.services.reservas_service import ReservasService

logger = logging.getLogger(__name__)

MENSAJE_SIN_RESERVA = "Necesitás una reserva aprobada en los últimos 7 días para dejar una reseña."
MENSAJE_COOLDOWN = "Ya dejaste una reseña recientemente. Debés esperar 7 días para dejar otra."
MENSAJE_PUEDE = "¡Podés dejar tu reseña!"
MENSAJE_ERROR = "Error al validar. Intentá nuevamente."


def tiene_reserva_aprobada_reciente(
    reservas: ReservasService, id_usuario: int, id_comercio: int, ahora: datetime
) -> bool:
    return any(
        r.id_comercio == id_comercio
        and es_aprobado(r)
        and dentro_de_ultimos_dias(r.fecha_reserva, settings.REVIEW_WINDOW_DAYS, ahora)
        for r in reservas.listar_por_usuario(id_usuario)
    )


def cooldown_cumplido(
    resenias: ReseniasService, id_usuario: int, id_comercio: int, ahora: datetime
) -> bool:
    mias = [
        r for r in resenias.listar()
        if r.id_usuario == id_usuario and r.id_comercio == id_comercio and r.fecha_creacion
    ]
    if not mias:
        return True
    ultima = max(a_datetime(r.fecha_creacion) for r in mias)
    return ahora - ultima >= timedelta(days=settings.REVIEW_COOLDOWN_DAYS)


def verificar_elegibilidad(
    api: ApiClient, id_usuario: int, id_comercio: int, ahora: Optional[datetime] = None
) -> ResultadoElegibilidad:
    """
    Un usuario puede reseñar un comercio si:
    1. tiene una reserva aprobada allí en los últimos 7 días, y
    2. pasaron al menos 7 días desde su última reseña para ese comercio.
    El paso 2 no se consulta si falla el 1. Ante cualquier error no se permite reseñar.
    """
    ahora = a_datetime(ahora) or datetime.now()
    try:
        if not tiene_reserva_aprobada_reciente(ReservasService(api), id_usuario, id_comercio, ahora):
            return ResultadoElegibilidad(puede_reseniar=False, mensaje=MENSAJE_SIN_RESERVA)

        if not cooldown_cumplido(ReseniasService(api), id_usuario, id_comercio, ahora):
            return ResultadoElegibilidad(puede_reseniar=False, mensaje=MENSAJE_COOLDOWN)
    except ApiError as e:
        logger.warning(f"No se pudo validar la elegibilidad del usuario {id_usuario} en el comercio {id_comercio}: {e}")
        return ResultadoElegibilidad(puede_reseniar=False, mensaje=MENSAJE_ERROR)

    return ResultadoElegibilidad(puede_reseniar=True, mensaje=MENSAJE_PUEDE)
