# dondesalimos/core/estados.py

from enum import Enum
from typing import Any, Iterable, NamedTuple, Optional


class Estado(str, Enum):
    PENDIENTE = "pendiente"
    APROBADO = "aprobado"
    RECHAZADO = "rechazado"


class EstadoAprobacion(NamedTuple):
    tipo: Estado
    motivo: Optional[str] = None


def clasificar_estado(estado: Optional[bool], motivo_rechazo: Optional[str]) -> EstadoAprobacion:
    """
    Estado de aprobación de reservas, reseñas, comercios y publicidades.

    - estado True -> aprobado (el motivo se ignora)
    - estado False sin motivo (None o "") -> pendiente
    - estado False con motivo -> rechazado
    """
    if estado is True:
        return EstadoAprobacion(Estado.APROBADO)
    if not motivo_rechazo:
        return EstadoAprobacion(Estado.PENDIENTE)
    return EstadoAprobacion(Estado.RECHAZADO, motivo_rechazo)


def _campo(entidad: Any, nombre: str) -> Any:
    if isinstance(entidad, dict):
        return entidad.get(nombre)
    return getattr(entidad, nombre, None)


def estado_de(entidad: Any) -> EstadoAprobacion:
    return clasificar_estado(_campo(entidad, "estado"), _campo(entidad, "motivo_rechazo"))


def es_pendiente(entidad: Any) -> bool:
    return estado_de(entidad).tipo == Estado.PENDIENTE


def es_aprobado(entidad: Any) -> bool:
    return estado_de(entidad).tipo == Estado.APROBADO


def es_rechazado(entidad: Any) -> bool:
    return estado_de(entidad).tipo == Estado.RECHAZADO


def contar_por_estado(items: Iterable[Any]) -> dict:
    conteo = {"total": 0, Estado.PENDIENTE.value: 0, Estado.APROBADO.value: 0, Estado.RECHAZADO.value: 0}
    for item in items:
        conteo["total"] += 1
        conteo[estado_de(item).tipo.value] += 1
    return conteo
