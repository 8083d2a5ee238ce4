# dondesalimos/core/temporal.py

from datetime import datetime, timedelta
from typing import Any, Optional, Union

from dondesalimos.core.estados import es_pendiente

Fecha = Union[datetime, str, None]


def a_datetime(valor: Fecha) -> Optional[datetime]:
    """Normaliza a datetime naive en hora local. Acepta ISO-8601 (con o sin 'Z')."""
    if valor is None or valor == "":
        return None
    if isinstance(valor, str):
        valor = datetime.fromisoformat(valor.replace("Z", "+00:00"))
    if valor.tzinfo is not None:
        valor = valor.astimezone().replace(tzinfo=None)
    return valor


def _ahora(ahora: Optional[datetime]) -> datetime:
    return a_datetime(ahora) if ahora is not None else datetime.now()


# Una sola regla: fecha >= ahora es futura, fecha < ahora es pasada
def es_pasada(fecha: Fecha, ahora: Optional[datetime] = None) -> bool:
    fecha = a_datetime(fecha)
    if fecha is None:
        return False
    return fecha < _ahora(ahora)


def es_futura(fecha: Fecha, ahora: Optional[datetime] = None) -> bool:
    fecha = a_datetime(fecha)
    if fecha is None:
        return False
    return fecha >= _ahora(ahora)


def es_pendiente_vencida(reserva: Any, ahora: Optional[datetime] = None) -> bool:
    """Pendiente y con fecha pasada: el dueño puede marcarla como 'no asistió'."""
    fecha = reserva.get("fecha_reserva") if isinstance(reserva, dict) else getattr(reserva, "fecha_reserva", None)
    return es_pendiente(reserva) and es_pasada(fecha, ahora)


def es_hoy(fecha: Fecha, ahora: Optional[datetime] = None) -> bool:
    fecha = a_datetime(fecha)
    if fecha is None:
        return False
    return fecha.date() == _ahora(ahora).date()


def dentro_de_ultimos_dias(fecha: Fecha, dias: int, ahora: Optional[datetime] = None) -> bool:
    """fecha en [ahora - dias, ahora]"""
    fecha = a_datetime(fecha)
    if fecha is None:
        return False
    ahora = _ahora(ahora)
    return ahora - timedelta(days=dias) <= fecha <= ahora
