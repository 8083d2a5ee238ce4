# dondesalimos/core/mensajes.py

from enum import Enum
from typing import Union

from dondesalimos.core.exceptions import ApiError


class CodigoErrorReserva(str, Enum):
    USUARIO_INACTIVO = "usuario_inactivo"
    RESERVA_PENDIENTE_DUPLICADA = "reserva_pendiente_duplicada"
    RESERVA_APROBADA_DUPLICADA = "reserva_aprobada_duplicada"
    COMERCIO_NO_DISPONIBLE = "comercio_no_disponible"
    DESCONOCIDO = "desconocido"


MENSAJES_ERROR_RESERVA = {
    CodigoErrorReserva.USUARIO_INACTIVO: "Tu cuenta está desactivada. Por favor, contactá al administrador para reactivarla.",
    CodigoErrorReserva.RESERVA_PENDIENTE_DUPLICADA: "Ya tenés una reserva pendiente de aprobación para este comercio en esta fecha.",
    CodigoErrorReserva.RESERVA_APROBADA_DUPLICADA: "Ya tenés una reserva confirmada para este comercio en esta fecha.",
    CodigoErrorReserva.COMERCIO_NO_DISPONIBLE: "Este comercio no está disponible para reservas en este momento.",
}


def codigo_error_reserva(mensaje: str) -> CodigoErrorReserva:
    """Único punto donde se interpreta el texto que devuelve la API al crear una reserva."""
    texto = (mensaje or "").lower()
    if "inactiv" in texto or "desactivad" in texto:
        return CodigoErrorReserva.USUARIO_INACTIVO
    if "pendiente" in texto:
        return CodigoErrorReserva.RESERVA_PENDIENTE_DUPLICADA
    if "aprobada" in texto:
        return CodigoErrorReserva.RESERVA_APROBADA_DUPLICADA
    if "comercio" in texto and "disponible" in texto:
        return CodigoErrorReserva.COMERCIO_NO_DISPONIBLE
    return CodigoErrorReserva.DESCONOCIDO


def mensaje_error_reserva(error: Union[ApiError, str]) -> str:
    mensaje = error.mensaje if isinstance(error, ApiError) else str(error)
    codigo = codigo_error_reserva(mensaje)
    return MENSAJES_ERROR_RESERVA.get(codigo) or mensaje or "Error al crear la reserva"
