from datetime import timedelta

from dondesalimos.core.exceptions import ConexionError
from dondesalimos.services.elegibilidad_service import (
    MENSAJE_COOLDOWN,
    MENSAJE_ERROR,
    MENSAJE_PUEDE,
    MENSAJE_SIN_RESERVA,
    verificar_elegibilidad,
)

URL_RESERVAS = "/api/reservas/usuario/5"
URL_RESENIAS = "/api/resenias/listado"


def reserva(ahora, dias_atras, estado=True, id_comercio=10):
    return {
        "id_reserva": dias_atras,
        "id_usuario": 5,
        "id_comercio": id_comercio,
        "fecha_reserva": (ahora - timedelta(days=dias_atras)).isoformat(),
        "comenzales": 2,
        "estado": estado,
    }


def resenia(ahora, dias_atras, id_comercio=10):
    return {
        "id_resenia": 1,
        "id_usuario": 5,
        "id_comercio": id_comercio,
        "calificacion": 4,
        "fecha_creacion": (ahora - timedelta(days=dias_atras)).isoformat(),
    }


def test_sin_reserva_no_consulta_resenias(api, ahora):
    api.responder("GET", URL_RESERVAS, [reserva(ahora, 2, estado=False)])

    resultado = verificar_elegibilidad(api, 5, 10, ahora)

    assert not resultado.puede_reseniar
    assert resultado.mensaje == MENSAJE_SIN_RESERVA
    assert not api.llamadas_a("GET", URL_RESENIAS)


def test_reserva_fuera_de_ventana(api, ahora):
    api.responder("GET", URL_RESERVAS, [reserva(ahora, 8), reserva(ahora, 1, id_comercio=99)])
    assert verificar_elegibilidad(api, 5, 10, ahora).mensaje == MENSAJE_SIN_RESERVA


def test_reserva_futura_no_cuenta(api, ahora):
    api.responder("GET", URL_RESERVAS, [reserva(ahora, -1)])
    assert not verificar_elegibilidad(api, 5, 10, ahora).puede_reseniar


def test_cooldown_activo(api, ahora):
    api.responder("GET", URL_RESERVAS, [reserva(ahora, 1)])
    api.responder("GET", URL_RESENIAS, [resenia(ahora, 3)])

    resultado = verificar_elegibilidad(api, 5, 10, ahora)

    assert not resultado.puede_reseniar
    assert resultado.mensaje == MENSAJE_COOLDOWN


def test_puede_reseniar(api, ahora):
    api.responder("GET", URL_RESERVAS, [reserva(ahora, 7)])
    api.responder("GET", URL_RESENIAS, [resenia(ahora, 7), resenia(ahora, 1, id_comercio=99)])

    resultado = verificar_elegibilidad(api, 5, 10, ahora)

    assert resultado.puede_reseniar
    assert resultado.mensaje == MENSAJE_PUEDE


def test_error_de_red_no_permite(api, ahora):
    api.responder("GET", URL_RESERVAS, ConexionError())

    resultado = verificar_elegibilidad(api, 5, 10, ahora)

    assert not resultado.puede_reseniar
    assert resultado.mensaje == MENSAJE_ERROR
