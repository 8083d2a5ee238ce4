from datetime import timedelta

import pytest

from dondesalimos.core.estados import Estado
from dondesalimos.core.exceptions import ApiError, NoEncontradoError
from dondesalimos.schemas.reserva import Reserva, ReservaCreate, ReservaResponse
from dondesalimos.services.reservas_service import (
    ReservasService,
    estadisticas_reservas,
    filtrar_futuras,
    filtrar_hoy,
    filtrar_pasadas,
    filtrar_por_estado,
    formatear_tiempo_tolerancia,
    validar_nueva_reserva,
)


def reserva(id_reserva=1, fecha=None, estado=False, motivo=None, id_comercio=10, id_usuario=5):
    return Reserva(
        id_reserva=id_reserva,
        id_usuario=id_usuario,
        id_comercio=id_comercio,
        fecha_reserva=fecha,
        comenzales=2,
        estado=estado,
        motivo_rechazo=motivo,
    )


def test_reserva_acepta_comenzales_de_la_api(ahora):
    r = Reserva(id_reserva=1, id_comercio=1, fecha_reserva=ahora, comenzales=4)
    assert r.comensales == 4


def test_listar_por_usuario_404_es_lista_vacia(api):
    api.responder("GET", "/api/reservas/usuario/5", NoEncontradoError())
    assert ReservasService(api).listar_por_usuario(5) == []


def test_listar_recibidas_usa_endpoint_dedicado(api, ahora):
    api.responder("GET", "/api/reservas/recibidasUsuario/7", [
        {"id_reserva": 1, "id_comercio": 10, "fecha_reserva": ahora.isoformat(), "comenzales": 2},
    ])
    recibidas = ReservasService(api).listar_recibidas(7, [10])
    assert [r.id_reserva for r in recibidas] == [1]
    assert not api.llamadas_a("GET", "/api/reservas/listado")


def test_listar_recibidas_sin_endpoint_filtra_listado(api, ahora):
    api.responder("GET", "/api/reservas/recibidasUsuario/7", NoEncontradoError())
    api.responder("GET", "/api/reservas/listado", [
        {"id_reserva": 1, "id_comercio": 10, "fecha_reserva": ahora.isoformat(), "comenzales": 2},
        {"id_reserva": 2, "id_comercio": 99, "fecha_reserva": ahora.isoformat(), "comenzales": 2},
    ])
    recibidas = ReservasService(api).listar_recibidas(7, [10])
    assert [r.id_reserva for r in recibidas] == [1]


def test_crear_envia_reserva_pendiente(api, ahora):
    api.responder("POST", "/api/reservas/crear", {"mensaje": "ok"})
    datos = ReservaCreate(id_comercio=10, fecha_reserva=ahora + timedelta(days=1), comensales=3, id_usuario=5)

    ReservasService(api).crear(datos, ahora)

    _, _, payload, _ = api.llamadas_a("POST")[0]
    assert payload["estado"] is False
    assert payload["motivo_rechazo"] is None
    assert payload["comenzales"] == 3
    assert payload["id_usuario"] == 5
    assert payload["fecha_creacion"] == ahora.isoformat()


def test_aprobar_limpia_motivo(api, ahora):
    ReservasService(api).aprobar(reserva(fecha=ahora, motivo="viejo"))

    metodo, url, payload, _ = api.llamadas[0]
    assert (metodo, url) == ("PUT", "/api/reservas/actualizar/1")
    assert payload["estado"] is True
    assert payload["motivo_rechazo"] is None


def test_cancelar_usa_motivo_por_defecto(api, ahora):
    ReservasService(api).cancelar(reserva(fecha=ahora + timedelta(days=1)))
    payload = api.llamadas[0][2]
    assert payload["estado"] is False
    assert payload["motivo_rechazo"] == "Cancelada por el usuario"


def test_marcar_no_asistio_solo_pendientes_pasadas(api, ahora):
    servicio = ReservasService(api)

    with pytest.raises(ApiError):
        servicio.marcar_no_asistio(reserva(fecha=ahora + timedelta(hours=1)), ahora=ahora)
    with pytest.raises(ApiError):
        servicio.marcar_no_asistio(reserva(fecha=ahora - timedelta(hours=1), estado=True), ahora=ahora)
    assert api.llamadas == []

    servicio.marcar_no_asistio(reserva(fecha=ahora - timedelta(hours=1)), ahora=ahora)
    assert api.llamadas[0][2]["motivo_rechazo"] == "No se presentó"


def test_filtros_temporales(ahora):
    pasada = reserva(1, ahora - timedelta(days=2))
    hoy_mas_tarde = reserva(2, ahora + timedelta(hours=1))
    futura = reserva(3, ahora + timedelta(days=3))
    reservas = [pasada, hoy_mas_tarde, futura]

    assert filtrar_pasadas(reservas, ahora) == [pasada]
    assert filtrar_futuras(reservas, ahora) == [hoy_mas_tarde, futura]
    assert filtrar_hoy(reservas, ahora) == [hoy_mas_tarde]


def test_filtrar_por_estado(ahora):
    pendiente = reserva(1, ahora)
    aprobada = reserva(2, ahora, estado=True)
    rechazada = reserva(3, ahora, motivo="Sin lugar")
    reservas = [pendiente, aprobada, rechazada]

    assert filtrar_por_estado(reservas, Estado.PENDIENTE) == [pendiente]
    assert filtrar_por_estado(reservas, Estado.APROBADO) == [aprobada]
    assert filtrar_por_estado(reservas, Estado.RECHAZADO) == [rechazada]


def test_estadisticas_reservas(ahora):
    reservas = [
        reserva(1, ahora - timedelta(days=1), estado=True),
        reserva(2, ahora + timedelta(days=1)),
        reserva(3, ahora + timedelta(days=2), motivo="No"),
        reserva(4, ahora + timedelta(days=2), estado=True),
    ]
    stats = estadisticas_reservas(reservas, ahora)
    assert stats.total == 4
    assert stats.aprobadas == 2
    assert stats.pendientes == 1
    assert stats.rechazadas == 1
    assert stats.pasadas == 1
    assert stats.futuras == 3
    assert stats.tasa_aprobacion == 50


def test_respuesta_incluye_clasificaciones(ahora):
    respuesta = ReservaResponse.desde_reserva(reserva(fecha=ahora - timedelta(minutes=5)), ahora)
    assert respuesta.estado_aprobacion == Estado.PENDIENTE
    assert respuesta.es_pasada
    assert respuesta.es_pendiente_vencida


@pytest.mark.parametrize("valor, esperado", [
    ("00:15:00", "15 minutos"),
    ("01:00:00", "1 hora"),
    ("02:30:00", "2h 30min"),
    ("00:01:00", "1 minuto"),
])
def test_formatear_tiempo_tolerancia(valor, esperado):
    assert formatear_tiempo_tolerancia(valor) == esperado


def test_validar_nueva_reserva(ahora):
    valida = ReservaCreate(id_comercio=1, fecha_reserva=ahora + timedelta(days=1), comensales=4)
    assert validar_nueva_reserva(valida, capacidad=10, ahora=ahora) == {}

    pasada = ReservaCreate(id_comercio=1, fecha_reserva=ahora - timedelta(minutes=1), comensales=4)
    assert validar_nueva_reserva(pasada, ahora=ahora)["fecha_reserva"] == "No podés reservar en fechas pasadas"

    lejana = ReservaCreate(id_comercio=1, fecha_reserva=ahora + timedelta(days=31), comensales=4)
    assert "fecha_reserva" in validar_nueva_reserva(lejana, ahora=ahora)

    excedida = ReservaCreate(id_comercio=1, fecha_reserva=ahora + timedelta(days=1), comensales=12)
    assert validar_nueva_reserva(excedida, capacidad=10, ahora=ahora) == {"comensales": "Capacidad máxima: 10 personas"}
