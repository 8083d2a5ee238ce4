from datetime import timedelta

import pytest

from dondesalimos.schemas.publicidad import EstadoPublicidad, Publicidad, PublicidadCreate
from dondesalimos.services.publicidades_service import (
    PublicidadesService,
    a_response,
    dias_a_timespan,
    dias_restantes,
    estado_publicidad,
    estadisticas_publicidades,
    fecha_expiracion,
    timespan_a_dias,
)


def publicidad(ahora, dias_atras=0, tiempo="7:00:00", **cambios):
    datos = {
        "id_publicidad": 1,
        "id_comercio": 10,
        "tiempo": tiempo,
        "estado": True,
        "pago": True,
        "fecha_creacion": ahora - timedelta(days=dias_atras),
    }
    datos.update(cambios)
    return Publicidad(**datos)


@pytest.mark.parametrize("dias, esperado", [
    (7, "7:00:00"),
    (15, "15:00:00"),
    (30, "23:00:00"),
    (None, "7:00:00"),
    ("abc", "7:00:00"),
])
def test_dias_a_timespan(dias, esperado):
    assert dias_a_timespan(dias) == esperado


@pytest.mark.parametrize("tiempo, esperado", [
    ("7:00:00", 7),
    ("15.00:00:00", 15),
    ("23:00:00", 30),
    (23, 30),
    (None, 7),
])
def test_timespan_a_dias(tiempo, esperado):
    assert timespan_a_dias(tiempo) == esperado


def test_crear_queda_pendiente_y_sin_pagar(api, ahora):
    PublicidadesService(api).crear(PublicidadCreate(id_comercio=10, descripcion="2x1", dias=30), ahora)

    metodo, url, payload, _ = api.llamadas[0]
    assert (metodo, url) == ("POST", "/api/Publicidades/crear")
    assert payload["tiempo"] == "23:00:00"
    assert payload["estado"] is False
    assert payload["pago"] is False


def test_incrementar_visualizacion(api):
    PublicidadesService(api).incrementar_visualizacion(4)
    assert api.llamadas[0][:2] == ("PUT", "/api/Publicidades/incrementar-visualizacion/4")


def test_expiracion_y_dias_restantes(ahora):
    pub = publicidad(ahora, dias_atras=2)
    assert fecha_expiracion(pub) == ahora + timedelta(days=5)
    assert dias_restantes(pub, ahora) == 5
    assert dias_restantes(publicidad(ahora, fecha_creacion=None), ahora) is None


def test_estado_publicidad(ahora):
    assert estado_publicidad(publicidad(ahora, estado=False), ahora) == EstadoPublicidad.pendiente
    assert estado_publicidad(publicidad(ahora, estado=False, motivo_rechazo="No"), ahora) == EstadoPublicidad.rechazada
    assert estado_publicidad(publicidad(ahora, pago=False), ahora) == EstadoPublicidad.sin_pagar
    assert estado_publicidad(publicidad(ahora, dias_atras=8), ahora) == EstadoPublicidad.expirada
    assert estado_publicidad(publicidad(ahora, dias_atras=6), ahora) == EstadoPublicidad.por_expirar
    assert estado_publicidad(publicidad(ahora, dias_atras=1), ahora) == EstadoPublicidad.activa


def test_a_response(ahora):
    respuesta = a_response(publicidad(ahora, dias_atras=1), ahora)
    assert respuesta.estado_publicidad == EstadoPublicidad.activa
    assert respuesta.dias_restantes == 6


def test_estadisticas_publicidades(ahora):
    stats = estadisticas_publicidades([
        publicidad(ahora, visualizaciones=10),
        publicidad(ahora, dias_atras=6, visualizaciones=5),
        publicidad(ahora, estado=False),
        publicidad(ahora, pago=False),
    ], ahora)
    assert stats.total == 4
    assert stats.activas == 2
    assert stats.pendientes == 1
    assert stats.sin_pagar == 1
    assert stats.total_visualizaciones == 15
