import pytest

from dondesalimos.core.estados import (
    Estado,
    clasificar_estado,
    contar_por_estado,
    es_aprobado,
    es_pendiente,
    es_rechazado,
    estado_de,
)
from dondesalimos.schemas.resenia import Resenia


@pytest.mark.parametrize("estado, motivo, esperado", [
    (True, None, Estado.APROBADO),
    (True, "cualquier motivo", Estado.APROBADO),
    (False, None, Estado.PENDIENTE),
    (False, "", Estado.PENDIENTE),
    (False, "   ", Estado.RECHAZADO),
    (False, "Local cerrado", Estado.RECHAZADO),
    (None, None, Estado.PENDIENTE),
])
def test_clasificar_estado(estado, motivo, esperado):
    assert clasificar_estado(estado, motivo).tipo == esperado


def test_rechazado_conserva_motivo():
    resultado = clasificar_estado(False, "Capacidad máxima alcanzada")
    assert resultado.motivo == "Capacidad máxima alcanzada"


def test_aprobado_ignora_motivo():
    assert clasificar_estado(True, "viejo motivo").motivo is None


def test_estado_de_acepta_dict_y_modelo():
    assert es_rechazado({"estado": False, "motivo_rechazo": "No"})
    resenia = Resenia(id_resenia=1, estado=True)
    assert es_aprobado(resenia)
    assert not es_pendiente(resenia)
    assert estado_de({}).tipo == Estado.PENDIENTE


def test_contar_por_estado():
    items = [
        {"estado": True},
        {"estado": False},
        {"estado": False, "motivo_rechazo": "x"},
        {"estado": False, "motivo_rechazo": " "},
    ]
    assert contar_por_estado(items) == {"total": 4, "pendiente": 1, "aprobado": 1, "rechazado": 2}
