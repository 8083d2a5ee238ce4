import pytest

from dondesalimos.core.cuit import (
    digito_verificador,
    es_cuit_valido,
    formatear_cuit,
    formatear_cuit_al_escribir,
    limpiar_cuit,
    obtener_error_cuit,
)


@pytest.mark.parametrize("valor, esperado", [
    ("2", "2"),
    ("20", "20"),
    ("201", "20-1"),
    ("2012345678", "20-12345678"),
    ("20123456786", "20-12345678-6"),
    ("20-1234abc5678-6999", "20-12345678-6"),
])
def test_formatear_al_escribir(valor, esperado):
    assert formatear_cuit_al_escribir(valor) == esperado


def test_cuit_valido():
    assert es_cuit_valido("20-12345678-6")
    assert es_cuit_valido("20123456786")
    assert es_cuit_valido("20-00000006-0")


def test_cuit_obligatorio():
    assert obtener_error_cuit("") == "El CUIT es obligatorio"
    assert obtener_error_cuit("   ") == "El CUIT es obligatorio"
    assert obtener_error_cuit(None) == "El CUIT es obligatorio"


def test_cuit_largo_incorrecto():
    assert obtener_error_cuit("20-1234567-6") == "El CUIT debe tener 11 dígitos"


def test_digito_verificador_incorrecto():
    assert obtener_error_cuit("20-12345678-5") == "El CUIT ingresado no es válido (dígito verificador incorrecto)"


def test_digito_diez_siempre_invalido():
    assert digito_verificador("2000000001") is None
    for ultimo in range(10):
        assert not es_cuit_valido(f"20-00000001-{ultimo}")


def test_limpiar_y_formatear():
    assert limpiar_cuit("20-12345678-6") == "20123456786"
    assert formatear_cuit("20123456786") == "20-12345678-6"
    assert formatear_cuit("123") == "123"
