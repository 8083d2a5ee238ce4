# dondesalimos/core/cuit.py

import re
from typing import Optional

PESOS_CUIT = (5, 4, 3, 2, 7, 6, 5, 4, 3, 2)


def _solo_digitos(valor: Optional[str]) -> str:
    return re.sub(r"\D", "", valor or "")


def formatear_cuit_al_escribir(valor: str) -> str:
    """Formatea mientras se escribe: 20, 20-1234, 20-12345678-9 (máximo 11 dígitos)."""
    numeros = _solo_digitos(valor)[:11]
    if len(numeros) <= 2:
        return numeros
    if len(numeros) <= 10:
        return f"{numeros[:2]}-{numeros[2:]}"
    return f"{numeros[:2]}-{numeros[2:10]}-{numeros[10:]}"


def digito_verificador(numeros: str) -> Optional[int]:
    """Dígito esperado para los 10 primeros dígitos; None si el resultado es 10 (CUIT inválido)."""
    suma = sum(int(d) * p for d, p in zip(numeros[:10], PESOS_CUIT))
    esperado = 11 - (suma % 11)
    if esperado == 11:
        return 0
    if esperado == 10:
        return None
    return esperado


def obtener_error_cuit(valor: Optional[str]) -> Optional[str]:
    if not valor or not valor.strip():
        return "El CUIT es obligatorio"

    numeros = _solo_digitos(valor)
    if len(numeros) != 11:
        return "El CUIT debe tener 11 dígitos"

    esperado = digito_verificador(numeros)
    if esperado is None or esperado != int(numeros[10]):
        return "El CUIT ingresado no es válido (dígito verificador incorrecto)"

    return None


def es_cuit_valido(valor: Optional[str]) -> bool:
    return obtener_error_cuit(valor) is None


def limpiar_cuit(valor: Optional[str]) -> str:
    return (valor or "").replace("-", "").strip()


def formatear_cuit(valor: Optional[str]) -> str:
    numeros = _solo_digitos(valor)
    if len(numeros) != 11:
        return valor or ""
    return f"{numeros[:2]}-{numeros[2:10]}-{numeros[10]}"
