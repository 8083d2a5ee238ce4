# dondesalimos/core/api.py

import logging
import re
from typing import Any, Callable, Optional, Union

import requests

from dondesalimos.config import settings
from dondesalimos.core.constants import MENSAJE_DATOS_INVALIDOS
from dondesalimos.core.exceptions import (
    ApiError,
    ConexionError,
    NoAutenticadoError,
    NoEncontradoError,
    PermisoDenegadoError,
    ServidorError,
    ValidacionError,
)

logger = logging.getLogger(__name__)

TokenProvider = Callable[[], Optional[str]]


def to_snake_case(clave: str) -> str:
    """ID_Reserva -> id_reserva, FechaReserva -> fecha_reserva, sesionValida -> sesion_valida"""
    partes = []
    for parte in clave.split("_"):
        if not parte:
            continue
        if parte.isupper() or parte.lower() == "id":
            partes.append(parte.lower())
            continue
        s1 = re.sub(r"(.)([A-Z][a-z]+)", r"\1_\2", parte)
        partes.append(re.sub(r"([a-z0-9])([A-Z])", r"\1_\2", s1).lower())
    return "_".join(partes)


def to_pascal_case(clave: str) -> str:
    """id_reserva -> ID_Reserva, fecha_reserva -> FechaReserva. Las claves ya en PascalCase no cambian."""
    if not clave or clave[0].isupper():
        return clave
    partes = [p for p in clave.split("_") if p]
    if len(partes) > 1 and partes[0] == "id":
        return "ID_" + "".join(p[:1].upper() + p[1:] for p in partes[1:])
    return "".join(p[:1].upper() + p[1:] for p in partes)


def convertir_claves(obj: Any, conversor: Callable[[str], str]) -> Any:
    if isinstance(obj, list):
        return [convertir_claves(v, conversor) for v in obj]
    if isinstance(obj, dict):
        return {
            (conversor(k) if isinstance(k, str) else k): convertir_claves(v, conversor)
            for k, v in obj.items()
        }
    return obj


def extraer_mensaje(datos: Any, default: Optional[str] = None) -> Optional[str]:
    if isinstance(datos, dict):
        for clave in ("mensaje", "message", "error"):
            valor = datos.get(clave)
            if isinstance(valor, str) and valor.strip():
                return valor
    if isinstance(datos, str) and datos.strip():
        return datos
    return default


class ApiClient:
    """
    Cliente HTTP de la API de DondeSalimos.

    - Agrega el JWT como Authorization: Bearer
    - Convierte las respuestas PascalCase a snake_case y los envíos a PascalCase
    - Traduce los códigos HTTP a la jerarquía de ApiError
    - GET con 404 devuelve None (recurso ausente, no es un error)
    """

    def __init__(
        self,
        base_url: Optional[str] = None,
        token: Union[str, TokenProvider, None] = None,
        timeout: Optional[float] = None,
        session: Optional[requests.Session] = None,
        on_unauthorized: Optional[Callable[[], None]] = None,
    ):
        self.base_url = (base_url or settings.API_BASE_URL).rstrip("/")
        self.timeout = timeout if timeout is not None else settings.REQUEST_TIMEOUT_SECONDS
        self.session = session or requests.Session()
        self.on_unauthorized = on_unauthorized
        self._token = token

    @property
    def token(self) -> Optional[str]:
        if callable(self._token):
            return self._token()
        return self._token

    def _headers(self) -> dict:
        headers = {
            "Content-Type": "application/json",
            "Accept": "application/json",
        }
        token = self.token
        if token:
            headers["Authorization"] = f"Bearer {token}"
        return headers

    def _request(self, method: str, url: str, data: Any = None, params: Optional[dict] = None) -> Any:
        payload = convertir_claves(data, to_pascal_case) if data is not None else None
        try:
            response = self.session.request(
                method,
                self.base_url + url,
                json=payload,
                params=params,
                headers=self._headers(),
                timeout=self.timeout,
            )
        except requests.exceptions.RequestException as e:
            logger.warning(f"Sin respuesta de la API en {method} {url}: {e}")
            raise ConexionError() from e

        datos = self._leer_cuerpo(response)
        if response.status_code >= 400:
            raise self._error_desde_respuesta(response.status_code, datos, method, url)
        return datos

    @staticmethod
    def _leer_cuerpo(response: requests.Response) -> Any:
        if not response.content:
            return None
        try:
            return convertir_claves(response.json(), to_snake_case)
        except ValueError:
            return response.text

    def _error_desde_respuesta(self, status_code: int, datos: Any, method: str, url: str) -> ApiError:
        if status_code == 401:
            logger.info(f"401 en {method} {url}, se cierra la sesión local")
            if self.on_unauthorized:
                self.on_unauthorized()
            return NoAutenticadoError(datos=datos)
        if status_code == 403:
            return PermisoDenegadoError(datos=datos)
        if status_code == 404:
            return NoEncontradoError(datos=datos)
        if status_code == 400:
            return ValidacionError(extraer_mensaje(datos, MENSAJE_DATOS_INVALIDOS), datos=datos)
        if status_code == 500:
            logger.error(f"Error 500 en {method} {url}: {datos}")
            return ServidorError(datos=datos)
        return ApiError(extraer_mensaje(datos, "Error desconocido"), status_code, datos)

    # FUNCIONES AUXILIARES
    def get(self, url: str, params: Optional[dict] = None, none_si_404: bool = True) -> Any:
        try:
            return self._request("GET", url, params=params)
        except NoEncontradoError:
            if none_si_404:
                return None
            raise

    def post(self, url: str, data: Any = None) -> Any:
        return self._request("POST", url, data=data if data is not None else {})

    def put(self, url: str, data: Any = None) -> Any:
        return self._request("PUT", url, data=data)

    def patch(self, url: str, data: Any = None) -> Any:
        return self._request("PATCH", url, data=data if data is not None else {})

    def delete(self, url: str) -> Any:
        return self._request("DELETE", url)

    def close(self):
        self.session.close()

    def __enter__(self):
        return self

    def __exit__(self, *exc):
        self.close()
