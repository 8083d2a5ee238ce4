# dondesalimos/core/exceptions.py

from typing import Any, Optional
from fastapi import HTTPException, status

from dondesalimos.core.constants import (
    MENSAJE_ERROR_AUTENTICACION,
    MENSAJE_ERROR_CONEXION,
    MENSAJE_ERROR_SERVIDOR,
    MENSAJE_NO_ENCONTRADO,
    MENSAJE_SIN_PERMISOS,
)


class AuthException(HTTPException):
    def __init__(self, detail: str = MENSAJE_ERROR_AUTENTICACION):
        super().__init__(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail=detail,
            headers={"WWW-Authenticate": "Bearer"},
        )

class ForbiddenException(HTTPException):
    def __init__(self, detail: str = "No tiene permisos para realizar esta acción"):
        super().__init__(status_code=status.HTTP_403_FORBIDDEN, detail=detail)

class NotFoundException(HTTPException):
    def __init__(self, detail: str = "Recurso no encontrado"):
        super().__init__(status_code=status.HTTP_404_NOT_FOUND, detail=detail)


# =======================================================
# Errores de la API remota
# =======================================================
class ApiError(Exception):
    """
    Error devuelto (o provocado) al hablar con la API de DondeSalimos.
    status_code es None cuando no hubo respuesta HTTP.
    """
    def __init__(self, mensaje: str, status_code: Optional[int] = None, datos: Any = None):
        self.mensaje = mensaje
        self.status_code = status_code
        self.datos = datos
        super().__init__(self.mensaje)

class NoAutenticadoError(ApiError):
    def __init__(self, mensaje: str = MENSAJE_ERROR_AUTENTICACION, datos: Any = None):
        super().__init__(mensaje, status.HTTP_401_UNAUTHORIZED, datos)

class PermisoDenegadoError(ApiError):
    def __init__(self, mensaje: str = MENSAJE_SIN_PERMISOS, datos: Any = None):
        super().__init__(mensaje, status.HTTP_403_FORBIDDEN, datos)

class NoEncontradoError(ApiError):
    def __init__(self, mensaje: str = MENSAJE_NO_ENCONTRADO, datos: Any = None):
        super().__init__(mensaje, status.HTTP_404_NOT_FOUND, datos)

class ValidacionError(ApiError):
    def __init__(self, mensaje: str, datos: Any = None):
        super().__init__(mensaje, status.HTTP_400_BAD_REQUEST, datos)

class ServidorError(ApiError):
    def __init__(self, mensaje: str = MENSAJE_ERROR_SERVIDOR, datos: Any = None):
        super().__init__(mensaje, status.HTTP_500_INTERNAL_SERVER_ERROR, datos)

class ConexionError(ApiError):
    """Sin respuesta del servidor: se considera transitorio."""
    def __init__(self, mensaje: str = MENSAJE_ERROR_CONEXION):
        super().__init__(mensaje, None, None)
