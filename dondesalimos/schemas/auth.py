from pydantic import BaseModel, validator
from typing import Optional

from dondesalimos.core.constants import ROL_USUARIO_COMUN, ROLES_SISTEMA

class GoogleLogin(BaseModel):
    id_token: str

    @validator('id_token')
    def token_no_vacio(cls, v):
        if not v or not v.strip():
            raise ValueError('El token de Google es obligatorio')
        return v.strip()

class GoogleRegistro(GoogleLogin):
    rol_usuario: int = ROL_USUARIO_COMUN

    @validator('rol_usuario')
    def rol_valido(cls, v):
        if v not in ROLES_SISTEMA:
            raise ValueError('Rol de usuario inválido')
        return v

class Sesion(BaseModel):
    """Lo que devuelve la API al iniciar sesión o registrarse"""
    jwt_token: Optional[str] = None
    usuario: Optional[dict] = None

class ResultadoLogin(BaseModel):
    success: bool
    needs_registration: bool = False
    already_registered: bool = False
    message: Optional[str] = None
    usuario: Optional[dict] = None
    jwt_token: Optional[str] = None

class TokenData(BaseModel):
    id_usuario: Optional[int] = None
    rol: Optional[int] = None
    correo: Optional[str] = None
    token: Optional[str] = None
