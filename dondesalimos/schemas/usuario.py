from pydantic import BaseModel, EmailStr, Field, validator
from typing import Optional
from datetime import datetime

class UsuarioBase(BaseModel):
    nombre_usuario: Optional[str] = None
    correo: Optional[str] = None
    telefono: Optional[str] = None
    id_rol_usuario: Optional[int] = None
    estado: bool = False

class UsuarioUpdate(BaseModel):
    nombre_usuario: Optional[str] = Field(None, min_length=1, max_length=100)
    correo: Optional[EmailStr] = None
    telefono: Optional[str] = Field(None, max_length=15)
    id_rol_usuario: Optional[int] = None
    estado: Optional[bool] = None

class PerfilUpdate(BaseModel):
    """Lo que el usuario puede editar de su propio perfil"""
    nombre_usuario: str
    telefono: Optional[str] = None

    @validator('nombre_usuario')
    def nombre_no_vacio(cls, v):
        v = (v or "").strip()
        if not v:
            raise ValueError('El nombre de usuario es obligatorio')
        return v

    @validator('telefono')
    def telefono_minimo(cls, v):
        if not v:
            return None
        if len(v) < 8:
            raise ValueError('El teléfono debe tener al menos 8 dígitos')
        return v

class CambioEstadoUsuario(BaseModel):
    estado: bool

class UsuarioResponse(UsuarioBase):
    id_usuario: int
    fecha_creacion: Optional[datetime] = None

    class Config:
        from_attributes = True

class SesionVerificada(BaseModel):
    """Respuesta de /api/Usuarios/verificarSesion"""
    sesion_valida: bool = True
    requiere_logout: bool = False
    mensaje: Optional[str] = None
    usuario: Optional[dict] = None

class EstadisticasUsuarios(BaseModel):
    total: int = 0
    activos: int = 0
    inactivos: int = 0
    porcentaje_activos: float = 0
    por_rol: dict = {}

class Permiso(BaseModel):
    puede: bool
    razon: Optional[str] = None
