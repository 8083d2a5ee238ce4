import re
from pydantic import BaseModel, EmailStr, Field, validator
from typing import List, Optional
from datetime import datetime

from dondesalimos.core.constants import TIPO_BAR, TIPO_DOCUMENTO_DEFAULT
from dondesalimos.core.cuit import limpiar_cuit, obtener_error_cuit
from dondesalimos.core.estados import Estado, estado_de
from dondesalimos.schemas.resenia import ReseniasComercio, ResultadoElegibilidad

HORA_REGEX = re.compile(r"^([0-1]?[0-9]|2[0-3]):[0-5][0-9]$")

class ComercioBase(BaseModel):
    nombre: Optional[str] = None
    direccion: Optional[str] = None
    telefono: Optional[str] = None
    correo: Optional[str] = None
    nro_documento: Optional[str] = None
    tipo_documento: str = TIPO_DOCUMENTO_DEFAULT
    capacidad: Optional[int] = None
    mesas: Optional[int] = None
    genero_musical: Optional[str] = None
    hora_ingreso: Optional[str] = None
    hora_cierre: Optional[str] = None
    latitud: Optional[float] = None
    longitud: Optional[float] = None
    id_tipo_comercio: Optional[int] = None

class Comercio(ComercioBase):
    id_comercio: int
    id_usuario: Optional[int] = None
    foto: Optional[str] = None
    estado: bool = False
    motivo_rechazo: Optional[str] = None
    fecha_creacion: Optional[datetime] = None

    class Config:
        from_attributes = True

class ComercioCreate(BaseModel):
    """Datos del formulario de alta/edición de un comercio"""
    nombre: str
    direccion: str = Field(..., min_length=1)
    telefono: str
    correo: EmailStr
    nro_documento: str
    tipo_documento: str = TIPO_DOCUMENTO_DEFAULT
    id_tipo_comercio: int = TIPO_BAR
    capacidad: Optional[int] = Field(None, ge=1)
    mesas: Optional[int] = Field(None, ge=0)
    genero_musical: Optional[str] = None
    hora_ingreso: Optional[str] = None
    hora_cierre: Optional[str] = None
    foto: Optional[str] = None
    latitud: Optional[float] = Field(None, ge=-90, le=90)
    longitud: Optional[float] = Field(None, ge=-180, le=180)

    @validator('nombre')
    def nombre_minimo(cls, v):
        v = (v or "").strip()
        if len(v) < 3:
            raise ValueError('El nombre debe tener al menos 3 caracteres')
        return v

    @validator('telefono')
    def telefono_digitos(cls, v):
        v = re.sub(r"\D", "", v or "")[:15]
        if len(v) < 8:
            raise ValueError('El teléfono debe tener al menos 8 dígitos')
        return v

    @validator('nro_documento')
    def cuit_valido(cls, v):
        error = obtener_error_cuit(v)
        if error:
            raise ValueError(error)
        return limpiar_cuit(v)

    @validator('hora_ingreso', 'hora_cierre')
    def hora_hhmm(cls, v):
        if v is None or v == "":
            return None
        if not HORA_REGEX.match(v):
            raise ValueError('Formato inválido (HH:MM)')
        return v

class ComercioResponse(Comercio):
    estado_aprobacion: Estado
    es_local: bool = True
    distancia: Optional[float] = None
    promedio_puntuacion: Optional[float] = None

    @classmethod
    def desde_comercio(cls, comercio: Comercio, **extra) -> "ComercioResponse":
        return cls(**comercio.dict(), estado_aprobacion=estado_de(comercio).tipo, **extra)

class LugarGoogle(BaseModel):
    """Lugar de Google Places normalizado a la forma de un comercio"""
    id_comercio: Optional[int] = None
    place_id: str
    source: str = "google"
    es_local: bool = False
    nombre: Optional[str] = None
    direccion: Optional[str] = None
    latitud: Optional[float] = None
    longitud: Optional[float] = None
    rating: Optional[float] = None
    user_ratings_total: Optional[int] = None
    types: List[str] = []
    id_tipo_comercio: int = TIPO_BAR
    is_open: Optional[bool] = None
    foto: Optional[str] = None
    estado: bool = True
    distancia: Optional[float] = None

class EstadisticasComercios(BaseModel):
    total: int = 0
    aprobados: int = 0
    pendientes: int = 0
    rechazados: int = 0

class ValidacionCuit(BaseModel):
    valido: bool
    cuit: str
    error: Optional[str] = None

class ComercioDetalle(BaseModel):
    comercio: ComercioResponse
    resenias: ReseniasComercio
    elegibilidad: Optional[ResultadoElegibilidad] = None
