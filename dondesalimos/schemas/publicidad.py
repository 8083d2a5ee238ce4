from enum import Enum
from pydantic import BaseModel, Field, validator
from typing import Optional, Union
from datetime import datetime

class EstadoPublicidad(str, Enum):
    pendiente = "pendiente"
    rechazada = "rechazada"
    sin_pagar = "sin_pagar"
    expirada = "expirada"
    por_expirar = "por_expirar"
    activa = "activa"

class Publicidad(BaseModel):
    id_publicidad: int
    id_comercio: Optional[int] = None
    descripcion: Optional[str] = None
    imagen: Optional[str] = None
    # TimeSpan "7:00:00" / "15.00:00:00"; el primer número son los días
    tiempo: Optional[Union[str, int]] = None
    visualizaciones: int = 0
    estado: bool = False
    pago: bool = False
    motivo_rechazo: Optional[str] = None
    fecha_creacion: Optional[datetime] = None
    comercio: Optional[dict] = None

    class Config:
        from_attributes = True

class PublicidadCreate(BaseModel):
    id_comercio: int
    descripcion: str
    imagen: Optional[str] = None
    dias: int = Field(7, ge=1, le=30)

    @validator('descripcion')
    def descripcion_no_vacia(cls, v):
        v = (v or "").strip()
        if not v:
            raise ValueError('Ingresá una descripción')
        return v

class PublicidadResponse(Publicidad):
    estado_publicidad: EstadoPublicidad
    dias_restantes: Optional[int] = None

class EstadisticasPublicidades(BaseModel):
    total: int = 0
    activas: int = 0
    pendientes: int = 0
    rechazadas: int = 0
    sin_pagar: int = 0
    total_visualizaciones: int = 0
