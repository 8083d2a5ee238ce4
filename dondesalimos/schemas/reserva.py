from pydantic import AliasChoices, BaseModel, Field, validator
from typing import Optional
from datetime import datetime

from dondesalimos.core.constants import TIEMPO_TOLERANCIA_DEFAULT
from dondesalimos.core.estados import Estado, estado_de
from dondesalimos.core.temporal import es_pasada, es_pendiente_vencida

class ReservaBase(BaseModel):
    id_comercio: int = Field(..., description="ID del comercio")
    fecha_reserva: datetime
    # La API lo escribe "Comenzales"
    comensales: int = Field(..., ge=1, validation_alias=AliasChoices("comensales", "comenzales"))
    tiempo_tolerancia: str = TIEMPO_TOLERANCIA_DEFAULT

class ReservaCreate(ReservaBase):
    id_usuario: Optional[int] = Field(None, description="Se toma del token si no se envía")

class Reserva(ReservaBase):
    id_reserva: int
    id_usuario: Optional[int] = None
    comensales: int = Field(1, validation_alias=AliasChoices("comensales", "comenzales"))
    fecha_creacion: Optional[datetime] = None
    estado: bool = False
    motivo_rechazo: Optional[str] = None
    usuario: Optional[dict] = None
    comercio: Optional[dict] = None

    class Config:
        from_attributes = True

class ReservaResponse(Reserva):
    estado_aprobacion: Estado
    es_pasada: bool = False
    es_pendiente_vencida: bool = False

    @classmethod
    def desde_reserva(cls, reserva: Reserva, ahora: Optional[datetime] = None) -> "ReservaResponse":
        return cls(
            **reserva.dict(),
            estado_aprobacion=estado_de(reserva).tipo,
            es_pasada=es_pasada(reserva.fecha_reserva, ahora),
            es_pendiente_vencida=es_pendiente_vencida(reserva, ahora),
        )

class RechazoRequest(BaseModel):
    motivo: str

    @validator('motivo')
    def motivo_no_vacio(cls, v):
        if not v or not v.strip():
            raise ValueError('Indicá el motivo del rechazo')
        return v.strip()

class NoAsistioRequest(BaseModel):
    motivo: Optional[str] = None

class EstadisticasReservas(BaseModel):
    total: int = 0
    aprobadas: int = 0
    pendientes: int = 0
    rechazadas: int = 0
    hoy: int = 0
    futuras: int = 0
    pasadas: int = 0
    tasa_aprobacion: float = 0
