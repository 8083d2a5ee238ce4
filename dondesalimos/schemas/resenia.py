from pydantic import AliasChoices, BaseModel, Field, validator
from typing import List, Optional
from datetime import datetime

from dondesalimos.core.estados import Estado, estado_de

class Resenia(BaseModel):
    id_resenia: int
    id_usuario: Optional[int] = None
    id_comercio: Optional[int] = None
    # La API usa "Calificacion" en algunos endpoints
    puntuacion: Optional[int] = Field(None, validation_alias=AliasChoices("puntuacion", "calificacion"))
    comentario: Optional[str] = None
    fecha_creacion: Optional[datetime] = None
    estado: bool = False
    motivo_rechazo: Optional[str] = None
    usuario: Optional[dict] = None
    comercio: Optional[dict] = None

    class Config:
        from_attributes = True

class ReseniaCreate(BaseModel):
    id_comercio: int
    puntuacion: int = Field(..., ge=1, le=5, validation_alias=AliasChoices("puntuacion", "calificacion"))
    comentario: str

    @validator('comentario')
    def comentario_minimo(cls, v):
        v = (v or "").strip()
        if not v:
            raise ValueError('Escribí un comentario')
        if len(v) < 10:
            raise ValueError('El comentario debe tener al menos 10 caracteres')
        return v

class ReseniaResponse(Resenia):
    estado_aprobacion: Estado

    @classmethod
    def desde_resenia(cls, resenia: Resenia) -> "ReseniaResponse":
        return cls(**resenia.dict(), estado_aprobacion=estado_de(resenia).tipo)

class ResultadoElegibilidad(BaseModel):
    puede_reseniar: bool
    mensaje: str

class EstadisticasResenias(BaseModel):
    total: int = 0
    promedio: float = 0
    por_estrellas: dict = Field(default_factory=lambda: {1: 0, 2: 0, 3: 0, 4: 0, 5: 0})

class ReseniasComercio(BaseModel):
    """Reseñas aprobadas de un comercio con sus estadísticas"""
    resenias: List[ReseniaResponse] = []
    estadisticas: EstadisticasResenias
