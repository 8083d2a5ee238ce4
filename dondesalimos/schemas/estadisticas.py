from pydantic import BaseModel
from typing import Dict, List, Optional
from datetime import datetime

class Actividad(BaseModel):
    tipo: str
    titulo: str
    descripcion: Optional[str] = None
    fecha: datetime

class Alerta(BaseModel):
    id: Optional[int] = None
    titulo: Optional[str] = None
    descripcion: Optional[str] = None

class EstadisticasAdmin(BaseModel):
    resumen: dict
    usuarios: dict
    comercios: dict
    publicidades: dict
    resenias: dict
    reservas: dict
    actividad_reciente: List[Actividad] = []
    alertas: Dict[str, List[Alerta]] = {}
