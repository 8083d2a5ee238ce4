from pydantic import BaseModel, Field
from typing import Optional

class TipoComercioBase(BaseModel):
    descripcion: str = Field(..., min_length=1, max_length=100)
    estado: bool = True

class TipoComercioCreate(TipoComercioBase):
    pass

class TipoComercioUpdate(BaseModel):
    descripcion: Optional[str] = Field(None, min_length=1, max_length=100)
    estado: Optional[bool] = None

class TipoComercioResponse(BaseModel):
    id_tipo_comercio: int
    descripcion: Optional[str] = None
    estado: bool = True

    class Config:
        from_attributes = True
