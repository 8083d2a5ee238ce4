from pydantic import BaseModel, Field
from typing import Optional

class RolUsuarioBase(BaseModel):
    descripcion: str = Field(..., min_length=1, max_length=100)
    estado: bool = True

class RolUsuarioCreate(RolUsuarioBase):
    pass

class RolUsuarioUpdate(BaseModel):
    descripcion: Optional[str] = Field(None, min_length=1, max_length=100)
    estado: Optional[bool] = None

class RolUsuarioResponse(BaseModel):
    id_rol_usuario: int
    descripcion: Optional[str] = None
    estado: bool = True

    class Config:
        from_attributes = True
