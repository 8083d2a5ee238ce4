# dondesalimos/services/roles_usuario_service.py

from typing import Dict, Iterable, List, Optional

from fastapi import Depends

from dondesalimos.core.api import ApiClient
from dondesalimos.core.constants import DESCRIPCION_ROLES, ROLES_SISTEMA
from dondesalimos.core.security import get_api_client
from dondesalimos.schemas.rol_usuario import RolUsuarioCreate, RolUsuarioResponse, RolUsuarioUpdate


def get_roles_usuario_service(api: ApiClient = Depends(get_api_client)):
    return RolesUsuarioService(api)


class RolesUsuarioService:
    def __init__(self, api: ApiClient):
        self.api = api

    def listar(self) -> List[RolUsuarioResponse]:
        return [RolUsuarioResponse(**r) for r in (self.api.get("/api/rolesUsuario/listado") or [])]

    def obtener(self, id_rol: int) -> Optional[RolUsuarioResponse]:
        datos = self.api.get(f"/api/rolesUsuario/buscarIdRolUsuario/{id_rol}")
        return RolUsuarioResponse(**datos) if datos else None

    def buscar_por_nombre(self, nombre: str) -> List[RolUsuarioResponse]:
        return [
            RolUsuarioResponse(**r)
            for r in (self.api.get(f"/api/rolesUsuario/buscarNombreRolUsuario/{nombre}") or [])
        ]

    def crear(self, datos: RolUsuarioCreate):
        return self.api.post("/api/rolesUsuario/crear", datos.dict())

    def actualizar(self, id_rol: int, datos: RolUsuarioUpdate):
        payload = {"id_rol_usuario": id_rol, **datos.dict(exclude_none=True)}
        return self.api.put(f"/api/rolesUsuario/actualizar/{id_rol}", payload)

    def eliminar(self, id_rol: int):
        return self.api.delete(f"/api/rolesUsuario/eliminar/{id_rol}")


def descripcion_rol(id_rol: int) -> str:
    return DESCRIPCION_ROLES.get(id_rol, "Desconocido")


def es_rol_sistema(id_rol: int) -> bool:
    """Los roles del sistema no se pueden eliminar"""
    return id_rol in ROLES_SISTEMA


def construir_mapa(roles: Iterable[RolUsuarioResponse]) -> Dict[int, str]:
    return {r.id_rol_usuario: r.descripcion for r in roles or [] if r.id_rol_usuario and r.descripcion}


def filtrar_activos(roles: Iterable[RolUsuarioResponse]) -> List[RolUsuarioResponse]:
    return [r for r in roles or [] if r.estado is True]


def en_uso(id_rol: int, usuarios: Iterable) -> bool:
    return any(u.id_rol_usuario == id_rol for u in usuarios or [])
