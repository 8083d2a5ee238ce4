# dondesalimos/services/usuarios_service.py

import logging
from typing import Iterable, List, Optional

from fastapi import Depends

from dondesalimos.core.api import ApiClient
from dondesalimos.core.constants import ROL_USUARIO_COMUN
from dondesalimos.core.exceptions import ConexionError, NoAutenticadoError, NoEncontradoError
from dondesalimos.core.security import get_api_client
from dondesalimos.schemas.auth import Sesion
from dondesalimos.schemas.usuario import (
    EstadisticasUsuarios,
    PerfilUpdate,
    Permiso,
    SesionVerificada,
    UsuarioResponse,
    UsuarioUpdate,
)

logger = logging.getLogger(__name__)

MENSAJE_SESION_EXPIRADA = "Tu sesión ha expirado. Por favor, inicia sesión nuevamente."
MENSAJE_CUENTA_INEXISTENTE = "Tu cuenta ya no existe en el sistema."


def get_usuarios_service(api: ApiClient = Depends(get_api_client)):
    return UsuariosService(api)


def _a_usuarios(datos) -> List[UsuarioResponse]:
    return [UsuarioResponse(**u) for u in (datos or [])]


class UsuariosService:
    def __init__(self, api: ApiClient):
        self.api = api

    # OPERACIONES CRUD
    def listar(self) -> List[UsuarioResponse]:
        return _a_usuarios(self.api.get("/api/Usuarios/listado"))

    def obtener(self, id_usuario: int) -> Optional[UsuarioResponse]:
        datos = self.api.get(f"/api/Usuarios/buscarIdUsuario/{id_usuario}")
        return UsuarioResponse(**datos) if datos else None

    def buscar_por_nombre(self, nombre_usuario: str) -> List[UsuarioResponse]:
        return _a_usuarios(self.api.get(f"/api/Usuarios/buscarNombreUsuario/{nombre_usuario}"))

    def obtener_por_email(self, correo: str) -> Optional[UsuarioResponse]:
        datos = self.api.get(f"/api/Usuarios/buscarEmail/{correo}")
        return UsuarioResponse(**datos) if datos else None

    def actualizar(self, id_usuario: int, datos: UsuarioUpdate):
        return self.api.put(f"/api/Usuarios/actualizar/{id_usuario}", datos.dict(exclude_none=True))

    def actualizar_perfil(self, actual: UsuarioResponse, datos: PerfilUpdate):
        # La API espera el usuario completo: rol y estado no cambian
        payload = actual.dict(exclude={"fecha_creacion"})
        payload.update(nombre_usuario=datos.nombre_usuario, telefono=datos.telefono)
        if actual.fecha_creacion:
            payload["fecha_creacion"] = actual.fecha_creacion.isoformat()
        return self.api.put(f"/api/Usuarios/actualizar/{actual.id_usuario}", payload)

    def desactivar(self, id_usuario: int):
        logger.info(f"Desactivando usuario {id_usuario}")
        return self.api.put(f"/api/Usuarios/desactivar/{id_usuario}")

    def cambiar_estado(self, id_usuario: int, estado: bool):
        logger.info(f"Cambiando estado del usuario {id_usuario} a {estado}")
        return self.api.put(f"/api/Usuarios/cambiarEstado/{id_usuario}", {"estado": estado})

    def eliminar(self, id_usuario: int):
        """Elimina el usuario y todas sus relaciones"""
        logger.info(f"Eliminando usuario {id_usuario}")
        return self.api.delete(f"/api/Usuarios/eliminar/{id_usuario}")

    # VERIFICACIÓN DE SESIÓN
    def verificar_sesion(self) -> SesionVerificada:
        try:
            datos = self.api.get("/api/Usuarios/verificarSesion", none_si_404=False)
        except NoAutenticadoError:
            return SesionVerificada(sesion_valida=False, requiere_logout=True, mensaje=MENSAJE_SESION_EXPIRADA)
        except NoEncontradoError:
            return SesionVerificada(sesion_valida=False, requiere_logout=True, mensaje=MENSAJE_CUENTA_INEXISTENTE)
        except ConexionError:
            # Puede ser temporal: no se fuerza el logout
            logger.warning("Error de conexión al verificar la sesión, se asume válida")
            return SesionVerificada(sesion_valida=True, requiere_logout=False, mensaje=None)
        return SesionVerificada(**(datos or {}))

    # AUTENTICACIÓN
    def iniciar_sesion_con_google(self, id_token: str) -> Sesion:
        datos = self.api.post("/api/Usuarios/iniciarSesionConGoogle", {"IdToken": id_token})
        return Sesion(**(datos or {}))

    def registrar_con_google(self, id_token: str, rol_usuario: int = ROL_USUARIO_COMUN) -> Sesion:
        datos = self.api.post(
            "/api/Usuarios/registrarConGoogle",
            {"IdToken": id_token, "RolUsuario": rol_usuario},
        )
        return Sesion(**(datos or {}))


# UTILIDADES
def estadisticas_usuarios(usuarios: Iterable[UsuarioResponse]) -> EstadisticasUsuarios:
    usuarios = list(usuarios)
    total = len(usuarios)
    activos = sum(1 for u in usuarios if u.estado is True)
    por_rol = {}
    for u in usuarios:
        por_rol[u.id_rol_usuario] = por_rol.get(u.id_rol_usuario, 0) + 1
    return EstadisticasUsuarios(
        total=total,
        activos=activos,
        inactivos=total - activos,
        porcentaje_activos=round(activos / total * 100, 1) if total else 0,
        por_rol=por_rol,
    )


def puede_desactivar(usuario: UsuarioResponse) -> Permiso:
    if usuario.estado is False:
        return Permiso(puede=False, razon="El usuario ya está desactivado")
    return Permiso(puede=True)


def puede_eliminar(usuario: UsuarioResponse, id_usuario_actual: int) -> Permiso:
    if usuario.id_usuario == id_usuario_actual:
        return Permiso(puede=False, razon="No puedes eliminar tu propia cuenta desde el panel de admin")
    return Permiso(puede=True)
