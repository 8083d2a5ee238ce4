# dondesalimos/core/sesion.py

import logging
from datetime import datetime
from typing import Optional

from dondesalimos.core.api import ApiClient, extraer_mensaje
from dondesalimos.core.constants import ROL_ADMINISTRADOR, ROL_USUARIO_COMERCIO, ROL_USUARIO_COMUN
from dondesalimos.core.exceptions import ApiError, ConexionError, ValidacionError
from dondesalimos.core.security import token_expirado
from dondesalimos.core.storage import AlmacenamientoLocal
from dondesalimos.schemas.auth import ResultadoLogin
from dondesalimos.services.usuarios_service import UsuariosService

logger = logging.getLogger(__name__)

MENSAJE_CONEXION_LOGIN = "Error de conexión. Verifica tu internet e intenta nuevamente."
MENSAJE_SIN_USUARIO = "No se recibió información del usuario"


class SesionStore:
    """
    Estado de autenticación del cliente: usuario logueado, rol y token.
    Se construye una sola vez al iniciar la aplicación y persiste en AlmacenamientoLocal.
    """

    def __init__(self, almacenamiento: Optional[AlmacenamientoLocal] = None, api: Optional[ApiClient] = None):
        self.almacenamiento = almacenamiento or AlmacenamientoLocal()
        self.api = api or ApiClient(
            token=lambda: self.almacenamiento.jwt_token,
            on_unauthorized=self._no_autorizado,
        )
        self.usuarios = UsuariosService(self.api)
        self.usuario: Optional[dict] = None
        self.ultima_verificacion: Optional[datetime] = None
        self.cargar_usuario()

    # Estado derivado
    @property
    def token(self) -> Optional[str]:
        return self.almacenamiento.jwt_token

    @property
    def is_authenticated(self) -> bool:
        return self.usuario is not None

    @property
    def is_admin(self) -> bool:
        return self.has_role(ROL_ADMINISTRADOR)

    @property
    def is_bar_owner(self) -> bool:
        return self.has_role(ROL_USUARIO_COMERCIO)

    @property
    def is_approved(self) -> bool:
        return bool(self.usuario and self.usuario.get("estado"))

    def cargar_usuario(self):
        token = self.almacenamiento.jwt_token
        guardado = self.almacenamiento.usuario
        if token and guardado:
            self._actualizar_estado(guardado)
        else:
            self.usuario = None

    def _actualizar_estado(self, usuario: Optional[dict]):
        self.usuario = usuario or None
        if usuario:
            self.almacenamiento.usuario = usuario

    def _guardar_sesion(self, jwt_token: Optional[str], usuario: Optional[dict]) -> ResultadoLogin:
        if jwt_token:
            self.almacenamiento.jwt_token = jwt_token
        else:
            logger.warning("No se recibió JWT del backend")
        if not usuario:
            return ResultadoLogin(success=False, message=MENSAJE_SIN_USUARIO)
        self._actualizar_estado(usuario)
        logger.info(f"Sesión iniciada para el usuario {usuario.get('id_usuario')}")
        return ResultadoLogin(success=True, usuario=usuario, jwt_token=jwt_token)

    def login_con_google(self, id_token: str) -> ResultadoLogin:
        try:
            sesion = self.usuarios.iniciar_sesion_con_google(id_token)
        except ValidacionError as e:
            # 400: el usuario no está registrado
            return ResultadoLogin(success=False, needs_registration=True, message=e.mensaje)
        except ConexionError:
            return ResultadoLogin(success=False, message=MENSAJE_CONEXION_LOGIN)
        except ApiError as e:
            return ResultadoLogin(success=False, message=extraer_mensaje(e.datos, e.mensaje))
        return self._guardar_sesion(sesion.jwt_token, sesion.usuario)

    def registrar_con_google(self, id_token: str, rol_usuario: int = ROL_USUARIO_COMUN) -> ResultadoLogin:
        try:
            sesion = self.usuarios.registrar_con_google(id_token, rol_usuario)
        except ConexionError as e:
            raise ConexionError(MENSAJE_CONEXION_LOGIN) from e
        except ApiError as e:
            if e.status_code in (400, 409):
                return ResultadoLogin(success=False, already_registered=True, message=extraer_mensaje(e.datos, e.mensaje))
            raise
        return self._guardar_sesion(sesion.jwt_token, sesion.usuario)

    def logout(self):
        self.almacenamiento.limpiar()
        self.usuario = None
        self.ultima_verificacion = None
        logger.info("Sesión cerrada")

    def _no_autorizado(self):
        if self.is_authenticated or self.token:
            self.logout()

    def actualizar_usuario(self, usuario: dict):
        self._actualizar_estado(usuario)

    def has_role(self, id_rol: int) -> bool:
        return bool(self.usuario) and self.usuario.get("id_rol_usuario") == id_rol

    def check_auth(self) -> bool:
        return bool(self.token) and self.is_authenticated

    def token_expirado(self, ahora: Optional[datetime] = None) -> bool:
        return token_expirado(self.token, ahora)
