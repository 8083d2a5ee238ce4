# dondesalimos/core/verificador_sesion.py

import asyncio
import logging
from datetime import datetime
from typing import Callable, Optional

from dondesalimos.config import settings
from dondesalimos.core.exceptions import ApiError
from dondesalimos.core.sesion import SesionStore
from dondesalimos.schemas.usuario import SesionVerificada

logger = logging.getLogger(__name__)

# Campos del usuario que se sincronizan con el servidor
CAMPOS_SINCRONIZADOS = ("id_rol_usuario", "estado", "nombre_usuario")


class VerificadorSesion:
    """
    Verifica periódicamente que la sesión local siga siendo válida en el servidor.

    - Primera verificación a los SESSION_INITIAL_DELAY_SECONDS, luego cada SESSION_CHECK_INTERVAL_SECONDS
    - al_recuperar_foco / al_volver_online fuerzan una verificación inmediata
    - Nunca hay dos verificaciones en curso a la vez
    """

    def __init__(
        self,
        sesion: SesionStore,
        intervalo: Optional[float] = None,
        demora_inicial: Optional[float] = None,
        on_sesion_invalida: Optional[Callable[[Optional[str]], None]] = None,
    ):
        self.sesion = sesion
        self.intervalo = settings.SESSION_CHECK_INTERVAL_SECONDS if intervalo is None else intervalo
        self.demora_inicial = settings.SESSION_INITIAL_DELAY_SECONDS if demora_inicial is None else demora_inicial
        self.on_sesion_invalida = on_sesion_invalida
        self._verificando = False
        self._activo = False
        self._generacion = 0
        self._tarea: Optional[asyncio.Task] = None

    @property
    def activo(self) -> bool:
        return self._activo

    def iniciar(self) -> asyncio.Task:
        if self._tarea and not self._tarea.done():
            return self._tarea
        self._activo = True
        self._tarea = asyncio.get_running_loop().create_task(self._bucle())
        return self._tarea

    async def _bucle(self):
        await asyncio.sleep(self.demora_inicial)
        while True:
            await self.verificar()
            await asyncio.sleep(self.intervalo)

    def detener(self):
        self._activo = False
        # Las respuestas que lleguen después de detener() se descartan
        self._generacion += 1
        if self._tarea and not self._tarea.done():
            self._tarea.cancel()
        self._tarea = None

    def al_recuperar_foco(self) -> Optional[asyncio.Task]:
        return self._disparar()

    def al_volver_online(self) -> Optional[asyncio.Task]:
        return self._disparar()

    def _disparar(self) -> Optional[asyncio.Task]:
        if not self._activo:
            return None
        return asyncio.get_running_loop().create_task(self.verificar())

    async def verificar(self) -> Optional[SesionVerificada]:
        if self._verificando or not self.sesion.check_auth():
            return None

        # Se marca antes del primer await
        self._verificando = True
        generacion = self._generacion
        try:
            resultado = await asyncio.to_thread(self.sesion.usuarios.verificar_sesion)
        except ApiError as e:
            logger.warning(f"No se pudo verificar la sesión: {e}")
            return None
        finally:
            self._verificando = False

        if generacion != self._generacion:
            logger.debug("Respuesta de verificación descartada (verificador detenido)")
            return None

        self._aplicar(resultado)
        return resultado

    def _aplicar(self, resultado: SesionVerificada):
        if not resultado.sesion_valida or resultado.requiere_logout:
            logger.info(f"Sesión inválida: {resultado.mensaje}")
            self.sesion.logout()
            if self.on_sesion_invalida:
                self.on_sesion_invalida(resultado.mensaje)
            return

        servidor = resultado.usuario or {}
        actual = self.sesion.usuario or {}
        cambios = {
            campo: servidor[campo]
            for campo in CAMPOS_SINCRONIZADOS
            if campo in servidor and servidor[campo] != actual.get(campo)
        }
        if cambios:
            logger.info(f"Datos del usuario actualizados desde el servidor: {list(cambios)}")
            self.sesion.actualizar_usuario({**actual, **cambios})
        self.sesion.ultima_verificacion = datetime.now()
