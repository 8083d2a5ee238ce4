# dondesalimos/services/busqueda.py

import asyncio
import inspect
import logging
from typing import Any, Callable, List, Optional

from pydantic import BaseModel

from dondesalimos.config import settings
from dondesalimos.services.comercios_service import filtrar_por_tipo, ordenar_por_distancia

logger = logging.getLogger(__name__)

ORDEN_DISTANCIA = "distancia"
ORDEN_PUNTUACION = "puntuacion"
ORDEN_NOMBRE = "nombre"


class FiltrosBusqueda(BaseModel):
    texto: str = ""
    tipo: Optional[int] = None
    generos: List[str] = []
    orden: str = ORDEN_NOMBRE


def _contiene(valor: Optional[str], texto: str) -> bool:
    return bool(valor) and texto in valor.lower()


def _puntuacion(lugar) -> float:
    return getattr(lugar, "promedio_puntuacion", None) or getattr(lugar, "rating", None) or 0


def aplicar_filtros(lugares: List[Any], filtros: FiltrosBusqueda, lat: Optional[float] = None, lng: Optional[float] = None) -> List[Any]:
    """Filtra y ordena comercios locales y lugares de Google con los filtros del home."""
    resultado = filtrar_por_tipo(lugares, filtros.tipo)

    texto = filtros.texto.strip().lower()
    if texto:
        resultado = [
            l for l in resultado
            if _contiene(l.nombre, texto)
            or _contiene(l.direccion, texto)
            or _contiene(getattr(l, "descripcion", None), texto)
        ]

    if filtros.generos:
        generos = [g.replace("_", " ").lower() for g in filtros.generos]

        def coincide_genero(lugar) -> bool:
            # Los lugares de Google no tienen género musical
            if not getattr(lugar, "es_local", True):
                return True
            genero = (getattr(lugar, "genero_musical", None) or "").lower()
            return bool(genero) and any(g in genero for g in generos)

        resultado = [l for l in resultado if coincide_genero(l)]

    if filtros.orden == ORDEN_DISTANCIA and lat is not None and lng is not None:
        return ordenar_por_distancia(resultado, lat, lng)
    if filtros.orden == ORDEN_PUNTUACION:
        return sorted(resultado, key=_puntuacion, reverse=True)
    return sorted(resultado, key=lambda l: (l.nombre or "").lower())


class BuscadorComercios:
    """
    Búsqueda con debounce: cada llamada a `actualizar` reinicia la espera
    y solo se ejecuta la última consulta.
    """

    def __init__(self, buscar: Callable[[str], Any], demora: Optional[float] = None, al_resultado: Optional[Callable[[Any], None]] = None):
        self.buscar = buscar
        self.demora = settings.SEARCH_DEBOUNCE_SECONDS if demora is None else demora
        self.al_resultado = al_resultado
        self.resultado = None
        self._texto = None
        self._tarea: Optional[asyncio.Task] = None

    def actualizar(self, texto: str) -> asyncio.Task:
        self.cancelar()
        self._texto = texto
        self._tarea = asyncio.get_running_loop().create_task(self._ejecutar(texto))
        return self._tarea

    async def _ejecutar(self, texto: str):
        await asyncio.sleep(self.demora)
        if inspect.iscoroutinefunction(self.buscar):
            resultado = await self.buscar(texto)
        else:
            # Las búsquedas con requests bloquean: van a un hilo aparte
            resultado = await asyncio.to_thread(self.buscar, texto)
            if inspect.isawaitable(resultado):
                resultado = await resultado
        if texto != self._texto:
            logger.debug(f"Resultado descartado para '{texto}'")
            return
        self.resultado = resultado
        if self.al_resultado:
            self.al_resultado(resultado)

    async def esperar(self):
        if self._tarea is None:
            return self.resultado
        tarea = self._tarea
        await asyncio.wait([tarea])
        if not tarea.cancelled():
            tarea.result()
        return self.resultado

    def cancelar(self):
        if self._tarea and not self._tarea.done():
            self._tarea.cancel()
        self._tarea = None
