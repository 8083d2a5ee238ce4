# dondesalimos/services/tipos_comercio_service.py

import logging
from typing import Dict, Iterable, List, Optional

from fastapi import Depends

from dondesalimos.core.api import ApiClient
from dondesalimos.core.constants import TIPO_BAR, TIPO_BOLICHE
from dondesalimos.core.exceptions import ApiError
from dondesalimos.core.security import get_api_client
from dondesalimos.schemas.tipo_comercio import TipoComercioCreate, TipoComercioResponse, TipoComercioUpdate

logger = logging.getLogger(__name__)

# Tipos de respaldo si la API no responde
TIPOS_POR_DEFECTO = [
    TipoComercioResponse(id_tipo_comercio=TIPO_BAR, descripcion="Bar", estado=True),
    TipoComercioResponse(id_tipo_comercio=TIPO_BOLICHE, descripcion="Boliche", estado=True),
]


def get_tipos_comercio_service(api: ApiClient = Depends(get_api_client)):
    return TiposComercioService(api)


class TiposComercioService:
    def __init__(self, api: ApiClient):
        self.api = api

    def listar(self) -> List[TipoComercioResponse]:
        return [TipoComercioResponse(**t) for t in (self.api.get("/api/tiposComercio/listado") or [])]

    def listar_o_defecto(self) -> List[TipoComercioResponse]:
        try:
            tipos = self.listar()
        except ApiError as e:
            logger.warning(f"No se pudieron cargar los tipos de comercio: {e}")
            return list(TIPOS_POR_DEFECTO)
        return tipos or list(TIPOS_POR_DEFECTO)

    def obtener(self, id_tipo: int) -> Optional[TipoComercioResponse]:
        datos = self.api.get(f"/api/tiposComercio/buscarIdTipoComercio/{id_tipo}")
        return TipoComercioResponse(**datos) if datos else None

    def buscar_por_nombre(self, nombre: str) -> List[TipoComercioResponse]:
        return [
            TipoComercioResponse(**t)
            for t in (self.api.get(f"/api/tiposComercio/buscarNombreTipoComercio/{nombre}") or [])
        ]

    def crear(self, datos: TipoComercioCreate):
        return self.api.post("/api/tiposComercio/crear", datos.dict())

    def actualizar(self, id_tipo: int, datos: TipoComercioUpdate):
        payload = {"id_tipo_comercio": id_tipo, **datos.dict(exclude_none=True)}
        return self.api.put(f"/api/tiposComercio/actualizar/{id_tipo}", payload)

    def eliminar(self, id_tipo: int):
        return self.api.delete(f"/api/tiposComercio/eliminar/{id_tipo}")


def construir_mapa(tipos: Iterable[TipoComercioResponse]) -> Dict[int, str]:
    """id -> descripción"""
    return {t.id_tipo_comercio: t.descripcion for t in tipos or [] if t.id_tipo_comercio and t.descripcion}


def filtrar_activos(tipos: Iterable[TipoComercioResponse]) -> List[TipoComercioResponse]:
    return [t for t in tipos or [] if t.estado is True]


def en_uso(id_tipo: int, comercios: Iterable) -> bool:
    return any(c.id_tipo_comercio == id_tipo for c in comercios or [])
