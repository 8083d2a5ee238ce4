# dondesalimos/core/storage.py

import json
import logging
import os
from typing import Any, Optional

from dondesalimos.config import settings
from dondesalimos.core.constants import (
    STORAGE_JWT_TOKEN,
    STORAGE_KEYS,
    STORAGE_USER_DATA,
)

logger = logging.getLogger(__name__)


class AlmacenamientoLocal:
    """Almacén clave/valor persistido en un archivo JSON."""

    def __init__(self, path: Optional[str] = None):
        self.path = path or settings.STORAGE_PATH
        self._datos = self._leer()

    def _leer(self) -> dict:
        if not os.path.exists(self.path):
            return {}
        try:
            with open(self.path, "r", encoding="utf-8") as f:
                datos = json.load(f)
            return datos if isinstance(datos, dict) else {}
        except (OSError, ValueError) as e:
            logger.warning(f"No se pudo leer el almacenamiento local {self.path}: {e}")
            return {}

    def _guardar(self):
        directorio = os.path.dirname(self.path)
        if directorio:
            os.makedirs(directorio, exist_ok=True)
        with open(self.path, "w", encoding="utf-8") as f:
            json.dump(self._datos, f, ensure_ascii=False, indent=2)

    def get(self, clave: str, default: Any = None) -> Any:
        return self._datos.get(clave, default)

    def set(self, clave: str, valor: Any):
        self._datos[clave] = valor
        self._guardar()

    def remove(self, clave: str):
        if clave in self._datos:
            del self._datos[clave]
            self._guardar()

    def limpiar(self):
        for clave in STORAGE_KEYS:
            self._datos.pop(clave, None)
        self._guardar()

    # Atajos para las claves de sesión
    @property
    def jwt_token(self) -> Optional[str]:
        return self.get(STORAGE_JWT_TOKEN)

    @jwt_token.setter
    def jwt_token(self, token: Optional[str]):
        if token:
            self.set(STORAGE_JWT_TOKEN, token)
        else:
            self.remove(STORAGE_JWT_TOKEN)

    @property
    def usuario(self) -> Optional[dict]:
        return self.get(STORAGE_USER_DATA)

    @usuario.setter
    def usuario(self, datos: Optional[dict]):
        if datos:
            self.set(STORAGE_USER_DATA, datos)
        else:
            self.remove(STORAGE_USER_DATA)
