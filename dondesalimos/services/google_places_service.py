# dondesalimos/services/google_places_service.py

import logging
from typing import List, Optional

from fastapi import Depends

from dondesalimos.config import settings
from dondesalimos.core.api import ApiClient
from dondesalimos.core.constants import TIPO_BAR, TIPO_BOLICHE
from dondesalimos.core.exceptions import ApiError
from dondesalimos.core.security import get_api_client
from dondesalimos.schemas.comercio import LugarGoogle

logger = logging.getLogger(__name__)

# Solo se excluyen lugares que claramente no son bares ni boliches
PALABRAS_EXCLUIDAS = (
    "hotel", "hostel", "motel", "resort", "hospedaje", "alojamiento",
    "hospital", "clinica", "clínica", "farmacia",
    "supermercado", "carniceria", "verduleria",
    "estacion de servicio", "gas station",
    "gimnasio", "gym", "fitness",
)

TIPOS_EXCLUIDOS = (
    "lodging", "hotel", "motel",
    "hospital", "health", "doctor", "pharmacy",
    "gas_station",
    "grocery_or_supermarket", "supermarket",
)

# (type, keyword) de cada búsqueda
BUSQUEDAS = (
    ("bar", ""),
    ("night_club", ""),
    ("bar", "cerveceria"),
    ("bar", "pub"),
)


def get_google_places_service(api: ApiClient = Depends(get_api_client)):
    return GooglePlacesService(api)


def debe_excluirse(lugar: dict) -> bool:
    nombre = (lugar.get("name") or "").lower()
    tipos = lugar.get("types") or []
    if any(palabra in nombre for palabra in PALABRAS_EXCLUIDAS):
        return True
    return any(tipo in tipos for tipo in TIPOS_EXCLUIDOS)


def determinar_tipo_comercio(lugar: dict) -> int:
    tipos = lugar.get("types") or []
    nombre = (lugar.get("name") or "").lower()
    if "night_club" in tipos:
        return TIPO_BOLICHE
    if any(p in nombre for p in ("disco", "club", "boliche")):
        return TIPO_BOLICHE
    return TIPO_BAR


def normalizar_lugar(lugar: dict) -> LugarGoogle:
    ubicacion = (lugar.get("geometry") or {}).get("location") or {}
    if not ubicacion.get("lat") or not ubicacion.get("lng"):
        logger.warning(f"Lugar sin coordenadas: {lugar.get('name')}")

    return LugarGoogle(
        place_id=lugar.get("place_id"),
        nombre=lugar.get("name"),
        direccion=lugar.get("vicinity") or lugar.get("formatted_address"),
        latitud=ubicacion.get("lat"),
        longitud=ubicacion.get("lng"),
        rating=lugar.get("rating"),
        user_ratings_total=lugar.get("user_ratings_total"),
        types=lugar.get("types") or [],
        id_tipo_comercio=determinar_tipo_comercio(lugar),
        is_open=(lugar.get("opening_hours") or {}).get("open_now"),
    )


class GooglePlacesService:
    """
    Búsqueda de lugares externos a través del proxy /api/GooglePlaces de la API.
    Los errores no se propagan: se devuelven resultados vacíos.
    """

    def __init__(self, api: ApiClient):
        self.api = api

    def _buscar(self, lat: float, lng: float, radio: int, tipo: str, keyword: str = "") -> List[dict]:
        params = {"lat": lat, "lng": lng, "type": tipo, "radius": radio}
        if keyword:
            params["keyword"] = keyword
        try:
            datos = self.api.get("/api/GooglePlaces/nearby", params=params)
        except ApiError as e:
            logger.warning(f"Error buscando {tipo} {keyword}: {e}")
            return []
        if isinstance(datos, dict) and datos.get("status") == "OK":
            return datos.get("results") or []
        return []

    def buscar_cercanos(self, lat: float, lng: float, radio: Optional[int] = None) -> List[dict]:
        radio = radio or settings.GOOGLE_PLACES_RADIUS
        vistos = set()
        lugares = []
        for tipo, keyword in BUSQUEDAS:
            for lugar in self._buscar(lat, lng, radio, tipo, keyword):
                place_id = lugar.get("place_id")
                if not place_id or place_id in vistos:
                    continue
                vistos.add(place_id)
                if not debe_excluirse(lugar):
                    lugares.append(lugar)
        return lugares

    def buscar_cercanos_normalizados(self, lat: float, lng: float, radio: Optional[int] = None) -> List[LugarGoogle]:
        return [normalizar_lugar(l) for l in self.buscar_cercanos(lat, lng, radio)]

    def obtener_detalle(self, place_id: str) -> Optional[dict]:
        try:
            datos = self.api.get(f"/api/GooglePlaces/details/{place_id}")
        except ApiError as e:
            logger.warning(f"Error obteniendo detalle de {place_id}: {e}")
            return None
        if isinstance(datos, dict) and datos.get("status") == "OK":
            return datos.get("result")
        return None
