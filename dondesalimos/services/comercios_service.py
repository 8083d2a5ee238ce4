# dondesalimos/services/comercios_service.py

import logging
import math
from datetime import datetime
from typing import Iterable, List, Optional

from fastapi import Depends

from dondesalimos.core.api import ApiClient
from dondesalimos.core.cuit import limpiar_cuit
from dondesalimos.core.estados import Estado, contar_por_estado, es_aprobado, es_rechazado
from dondesalimos.core.exceptions import ApiError
from dondesalimos.core.security import get_api_client
from dondesalimos.schemas.comercio import Comercio, ComercioCreate, EstadisticasComercios

logger = logging.getLogger(__name__)

RADIO_TIERRA_KM = 6371


def get_comercios_service(api: ApiClient = Depends(get_api_client)):
    return ComerciosService(api)


def _a_comercios(datos) -> List[Comercio]:
    return [Comercio(**c) for c in (datos or [])]


def formatear_hora_envio(hora: Optional[str]) -> Optional[str]:
    """HH:MM -> HH:MM:SS (TimeSpan)"""
    if not hora:
        return None
    partes = hora.split(":")
    if len(partes) == 2:
        return f"{partes[0].zfill(2)}:{partes[1].zfill(2)}:00"
    return hora


def limpiar_foto(foto: Optional[str]) -> Optional[str]:
    """Quita el prefijo data:image/...;base64, antes de enviar la imagen"""
    if foto and "base64," in foto:
        return foto.split("base64,", 1)[1]
    return foto


def normalizar_imagen(foto: Optional[str]) -> Optional[str]:
    if not foto or not isinstance(foto, str):
        return None
    if foto.startswith("data:"):
        return foto
    return f"data:image/jpeg;base64,{foto}"


class ComerciosService:
    def __init__(self, api: ApiClient):
        self.api = api

    # CRUD BÁSICO
    def listar(self) -> List[Comercio]:
        return _a_comercios(self.api.get("/api/comercios/listado"))

    def listar_admin(self) -> List[Comercio]:
        """Listado sin fotos (carga rápida del panel de administración)"""
        return _a_comercios(self.api.get("/api/Comercios/listadoAdmin"))

    def obtener(self, id_comercio: int) -> Optional[Comercio]:
        datos = self.api.get(f"/api/comercios/buscarIdComercio/{id_comercio}")
        return Comercio(**datos) if datos else None

    def buscar_por_nombre(self, nombre: str) -> List[Comercio]:
        return _a_comercios(self.api.get(f"/api/comercios/buscarNombreComercio/{nombre}"))

    def listar_por_usuario(self, id_usuario: int) -> List[Comercio]:
        return _a_comercios(self.api.get(f"/api/comercios/buscarComerciosPorUsuario/{id_usuario}"))

    def _payload(self, datos: ComercioCreate, id_usuario: int, estado: bool, foto: Optional[str]) -> dict:
        return {
            "nombre": datos.nombre.strip(),
            "direccion": datos.direccion,
            "telefono": datos.telefono,
            "correo": str(datos.correo).strip(),
            "nro_documento": limpiar_cuit(datos.nro_documento),
            "tipo_documento": datos.tipo_documento,
            "id_tipo_comercio": datos.id_tipo_comercio,
            "capacidad": datos.capacidad,
            "mesas": datos.mesas,
            "genero_musical": datos.genero_musical,
            "hora_ingreso": formatear_hora_envio(datos.hora_ingreso),
            "hora_cierre": formatear_hora_envio(datos.hora_cierre),
            "foto": foto,
            "latitud": datos.latitud,
            "longitud": datos.longitud,
            "id_usuario": id_usuario,
            "estado": estado,
            "motivo_rechazo": None,
        }

    def crear(self, datos: ComercioCreate, id_usuario: int, ahora: Optional[datetime] = None):
        payload = self._payload(datos, id_usuario, estado=False, foto=limpiar_foto(datos.foto))
        payload["fecha_creacion"] = (ahora or datetime.now()).isoformat()
        respuesta = self.api.post("/api/comercios/crear", payload)
        logger.info(f"Comercio '{datos.nombre}' creado por el usuario {id_usuario}")
        return respuesta

    def actualizar(self, actual: Comercio, datos: ComercioCreate):
        """
        Edita un comercio. Si estaba rechazado vuelve a pendiente;
        si estaba aprobado se mantiene aprobado.
        """
        base = preparar_edicion(actual)
        foto = limpiar_foto(datos.foto) if datos.foto else actual.foto
        payload = self._payload(datos, actual.id_usuario, estado=base["estado"], foto=foto)
        payload["id_comercio"] = actual.id_comercio
        payload["motivo_rechazo"] = base["motivo_rechazo"]
        if actual.fecha_creacion:
            payload["fecha_creacion"] = actual.fecha_creacion.isoformat()
        return self.api.put(f"/api/comercios/actualizar/{actual.id_comercio}", payload)

    def eliminar(self, id_comercio: int):
        logger.info(f"Eliminando comercio {id_comercio}")
        return self.api.delete(f"/api/comercios/eliminar/{id_comercio}")

    def _cambiar_aprobacion(self, comercio: Comercio, estado: bool, motivo: Optional[str]):
        payload = comercio.dict()
        # listadoAdmin no trae fotos: no se pisa la foto guardada
        if comercio.foto is None:
            payload.pop("foto")
        if comercio.fecha_creacion:
            payload["fecha_creacion"] = comercio.fecha_creacion.isoformat()
        payload.update(estado=estado, motivo_rechazo=motivo)
        return self.api.put(f"/api/comercios/actualizar/{comercio.id_comercio}", payload)

    def aprobar(self, comercio: Comercio):
        return self._cambiar_aprobacion(comercio, True, None)

    def rechazar(self, comercio: Comercio, motivo: str):
        return self._cambiar_aprobacion(comercio, False, motivo)

    # ENDPOINTS OPTIMIZADOS
    def obtener_imagen(self, id_comercio: int) -> Optional[str]:
        """Foto del comercio como data URL. Si falla devuelve None."""
        try:
            datos = self.api.get(f"/api/Comercios/{id_comercio}/imagen")
        except ApiError as e:
            logger.warning(f"Error cargando imagen del comercio {id_comercio}: {e}")
            return None
        if isinstance(datos, dict):
            return normalizar_imagen(datos.get("foto"))
        return None


# EDICIÓN
def preparar_edicion(comercio: Comercio) -> dict:
    """Estado con el que se reenvía un comercio editado."""
    if es_rechazado(comercio):
        return {"estado": False, "motivo_rechazo": None}
    return {"estado": comercio.estado, "motivo_rechazo": None}


# FILTROS
def filtrar_aprobados(comercios: Iterable[Comercio]) -> List[Comercio]:
    return [c for c in comercios if es_aprobado(c)]


def filtrar_por_tipo(comercios: Iterable[Comercio], id_tipo_comercio: Optional[int]) -> List[Comercio]:
    comercios = list(comercios)
    if not id_tipo_comercio:
        return comercios
    return [c for c in comercios if c.id_tipo_comercio == id_tipo_comercio]


# UTILIDADES DE GEOLOCALIZACIÓN
def calcular_distancia(lat1: float, lon1: float, lat2: float, lon2: float) -> float:
    """Distancia en km (fórmula de Haversine)"""
    d_lat = math.radians(lat2 - lat1)
    d_lon = math.radians(lon2 - lon1)
    a = (
        math.sin(d_lat / 2) ** 2
        + math.cos(math.radians(lat1)) * math.cos(math.radians(lat2)) * math.sin(d_lon / 2) ** 2
    )
    return RADIO_TIERRA_KM * 2 * math.atan2(math.sqrt(a), math.sqrt(1 - a))


def validar_coordenadas(lat, lng) -> bool:
    if isinstance(lat, bool) or isinstance(lng, bool):
        return False
    if not isinstance(lat, (int, float)) or not isinstance(lng, (int, float)):
        return False
    if math.isnan(lat) or math.isnan(lng):
        return False
    return -90 <= lat <= 90 and -180 <= lng <= 180


def ordenar_por_distancia(comercios: Iterable, lat: float, lng: float) -> list:
    """
    Ordena por distancia a (lat, lng) y completa el campo `distancia`.
    Los lugares sin coordenadas válidas quedan al final.
    """
    con_distancia = []
    for c in comercios:
        if validar_coordenadas(c.latitud, c.longitud):
            distancia = calcular_distancia(lat, lng, c.latitud, c.longitud)
        else:
            distancia = None
        if hasattr(c, "distancia"):
            c.distancia = distancia
        con_distancia.append((distancia, c))
    con_distancia.sort(key=lambda par: (par[0] is None, par[0] or 0))
    return [c for _, c in con_distancia]


# ESTADÍSTICAS
def estadisticas_comercios(comercios: Iterable[Comercio]) -> EstadisticasComercios:
    conteo = contar_por_estado(comercios)
    return EstadisticasComercios(
        total=conteo["total"],
        aprobados=conteo[Estado.APROBADO.value],
        pendientes=conteo[Estado.PENDIENTE.value],
        rechazados=conteo[Estado.RECHAZADO.value],
    )
