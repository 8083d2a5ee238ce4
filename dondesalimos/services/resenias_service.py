# dondesalimos/services/resenias_service.py

import logging
from datetime import datetime
from typing import Iterable, List, Optional

from fastapi import Depends

from dondesalimos.core.api import ApiClient
from dondesalimos.core.estados import es_aprobado
from dondesalimos.core.security import get_api_client
from dondesalimos.schemas.resenia import EstadisticasResenias, Resenia, ReseniaCreate

logger = logging.getLogger(__name__)


def get_resenias_service(api: ApiClient = Depends(get_api_client)):
    return ReseniasService(api)


def _a_resenias(datos) -> List[Resenia]:
    return [Resenia(**r) for r in (datos or [])]


class ReseniasService:
    def __init__(self, api: ApiClient):
        self.api = api

    def listar(self) -> List[Resenia]:
        return _a_resenias(self.api.get("/api/resenias/listado"))

    def listar_por_comercio(self, id_comercio: int) -> List[Resenia]:
        """Solo reseñas aprobadas (las que se muestran públicamente)."""
        return [r for r in _a_resenias(self.api.get(f"/api/Resenias/buscarIdComercio/{id_comercio}")) if es_aprobado(r)]

    def listar_por_nombre_comercio(self, nombre_comercio: str) -> List[Resenia]:
        resenias = _a_resenias(self.api.get(f"/api/Resenias/buscarNombreComercio/{nombre_comercio}"))
        return [r for r in resenias if es_aprobado(r)]

    def obtener(self, id_resenia: int) -> Optional[Resenia]:
        datos = self.api.get(f"/api/Resenias/buscarIdResenia/{id_resenia}")
        return Resenia(**datos) if datos else None

    def crear(self, id_usuario: int, datos: ReseniaCreate, ahora: Optional[datetime] = None):
        # Las reseñas nuevas quedan pendientes de aprobación
        payload = {
            "id_usuario": id_usuario,
            "id_comercio": datos.id_comercio,
            "calificacion": datos.puntuacion,
            "comentario": datos.comentario.strip(),
            "estado": False,
            "fecha_creacion": (ahora or datetime.now()).isoformat(),
        }
        respuesta = self.api.post("/api/Resenias/crear", payload)
        logger.info(f"Reseña creada por el usuario {id_usuario} para el comercio {datos.id_comercio}")
        return respuesta

    def actualizar(self, resenia: Resenia, **cambios):
        payload = {
            "id_resenia": resenia.id_resenia,
            "id_usuario": resenia.id_usuario,
            "id_comercio": resenia.id_comercio,
            "calificacion": resenia.puntuacion,
            "comentario": resenia.comentario,
            "estado": resenia.estado,
            "fecha_creacion": resenia.fecha_creacion.isoformat() if resenia.fecha_creacion else None,
            "motivo_rechazo": resenia.motivo_rechazo,
        }
        payload.update(cambios)
        return self.api.put(f"/api/Resenias/actualizar/{resenia.id_resenia}", payload)

    def eliminar(self, id_resenia: int):
        logger.info(f"Eliminando reseña {id_resenia}")
        return self.api.delete(f"/api/Resenias/eliminar/{id_resenia}")

    def aprobar(self, resenia: Resenia):
        return self.actualizar(resenia, estado=True, motivo_rechazo=None)

    def rechazar(self, resenia: Resenia, motivo: str):
        return self.actualizar(resenia, estado=False, motivo_rechazo=motivo)


def promedio_puntuacion(resenias: Iterable[Resenia]) -> float:
    puntuaciones = [r.puntuacion for r in resenias if r.puntuacion]
    if not puntuaciones:
        return 0
    return round(sum(puntuaciones) / len(puntuaciones), 1)


def estadisticas_resenias(resenias: Iterable[Resenia]) -> EstadisticasResenias:
    resenias = list(resenias)
    por_estrellas = {1: 0, 2: 0, 3: 0, 4: 0, 5: 0}
    for r in resenias:
        if r.puntuacion in por_estrellas:
            por_estrellas[r.puntuacion] += 1
    return EstadisticasResenias(
        total=len(resenias),
        promedio=promedio_puntuacion(resenias),
        por_estrellas=por_estrellas,
    )


def validar_nueva_resenia(puntuacion: Optional[int], comentario: Optional[str]) -> Optional[str]:
    if not puntuacion:
        return "Seleccioná una calificación"
    if not 1 <= puntuacion <= 5:
        return "La calificación debe estar entre 1 y 5"
    comentario = (comentario or "").strip()
    if not comentario:
        return "Escribí un comentario"
    if len(comentario) < 10:
        return "El comentario debe tener al menos 10 caracteres"
    return None
