import logging
from fastapi import APIRouter, Depends, HTTPException, status
from typing import List

from dondesalimos.core.exceptions import NotFoundException
from dondesalimos.core.security import require_admin
from dondesalimos.schemas.auth import TokenData
from dondesalimos.schemas.comercio import ComercioResponse
from dondesalimos.schemas.estadisticas import EstadisticasAdmin
from dondesalimos.schemas.publicidad import PublicidadResponse
from dondesalimos.schemas.resenia import ReseniaResponse
from dondesalimos.schemas.reserva import RechazoRequest, ReservaResponse
from dondesalimos.schemas.rol_usuario import RolUsuarioCreate, RolUsuarioResponse, RolUsuarioUpdate
from dondesalimos.schemas.tipo_comercio import TipoComercioCreate, TipoComercioResponse, TipoComercioUpdate
from dondesalimos.schemas.usuario import CambioEstadoUsuario, UsuarioResponse
from dondesalimos.services import roles_usuario_service, tipos_comercio_service
from dondesalimos.services.admin_stats_service import AdminStatsService, get_admin_stats_service
from dondesalimos.services.comercios_service import ComerciosService, get_comercios_service
from dondesalimos.services.publicidades_service import PublicidadesService, a_response, get_publicidades_service
from dondesalimos.services.resenias_service import ReseniasService, get_resenias_service
from dondesalimos.services.reservas_service import ReservasService, get_reservas_service
from dondesalimos.services.roles_usuario_service import RolesUsuarioService, get_roles_usuario_service
from dondesalimos.services.tipos_comercio_service import TiposComercioService, get_tipos_comercio_service
from dondesalimos.services.usuarios_service import UsuariosService, get_usuarios_service, puede_eliminar

logger = logging.getLogger(__name__)

router = APIRouter(dependencies=[Depends(require_admin)])

def _bad_request(mensaje: str):
    return HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=mensaje)

@router.get("/estadisticas", response_model=EstadisticasAdmin)
def estadisticas(stats: AdminStatsService = Depends(get_admin_stats_service)):
    return stats.estadisticas_detalladas()

# COMERCIOS
def _listar_comercios(comercios: ComerciosService) -> List[ComercioResponse]:
    return [ComercioResponse.desde_comercio(c) for c in comercios.listar_admin()]

def _comercio_o_404(comercios: ComerciosService, id_comercio: int):
    comercio = comercios.obtener(id_comercio)
    if not comercio:
        raise NotFoundException("Comercio no encontrado")
    return comercio

@router.get("/comercios", response_model=List[ComercioResponse])
def listar_comercios(comercios: ComerciosService = Depends(get_comercios_service)):
    return _listar_comercios(comercios)

@router.post("/comercios/{id_comercio}/aprobar", response_model=List[ComercioResponse])
def aprobar_comercio(id_comercio: int, comercios: ComerciosService = Depends(get_comercios_service)):
    comercios.aprobar(_comercio_o_404(comercios, id_comercio))
    return _listar_comercios(comercios)

@router.post("/comercios/{id_comercio}/rechazar", response_model=List[ComercioResponse])
def rechazar_comercio(
    id_comercio: int,
    datos: RechazoRequest,
    comercios: ComerciosService = Depends(get_comercios_service),
):
    comercios.rechazar(_comercio_o_404(comercios, id_comercio), datos.motivo)
    return _listar_comercios(comercios)

@router.delete("/comercios/{id_comercio}", response_model=List[ComercioResponse])
def eliminar_comercio(id_comercio: int, comercios: ComerciosService = Depends(get_comercios_service)):
    comercios.eliminar(id_comercio)
    return _listar_comercios(comercios)

# RESEÑAS
def _listar_resenias(resenias: ReseniasService) -> List[ReseniaResponse]:
    return [ReseniaResponse.desde_resenia(r) for r in resenias.listar()]

def _resenia_o_404(resenias: ReseniasService, id_resenia: int):
    resenia = resenias.obtener(id_resenia)
    if not resenia:
        raise NotFoundException("Reseña no encontrada")
    return resenia

@router.get("/resenias", response_model=List[ReseniaResponse])
def listar_resenias(resenias: ReseniasService = Depends(get_resenias_service)):
    return _listar_resenias(resenias)

@router.post("/resenias/{id_resenia}/aprobar", response_model=List[ReseniaResponse])
def aprobar_resenia(id_resenia: int, resenias: ReseniasService = Depends(get_resenias_service)):
    resenias.aprobar(_resenia_o_404(resenias, id_resenia))
    return _listar_resenias(resenias)

@router.post("/resenias/{id_resenia}/rechazar", response_model=List[ReseniaResponse])
def rechazar_resenia(
    id_resenia: int,
    datos: RechazoRequest,
    resenias: ReseniasService = Depends(get_resenias_service),
):
    resenias.rechazar(_resenia_o_404(resenias, id_resenia), datos.motivo)
    return _listar_resenias(resenias)

@router.delete("/resenias/{id_resenia}", response_model=List[ReseniaResponse])
def eliminar_resenia(id_resenia: int, resenias: ReseniasService = Depends(get_resenias_service)):
    resenias.eliminar(id_resenia)
    return _listar_resenias(resenias)

# RESERVAS
@router.get("/reservas", response_model=List[ReservaResponse])
def listar_reservas(reservas: ReservasService = Depends(get_reservas_service)):
    return [ReservaResponse.desde_reserva(r) for r in reservas.listar()]

@router.delete("/reservas/{id_reserva}", response_model=List[ReservaResponse])
def eliminar_reserva(id_reserva: int, reservas: ReservasService = Depends(get_reservas_service)):
    reservas.eliminar(id_reserva)
    return [ReservaResponse.desde_reserva(r) for r in reservas.listar()]

# PUBLICIDADES
def _listar_publicidades(publicidades: PublicidadesService) -> List[PublicidadResponse]:
    return [a_response(p) for p in publicidades.listar()]

def _publicidad_o_404(publicidades: PublicidadesService, id_publicidad: int):
    publicidad = publicidades.obtener(id_publicidad)
    if not publicidad:
        raise NotFoundException("Publicidad no encontrada")
    return publicidad

@router.get("/publicidades", response_model=List[PublicidadResponse])
def listar_publicidades(publicidades: PublicidadesService = Depends(get_publicidades_service)):
    return _listar_publicidades(publicidades)

@router.post("/publicidades/{id_publicidad}/aprobar", response_model=List[PublicidadResponse])
def aprobar_publicidad(id_publicidad: int, publicidades: PublicidadesService = Depends(get_publicidades_service)):
    publicidades.aprobar(_publicidad_o_404(publicidades, id_publicidad))
    return _listar_publicidades(publicidades)

@router.post("/publicidades/{id_publicidad}/rechazar", response_model=List[PublicidadResponse])
def rechazar_publicidad(
    id_publicidad: int,
    datos: RechazoRequest,
    publicidades: PublicidadesService = Depends(get_publicidades_service),
):
    publicidades.rechazar(_publicidad_o_404(publicidades, id_publicidad), datos.motivo)
    return _listar_publicidades(publicidades)

@router.delete("/publicidades/{id_publicidad}", response_model=List[PublicidadResponse])
def eliminar_publicidad(id_publicidad: int, publicidades: PublicidadesService = Depends(get_publicidades_service)):
    publicidades.eliminar(id_publicidad)
    return _listar_publicidades(publicidades)

# USUARIOS
@router.get("/usuarios", response_model=List[UsuarioResponse])
def listar_usuarios(usuarios: UsuariosService = Depends(get_usuarios_service)):
    return usuarios.listar()

@router.put("/usuarios/{id_usuario}/estado", response_model=List[UsuarioResponse])
def cambiar_estado_usuario(
    id_usuario: int,
    datos: CambioEstadoUsuario,
    usuarios: UsuariosService = Depends(get_usuarios_service),
):
    usuarios.cambiar_estado(id_usuario, datos.estado)
    return usuarios.listar()

@router.delete("/usuarios/{id_usuario}", response_model=List[UsuarioResponse])
def eliminar_usuario(
    id_usuario: int,
    admin: TokenData = Depends(require_admin),
    usuarios: UsuariosService = Depends(get_usuarios_service),
):
    usuario = usuarios.obtener(id_usuario)
    if not usuario:
        raise NotFoundException("Usuario no encontrado")

    permiso = puede_eliminar(usuario, admin.id_usuario)
    if not permiso.puede:
        raise _bad_request(permiso.razon)

    usuarios.eliminar(id_usuario)
    return usuarios.listar()

# TIPOS DE COMERCIO
@router.get("/tipos-comercio", response_model=List[TipoComercioResponse])
def listar_tipos(tipos: TiposComercioService = Depends(get_tipos_comercio_service)):
    return tipos.listar_o_defecto()

@router.post("/tipos-comercio", response_model=List[TipoComercioResponse], status_code=status.HTTP_201_CREATED)
def crear_tipo(datos: TipoComercioCreate, tipos: TiposComercioService = Depends(get_tipos_comercio_service)):
    tipos.crear(datos)
    return tipos.listar()

@router.put("/tipos-comercio/{id_tipo}", response_model=List[TipoComercioResponse])
def actualizar_tipo(
    id_tipo: int,
    datos: TipoComercioUpdate,
    tipos: TiposComercioService = Depends(get_tipos_comercio_service),
):
    tipos.actualizar(id_tipo, datos)
    return tipos.listar()

@router.delete("/tipos-comercio/{id_tipo}", response_model=List[TipoComercioResponse])
def eliminar_tipo(
    id_tipo: int,
    tipos: TiposComercioService = Depends(get_tipos_comercio_service),
    comercios: ComerciosService = Depends(get_comercios_service),
):
    if tipos_comercio_service.en_uso(id_tipo, comercios.listar_admin()):
        raise _bad_request("No se puede eliminar un tipo de comercio en uso")
    tipos.eliminar(id_tipo)
    return tipos.listar()

# ROLES DE USUARIO
@router.get("/roles", response_model=List[RolUsuarioResponse])
def listar_roles(roles: RolesUsuarioService = Depends(get_roles_usuario_service)):
    return roles.listar()

@router.post("/roles", response_model=List[RolUsuarioResponse], status_code=status.HTTP_201_CREATED)
def crear_rol(datos: RolUsuarioCreate, roles: RolesUsuarioService = Depends(get_roles_usuario_service)):
    roles.crear(datos)
    return roles.listar()

@router.put("/roles/{id_rol}", response_model=List[RolUsuarioResponse])
def actualizar_rol(
    id_rol: int,
    datos: RolUsuarioUpdate,
    roles: RolesUsuarioService = Depends(get_roles_usuario_service),
):
    roles.actualizar(id_rol, datos)
    return roles.listar()

@router.delete("/roles/{id_rol}", response_model=List[RolUsuarioResponse])
def eliminar_rol(
    id_rol: int,
    roles: RolesUsuarioService = Depends(get_roles_usuario_service),
    usuarios: UsuariosService = Depends(get_usuarios_service),
):
    if roles_usuario_service.es_rol_sistema(id_rol):
        raise _bad_request("No se puede eliminar un rol del sistema")
    if roles_usuario_service.en_uso(id_rol, usuarios.listar()):
        raise _bad_request("No se puede eliminar un rol asignado a usuarios")
    roles.eliminar(id_rol)
    return roles.listar()
