from dondesalimos.core.exceptions import ConexionError
from dondesalimos.schemas.rol_usuario import RolUsuarioCreate, RolUsuarioResponse
from dondesalimos.schemas.tipo_comercio import TipoComercioResponse, TipoComercioUpdate
from dondesalimos.schemas.usuario import UsuarioResponse
from dondesalimos.services import roles_usuario_service, tipos_comercio_service
from dondesalimos.services.roles_usuario_service import RolesUsuarioService
from dondesalimos.services.tipos_comercio_service import TIPOS_POR_DEFECTO, TiposComercioService


def test_tipos_por_defecto_si_falla_la_api(api):
    api.responder("GET", "/api/tiposComercio/listado", ConexionError())
    assert TiposComercioService(api).listar_o_defecto() == TIPOS_POR_DEFECTO


def test_tipos_por_defecto_si_la_lista_esta_vacia(api):
    api.responder("GET", "/api/tiposComercio/listado", [])
    assert [t.descripcion for t in TiposComercioService(api).listar_o_defecto()] == ["Bar", "Boliche"]


def test_actualizar_tipo_solo_envia_cambios(api):
    TiposComercioService(api).actualizar(4, TipoComercioUpdate(estado=False))
    assert api.llamadas[0][:3] == ("PUT", "/api/tiposComercio/actualizar/4", {"id_tipo_comercio": 4, "estado": False})


def test_utilidades_de_tipos():
    tipos = [
        TipoComercioResponse(id_tipo_comercio=1, descripcion="Bar"),
        TipoComercioResponse(id_tipo_comercio=2, descripcion="Boliche", estado=False),
    ]
    assert tipos_comercio_service.construir_mapa(tipos) == {1: "Bar", 2: "Boliche"}
    assert tipos_comercio_service.filtrar_activos(tipos) == tipos[:1]
    assert tipos_comercio_service.en_uso(2, [TipoComercioResponse(id_tipo_comercio=2)])
    assert not tipos_comercio_service.en_uso(3, [])


def test_crear_rol(api):
    RolesUsuarioService(api).crear(RolUsuarioCreate(descripcion="Moderador"))
    assert api.llamadas[0][:3] == ("POST", "/api/rolesUsuario/crear", {"descripcion": "Moderador", "estado": True})


def test_utilidades_de_roles():
    assert roles_usuario_service.descripcion_rol(2) == "Administrador"
    assert roles_usuario_service.descripcion_rol(99) == "Desconocido"
    assert roles_usuario_service.es_rol_sistema(16)
    assert not roles_usuario_service.es_rol_sistema(20)

    roles = [RolUsuarioResponse(id_rol_usuario=20, descripcion="Moderador", estado=False)]
    assert roles_usuario_service.construir_mapa(roles) == {20: "Moderador"}
    assert roles_usuario_service.filtrar_activos(roles) == []
    assert roles_usuario_service.en_uso(20, [UsuarioResponse(id_usuario=1, id_rol_usuario=20)])
