from dondesalimos.core.exceptions import ConexionError, NoAutenticadoError, NoEncontradoError
from dondesalimos.schemas.usuario import UsuarioResponse
from dondesalimos.services.usuarios_service import (
    MENSAJE_CUENTA_INEXISTENTE,
    MENSAJE_SESION_EXPIRADA,
    UsuariosService,
    estadisticas_usuarios,
    puede_desactivar,
    puede_eliminar,
)

URL_VERIFICAR = "/api/Usuarios/verificarSesion"


def test_verificar_sesion_valida(api):
    api.responder("GET", URL_VERIFICAR, {"sesion_valida": True, "usuario": {"id_usuario": 5, "estado": True}})

    resultado = UsuariosService(api).verificar_sesion()

    assert resultado.sesion_valida
    assert not resultado.requiere_logout
    assert resultado.usuario["id_usuario"] == 5


def test_verificar_sesion_401(api):
    api.responder("GET", URL_VERIFICAR, NoAutenticadoError())
    resultado = UsuariosService(api).verificar_sesion()
    assert not resultado.sesion_valida
    assert resultado.requiere_logout
    assert resultado.mensaje == MENSAJE_SESION_EXPIRADA


def test_verificar_sesion_404(api):
    api.responder("GET", URL_VERIFICAR, NoEncontradoError())
    resultado = UsuariosService(api).verificar_sesion()
    assert resultado.requiere_logout
    assert resultado.mensaje == MENSAJE_CUENTA_INEXISTENTE


def test_verificar_sesion_sin_red_se_asume_valida(api):
    api.responder("GET", URL_VERIFICAR, ConexionError())
    resultado = UsuariosService(api).verificar_sesion()
    assert resultado.sesion_valida
    assert not resultado.requiere_logout


def test_login_con_google(api):
    api.responder("POST", "/api/Usuarios/iniciarSesionConGoogle", {"jwt_token": "jwt", "usuario": {"id_usuario": 5}})

    sesion = UsuariosService(api).iniciar_sesion_con_google("google-token")

    assert sesion.jwt_token == "jwt"
    assert api.llamadas[0][2] == {"IdToken": "google-token"}


def test_registro_con_google_envia_rol(api):
    api.responder("POST", "/api/Usuarios/registrarConGoogle", {"jwt_token": "jwt", "usuario": {"id_usuario": 9}})
    UsuariosService(api).registrar_con_google("google-token", 3)
    assert api.llamadas[0][2] == {"IdToken": "google-token", "RolUsuario": 3}


def test_cambiar_estado(api):
    UsuariosService(api).cambiar_estado(5, False)
    assert api.llamadas[0][:3] == ("PUT", "/api/Usuarios/cambiarEstado/5", {"estado": False})


def test_estadisticas_usuarios():
    usuarios = [
        UsuarioResponse(id_usuario=1, id_rol_usuario=2, estado=True),
        UsuarioResponse(id_usuario=2, id_rol_usuario=16, estado=True),
        UsuarioResponse(id_usuario=3, id_rol_usuario=16, estado=False),
        UsuarioResponse(id_usuario=4, id_rol_usuario=3, estado=True),
    ]
    stats = estadisticas_usuarios(usuarios)
    assert (stats.total, stats.activos, stats.inactivos) == (4, 3, 1)
    assert stats.porcentaje_activos == 75
    assert stats.por_rol == {2: 1, 16: 2, 3: 1}


def test_permisos():
    activo = UsuarioResponse(id_usuario=5, estado=True)
    inactivo = UsuarioResponse(id_usuario=6, estado=False)

    assert puede_desactivar(activo).puede
    assert not puede_desactivar(inactivo).puede
    assert not puede_eliminar(activo, 5).puede
    assert puede_eliminar(activo, 1).puede
