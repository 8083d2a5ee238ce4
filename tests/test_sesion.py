from datetime import timedelta

import pytest

from dondesalimos.core.constants import STORAGE_GOOGLE_TOKEN, STORAGE_JWT_TOKEN, STORAGE_USER_DATA
from dondesalimos.core.exceptions import ApiError, ConexionError, ServidorError, ValidacionError
from dondesalimos.core.sesion import MENSAJE_CONEXION_LOGIN, SesionStore
from dondesalimos.core.storage import AlmacenamientoLocal

URL_LOGIN = "/api/Usuarios/iniciarSesionConGoogle"
URL_REGISTRO = "/api/Usuarios/registrarConGoogle"


@pytest.fixture
def almacenamiento(tmp_path):
    return AlmacenamientoLocal(str(tmp_path / "storage.json"))


@pytest.fixture
def sesion(almacenamiento, api):
    return SesionStore(almacenamiento, api)


def test_almacenamiento_persiste_en_disco(tmp_path):
    ruta = str(tmp_path / "sub" / "storage.json")
    AlmacenamientoLocal(ruta).jwt_token = "abc"
    assert AlmacenamientoLocal(ruta).jwt_token == "abc"


def test_almacenamiento_corrupto_empieza_vacio(tmp_path):
    ruta = tmp_path / "storage.json"
    ruta.write_text("{no es json")
    assert AlmacenamientoLocal(str(ruta)).usuario is None


def test_sesion_vacia(sesion):
    assert not sesion.is_authenticated
    assert not sesion.check_auth()
    assert not sesion.is_admin


def test_restaura_sesion_guardada(almacenamiento, api):
    almacenamiento.jwt_token = "jwt"
    almacenamiento.usuario = {"id_usuario": 5, "id_rol_usuario": 2, "estado": True}

    sesion = SesionStore(almacenamiento, api)

    assert sesion.is_authenticated
    assert sesion.is_admin
    assert sesion.is_approved
    assert not sesion.is_bar_owner


def test_usuario_sin_token_no_se_restaura(almacenamiento, api):
    almacenamiento.usuario = {"id_usuario": 5}
    assert not SesionStore(almacenamiento, api).is_authenticated


def test_login_exitoso_guarda_sesion(sesion, api, almacenamiento):
    api.responder("POST", URL_LOGIN, {"jwt_token": "jwt", "usuario": {"id_usuario": 5, "id_rol_usuario": 3}})

    resultado = sesion.login_con_google("google")

    assert resultado.success
    assert almacenamiento.jwt_token == "jwt"
    assert almacenamiento.usuario["id_usuario"] == 5
    assert sesion.is_bar_owner
    assert sesion.check_auth()


def test_login_usuario_no_registrado(sesion, api):
    api.responder("POST", URL_LOGIN, ValidacionError("Usuario no registrado"))

    resultado = sesion.login_con_google("google")

    assert not resultado.success
    assert resultado.needs_registration
    assert not sesion.is_authenticated


def test_login_sin_red(sesion, api):
    api.responder("POST", URL_LOGIN, ConexionError())
    resultado = sesion.login_con_google("google")
    assert not resultado.needs_registration
    assert resultado.message == MENSAJE_CONEXION_LOGIN


def test_login_sin_usuario_en_respuesta(sesion, api):
    api.responder("POST", URL_LOGIN, {"jwt_token": "jwt"})
    resultado = sesion.login_con_google("google")
    assert not resultado.success
    assert not sesion.is_authenticated


def test_registro_ya_registrado(sesion, api):
    api.responder("POST", URL_REGISTRO, ApiError("Ya existe", 409, {"mensaje": "El usuario ya existe"}))

    resultado = sesion.registrar_con_google("google")

    assert resultado.already_registered
    assert resultado.message == "El usuario ya existe"


def test_registro_error_de_servidor_se_propaga(sesion, api):
    api.responder("POST", URL_REGISTRO, ServidorError())
    with pytest.raises(ServidorError):
        sesion.registrar_con_google("google")


def test_registro_sin_red(sesion, api):
    api.responder("POST", URL_REGISTRO, ConexionError())
    with pytest.raises(ConexionError) as e:
        sesion.registrar_con_google("google")
    assert e.value.mensaje == MENSAJE_CONEXION_LOGIN


def test_logout_limpia_todo(sesion, almacenamiento):
    almacenamiento.set(STORAGE_GOOGLE_TOKEN, "g")
    sesion._guardar_sesion("jwt", {"id_usuario": 5})

    sesion.logout()

    for clave in (STORAGE_JWT_TOKEN, STORAGE_USER_DATA, STORAGE_GOOGLE_TOKEN):
        assert almacenamiento.get(clave) is None
    assert not sesion.is_authenticated


def test_401_de_la_api_cierra_la_sesion(almacenamiento):
    sesion = SesionStore(almacenamiento)
    sesion._guardar_sesion("jwt", {"id_usuario": 5})

    sesion.api.on_unauthorized()

    assert not sesion.is_authenticated
    assert almacenamiento.jwt_token is None


def test_api_por_defecto_lee_el_token_guardado(almacenamiento):
    sesion = SesionStore(almacenamiento)
    assert sesion.api.token is None
    almacenamiento.jwt_token = "nuevo"
    assert sesion.api.token == "nuevo"


def test_token_expirado(sesion, almacenamiento, crear_jwt):
    assert sesion.token_expirado()
    almacenamiento.jwt_token = crear_jwt(expira_en=timedelta(minutes=5))
    assert not sesion.token_expirado()
    almacenamiento.jwt_token = crear_jwt(expira_en=timedelta(minutes=-5))
    assert sesion.token_expirado()
