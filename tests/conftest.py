import copy
from datetime import datetime, timedelta, timezone

import pytest
from jose import jwt

from dondesalimos.core.constants import ROL_ADMINISTRADOR, ROL_USUARIO_COMERCIO, ROL_USUARIO_COMUN
from dondesalimos.core.exceptions import NoEncontradoError


class FakeApiClient:
    """
    Reemplazo de ApiClient para los tests de servicios y routers.
    `respuestas` mapea (método, url) a un valor, una excepción o un callable(data, params).
    """

    def __init__(self, respuestas=None, token=None):
        self.respuestas = dict(respuestas or {})
        self.llamadas = []
        self.token = token

    def responder(self, metodo, url, valor):
        self.respuestas[(metodo, url)] = valor

    def _resolver(self, metodo, url, data=None, params=None):
        self.llamadas.append((metodo, url, data, params))
        respuesta = self.respuestas.get((metodo, url))
        if isinstance(respuesta, Exception):
            raise respuesta
        if callable(respuesta):
            return respuesta(data, params)
        return copy.deepcopy(respuesta)

    def llamadas_a(self, metodo, url=None):
        return [l for l in self.llamadas if l[0] == metodo and (url is None or l[1] == url)]

    def get(self, url, params=None, none_si_404=True):
        try:
            return self._resolver("GET", url, params=params)
        except NoEncontradoError:
            if none_si_404:
                return None
            raise

    def post(self, url, data=None):
        return self._resolver("POST", url, data if data is not None else {})

    def put(self, url, data=None):
        return self._resolver("PUT", url, data)

    def patch(self, url, data=None):
        return self._resolver("PATCH", url, data if data is not None else {})

    def delete(self, url):
        return self._resolver("DELETE", url)

    def close(self):
        pass


def crear_token(id_usuario=5, rol=ROL_USUARIO_COMUN, expira_en=timedelta(hours=1), **claims):
    payload = {
        "ID_Usuario": str(id_usuario),
        "ID_RolUsuario": str(rol),
        "exp": int((datetime.now(timezone.utc) + expira_en).timestamp()),
        **claims,
    }
    return jwt.encode(payload, "secret", algorithm="HS256")


def auth_header(id_usuario=5, rol=ROL_USUARIO_COMUN):
    return {"Authorization": f"Bearer {crear_token(id_usuario, rol)}"}


@pytest.fixture
def api():
    return FakeApiClient()


@pytest.fixture
def ahora():
    return datetime(2025, 6, 15, 21, 0, 0)


@pytest.fixture
def client(api):
    from fastapi.testclient import TestClient

    from dondesalimos.core.security import get_api_client
    from dondesalimos.main import app

    app.dependency_overrides[get_api_client] = lambda: api
    with TestClient(app) as c:
        yield c
    app.dependency_overrides.clear()


@pytest.fixture
def headers_usuario():
    return auth_header(5, ROL_USUARIO_COMUN)


@pytest.fixture
def headers_comercio():
    return auth_header(7, ROL_USUARIO_COMERCIO)


@pytest.fixture
def headers_admin():
    return auth_header(1, ROL_ADMINISTRADOR)


@pytest.fixture
def crear_jwt():
    return crear_token
