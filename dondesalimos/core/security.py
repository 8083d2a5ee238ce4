from datetime import datetime, timezone
from typing import Iterator, Optional
from jose import JWTError, jwt
from fastapi import Depends
from fastapi.security import OAuth2PasswordBearer

from dondesalimos.core.api import ApiClient
from dondesalimos.core.constants import ROL_ADMINISTRADOR, ROL_USUARIO_COMERCIO
from dondesalimos.core.exceptions import AuthException, ForbiddenException
from dondesalimos.schemas.auth import TokenData

oauth2_scheme = OAuth2PasswordBearer(tokenUrl="/api/v1/auth/google/login", auto_error=False)

# Claims que emite la API .NET para el id y el rol
CLAIMS_ID = (
    "ID_Usuario", "iD_Usuario", "id_usuario", "idUsuario",
    "nameid", "http://schemas.xmlsoap.org/ws/2005/05/identity/claims/nameidentifier", "sub",
)
CLAIMS_ROL = (
    "ID_RolUsuario", "iD_RolUsuario", "id_rol_usuario", "rol", "role",
    "http://schemas.microsoft.com/ws/2008/06/identity/claims/role",
)
CLAIMS_CORREO = ("email", "correo", "http://schemas.xmlsoap.org/ws/2005/05/identity/claims/emailaddress")


def leer_claims(token: str) -> dict:
    """
    Lee el payload del JWT sin verificar la firma.
    La firma la valida la API remota en cada request; acá solo se usan los datos.
    """
    return jwt.get_unverified_claims(token)


def _primer_entero(claims: dict, claves) -> Optional[int]:
    for clave in claves:
        valor = claims.get(clave)
        if valor is None:
            continue
        try:
            return int(valor)
        except (TypeError, ValueError):
            continue
    return None


def token_expirado(token: Optional[str], ahora: Optional[datetime] = None) -> bool:
    if not token:
        return True
    try:
        claims = leer_claims(token)
    except JWTError:
        return True
    exp = claims.get("exp")
    if exp is None:
        return False
    ahora = ahora or datetime.now(timezone.utc)
    return datetime.fromtimestamp(int(exp), tz=timezone.utc) <= ahora


def token_data_desde_jwt(token: str) -> Optional[TokenData]:
    try:
        claims = leer_claims(token)
    except JWTError:
        return None
    correo = next((claims[c] for c in CLAIMS_CORREO if claims.get(c)), None)
    return TokenData(
        id_usuario=_primer_entero(claims, CLAIMS_ID),
        rol=_primer_entero(claims, CLAIMS_ROL),
        correo=correo,
        token=token,
    )


def get_api_client(token: Optional[str] = Depends(oauth2_scheme)) -> Iterator[ApiClient]:
    api = ApiClient(token=token)
    try:
        yield api
    finally:
        api.close()


def get_usuario_actual(token: Optional[str] = Depends(oauth2_scheme)) -> TokenData:
    if not token:
        raise AuthException("No se pudieron validar las credenciales")
    if token_expirado(token):
        raise AuthException()

    datos = token_data_desde_jwt(token)
    if datos is None or datos.id_usuario is None:
        raise AuthException("No se pudieron validar las credenciales")
    return datos


def get_usuario_opcional(token: Optional[str] = Depends(oauth2_scheme)) -> Optional[TokenData]:
    """
    Versión opcional de get_usuario_actual: devuelve None si no hay token o es inválido.
    Útil para endpoints públicos que cambian si hay un usuario logueado.
    """
    if not token or token_expirado(token):
        return None
    return token_data_desde_jwt(token)


def require_admin(usuario: TokenData = Depends(get_usuario_actual)) -> TokenData:
    if usuario.rol != ROL_ADMINISTRADOR:
        raise ForbiddenException()
    return usuario


def require_comercio(usuario: TokenData = Depends(get_usuario_actual)) -> TokenData:
    if usuario.rol not in (ROL_USUARIO_COMERCIO, ROL_ADMINISTRADOR):
        raise ForbiddenException()
    return usuario
