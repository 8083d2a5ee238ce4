import logging
from fastapi import APIRouter, Depends

from dondesalimos.core.api import extraer_mensaje
from dondesalimos.core.exceptions import ApiError, AuthException, ValidacionError
from dondesalimos.core.security import get_usuario_actual
from dondesalimos.schemas.auth import GoogleLogin, GoogleRegistro, ResultadoLogin, TokenData
from dondesalimos.schemas.usuario import SesionVerificada
from dondesalimos.services.usuarios_service import UsuariosService, get_usuarios_service

logger = logging.getLogger(__name__)

router = APIRouter()

@router.post("/google/login", response_model=ResultadoLogin)
def login_google(datos: GoogleLogin, usuarios: UsuariosService = Depends(get_usuarios_service)):
    """
    Intercambia el ID token de Google por una sesión de la API.
    Si el usuario no existe (400) se indica que debe registrarse.
    """
    try:
        sesion = usuarios.iniciar_sesion_con_google(datos.id_token)
    except ValidacionError as e:
        return ResultadoLogin(success=False, needs_registration=True, message=e.mensaje)

    if not sesion.usuario:
        raise AuthException("No se recibió información del usuario")

    return ResultadoLogin(success=True, usuario=sesion.usuario, jwt_token=sesion.jwt_token)

@router.post("/google/registro", response_model=ResultadoLogin)
def registro_google(datos: GoogleRegistro, usuarios: UsuariosService = Depends(get_usuarios_service)):
    try:
        sesion = usuarios.registrar_con_google(datos.id_token, datos.rol_usuario)
    except ApiError as e:
        # Usuario ya registrado
        if e.status_code in (400, 409):
            return ResultadoLogin(success=False, already_registered=True, message=extraer_mensaje(e.datos, e.mensaje))
        raise

    if not sesion.usuario:
        raise AuthException("No se recibió información del usuario")

    logger.info(f"Usuario registrado con rol {datos.rol_usuario}")
    return ResultadoLogin(success=True, usuario=sesion.usuario, jwt_token=sesion.jwt_token)

@router.get("/sesion", response_model=SesionVerificada)
def verificar_sesion(
    usuario: TokenData = Depends(get_usuario_actual),
    usuarios: UsuariosService = Depends(get_usuarios_service),
):
    return usuarios.verificar_sesion()
