import logging
from fastapi import APIRouter, Depends, Response, status

from dondesalimos.core.exceptions import NotFoundException
from dondesalimos.core.security import get_usuario_actual
from dondesalimos.schemas.auth import TokenData
from dondesalimos.schemas.usuario import PerfilUpdate, UsuarioResponse
from dondesalimos.services.usuarios_service import UsuariosService, get_usuarios_service

logger = logging.getLogger(__name__)

router = APIRouter()

def _usuario_o_404(usuarios: UsuariosService, id_usuario: int) -> UsuarioResponse:
    usuario = usuarios.obtener(id_usuario)
    if not usuario:
        raise NotFoundException("Usuario no encontrado")
    return usuario

@router.get("/yo", response_model=UsuarioResponse)
def mi_perfil(
    usuario: TokenData = Depends(get_usuario_actual),
    usuarios: UsuariosService = Depends(get_usuarios_service),
):
    return _usuario_o_404(usuarios, usuario.id_usuario)

@router.put("/yo", response_model=UsuarioResponse)
def actualizar_perfil(
    datos: PerfilUpdate,
    usuario: TokenData = Depends(get_usuario_actual),
    usuarios: UsuariosService = Depends(get_usuarios_service),
):
    actual = _usuario_o_404(usuarios, usuario.id_usuario)
    usuarios.actualizar_perfil(actual, datos)
    return _usuario_o_404(usuarios, usuario.id_usuario)

@router.delete("/yo", status_code=status.HTTP_204_NO_CONTENT)
def eliminar_cuenta(
    usuario: TokenData = Depends(get_usuario_actual),
    usuarios: UsuariosService = Depends(get_usuarios_service),
):
    """Elimina la cuenta del usuario con sus reservas, reseñas y comercios."""
    usuarios.eliminar(usuario.id_usuario)
    logger.info(f"El usuario {usuario.id_usuario} eliminó su cuenta")
    return Response(status_code=status.HTTP_204_NO_CONTENT)
