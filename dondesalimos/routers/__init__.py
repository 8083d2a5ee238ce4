from .auth import router as auth_router
from .comercios import router as comercios_router
from .reservas import router as reservas_router
from .resenias import router as resenias_router
from .publicidades import router as publicidades_router
from .usuarios import router as usuarios_router
from .admin import router as admin_router

__all__ = [
    "auth_router", "comercios_router", "reservas_router", "resenias_router",
    "publicidades_router", "usuarios_router", "admin_router",
]
