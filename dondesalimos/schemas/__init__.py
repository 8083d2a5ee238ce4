from .auth import *
from .usuario import *
from .comercio import *
from .tipo_comercio import *
from .rol_usuario import *
from .reserva import *
from .resenia import *
from .publicidad import *
from .estadisticas import *

__all__ = [
    # Auth
    "GoogleLogin", "GoogleRegistro", "Sesion", "ResultadoLogin", "TokenData",

    # Usuario
    "UsuarioBase", "UsuarioUpdate", "PerfilUpdate", "UsuarioResponse", "CambioEstadoUsuario",
    "SesionVerificada", "EstadisticasUsuarios", "Permiso",

    # Comercio
    "ComercioBase", "Comercio", "ComercioCreate", "ComercioResponse", "LugarGoogle",
    "EstadisticasComercios", "ValidacionCuit", "ComercioDetalle",

    # Tipo de comercio / Rol
    "TipoComercioBase", "TipoComercioCreate", "TipoComercioUpdate", "TipoComercioResponse",
    "RolUsuarioBase", "RolUsuarioCreate", "RolUsuarioUpdate", "RolUsuarioResponse",

    # Reserva
    "ReservaBase", "ReservaCreate", "Reserva", "ReservaResponse", "RechazoRequest",
    "NoAsistioRequest", "EstadisticasReservas",

    # Reseña
    "Resenia", "ReseniaCreate", "ReseniaResponse", "ResultadoElegibilidad", "EstadisticasResenias",
    "ReseniasComercio",

    # Publicidad
    "EstadoPublicidad", "Publicidad", "PublicidadCreate", "PublicidadResponse",
    "EstadisticasPublicidades",

    # Estadísticas
    "Actividad", "Alerta", "EstadisticasAdmin",
]
