# dondesalimos/core/constants.py

# Roles de usuario (IDs del backend)
ROL_USUARIO_COMUN = 16
ROL_USUARIO_COMERCIO = 3
ROL_ADMINISTRADOR = 2

ROLES_SISTEMA = (ROL_ADMINISTRADOR, ROL_USUARIO_COMERCIO, ROL_USUARIO_COMUN)

DESCRIPCION_ROLES = {
    ROL_ADMINISTRADOR: "Administrador",
    ROL_USUARIO_COMERCIO: "Usuario Comercio",
    ROL_USUARIO_COMUN: "Usuario",
}

# Claves del almacenamiento local
STORAGE_JWT_TOKEN = "jwtToken"
STORAGE_USER_DATA = "userData"
STORAGE_GOOGLE_TOKEN = "googleToken"

STORAGE_KEYS = (STORAGE_JWT_TOKEN, STORAGE_USER_DATA, STORAGE_GOOGLE_TOKEN)

# Tipos de comercio de respaldo si falla la API
TIPO_BAR = 1
TIPO_BOLICHE = 2

# Valores por defecto
TIEMPO_TOLERANCIA_DEFAULT = "00:15:00"
TIPO_DOCUMENTO_DEFAULT = "CUIT"

MOTIVO_CANCELACION_USUARIO = "Cancelada por el usuario"
MOTIVO_NO_ASISTIO = "No se presentó"

MOTIVOS_RECHAZO = (
    "No hay disponibilidad para esa fecha",
    "Capacidad máxima alcanzada",
    "Horario no disponible",
    "Local cerrado ese día",
)

MOTIVOS_NO_ASISTIO = (
    MOTIVO_NO_ASISTIO,
    "Reserva vencida sin confirmación",
    "Cliente no respondió",
)

# Mensajes
MENSAJE_ERROR_GENERICO = "Ha ocurrido un error. Por favor, intenta nuevamente."
MENSAJE_ERROR_CONEXION = "Error de conexión. Verifica tu internet."
MENSAJE_ERROR_AUTENTICACION = "Sesión expirada. Por favor, inicia sesión nuevamente."
MENSAJE_SIN_PERMISOS = "No tienes permisos para realizar esta acción."
MENSAJE_ERROR_SERVIDOR = "Error en el servidor. Intenta nuevamente."
MENSAJE_DATOS_INVALIDOS = "Datos inválidos"
MENSAJE_NO_ENCONTRADO = "Recurso no encontrado"
