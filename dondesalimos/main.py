# En main.py
import logging
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from dondesalimos.config import settings
from dondesalimos.core.exceptions import ApiError
from dondesalimos.routers import admin, auth, comercios, publicidades, resenias, reservas, usuarios

logging.basicConfig(
    level=settings.LOG_LEVEL,
    format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
)
logger = logging.getLogger(__name__)

app = FastAPI(
    title="DondeSalimos",
    description="Backend-for-frontend de DondeSalimos: bares y boliches, reservas y reseñas",
    version="1.0.0",
    docs_url="/docs",
    redoc_url="/redoc"
)

# Configuración CORS
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.allowed_origins,
    allow_credentials=True,
    allow_methods=["GET", "POST", "PUT", "DELETE", "PATCH", "OPTIONS"],
    allow_headers=[
        "Authorization",
        "Content-Type",
        "Accept",
        "Origin",
        "X-Requested-With",
    ],
    expose_headers=["*"],
    max_age=600,
)

@app.exception_handler(ApiError)
async def api_error_handler(request: Request, exc: ApiError):
    # Sin respuesta de la API remota
    status_code = exc.status_code or 503
    if status_code >= 500:
        logger.error(f"{request.method} {request.url.path}: {exc.mensaje}")
    return JSONResponse(status_code=status_code, content={"detail": exc.mensaje})

# Routers
app.include_router(auth.router, prefix="/api/v1/auth", tags=["Autenticación"])
app.include_router(comercios.router, prefix="/api/v1/comercios", tags=["Comercios"])
app.include_router(reservas.router, prefix="/api/v1/reservas", tags=["Reservas"])
app.include_router(resenias.router, prefix="/api/v1/resenias", tags=["Reseñas"])
app.include_router(publicidades.router, prefix="/api/v1/publicidades", tags=["Publicidades"])
app.include_router(usuarios.router, prefix="/api/v1/usuarios", tags=["Usuarios"])
app.include_router(admin.router, prefix="/api/v1/admin", tags=["Administración"])

@app.get("/")
def read_root():
    return {
        "mensaje": "DondeSalimos API funcionando correctamente",
        "version": "1.0.0"
    }

@app.get("/health")
def health_check():
    return {
        "status": "healthy",
        "service": "DondeSalimos API",
        "api_remota": settings.API_BASE_URL,
    }
