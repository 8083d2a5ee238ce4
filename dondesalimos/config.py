# dondesalimos/config.py

from pydantic_settings import BaseSettings
from typing import List

class Settings(BaseSettings):
    # API remota
    API_BASE_URL: str = "http://localhost:7283"
    REQUEST_TIMEOUT_SECONDS: float = 30.0

    # Google
    GOOGLE_CLIENT_ID: str = ""
    GOOGLE_MAPS_API_KEY: str = ""

    # Sesión local (equivalente a localStorage)
    STORAGE_PATH: str = ".dondesalimos/storage.json"
    SESSION_CHECK_INTERVAL_SECONDS: float = 300.0
    SESSION_INITIAL_DELAY_SECONDS: float = 2.0

    # Búsqueda
    SEARCH_DEBOUNCE_SECONDS: float = 0.5
    GOOGLE_PLACES_RADIUS: int = 10000

    # Reglas de negocio
    REVIEW_WINDOW_DAYS: int = 7
    REVIEW_COOLDOWN_DAYS: int = 7
    MAX_RESERVATION_DAYS_AHEAD: int = 30

    # Logging
    LOG_LEVEL: str = "INFO"

    # CORS
    FRONTEND_URLS: str = "http://localhost:5173,http://localhost:3000"

    @property
    def allowed_origins(self) -> List[str]:
        urls = self.FRONTEND_URLS.split(",")
        all_urls = []
        for url in urls:
            url = url.strip()
            if url:
                all_urls.append(url)
                # Añadir versión HTTPS si es HTTP
                if url.startswith("http://"):
                    all_urls.append(url.replace("http://", "https://"))
        return all_urls

    class Config:
        env_file = ".env"

settings = Settings()
