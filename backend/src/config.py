import logging
from typing import List, Optional

from dotenv import load_dotenv
from pydantic_settings import BaseSettings

logger = logging.getLogger(__name__)

# Charger les variables d'environnement AVANT de définir la classe Settings
load_dotenv()

DEFAULT_JWT_SECRET_KEY = "remplacer_par_une_vraie_cle_secrete_forte"

# Classe de configuration utilisant Pydantic BaseSettings
class Settings(BaseSettings):
    # --- Base de Données ---
    # DATABASE_URL prend le pas sur les composants POSTGRES_* s'il est défini
    DATABASE_URL: Optional[str] = None
    POSTGRES_DB: str = "userbridge"
    POSTGRES_USER: str = "userbridge"
    POSTGRES_PASSWORD: str = "userbridge"
    POSTGRES_HOST: str = "localhost"
    POSTGRES_PORT: str = "5432"
    DB_ECHO_LOG: bool = False
    DB_AUTO_CREATE: bool = False

    # --- JWT ---
    JWT_SECRET_KEY: str = DEFAULT_JWT_SECRET_KEY
    JWT_ALGORITHM: str = "HS256"
    ACCESS_TOKEN_EXPIRE_MINUTES: int = 60

    # --- Authentification ---
    LOGIN_PATH: str = "/login"

    # --- CORS ---
    CORS_ORIGINS: List[str] = [
        "http://localhost:3000",
        "http://localhost:5173",
        "http://127.0.0.1:5173",
    ]

    # --- Logging ---
    LOG_LEVEL: str = "INFO"

    class Config:
        env_file = ".env"
        env_file_encoding = 'utf-8'
        extra = 'ignore' # Ignorer les variables d'env non définies dans le modèle

    @property
    def database_url(self) -> str:
        if self.DATABASE_URL:
            return self.DATABASE_URL
        return (
            f"postgresql+asyncpg://{self.POSTGRES_USER}:{self.POSTGRES_PASSWORD}@"
            f"{self.POSTGRES_HOST}:{self.POSTGRES_PORT}/{self.POSTGRES_DB}"
        )

# Instancier la classe de configuration
settings = Settings()

if settings.JWT_SECRET_KEY == DEFAULT_JWT_SECRET_KEY:
    logger.warning("La variable JWT_SECRET_KEY utilise la valeur par défaut. Veuillez définir une clé secrète forte.")

logger.info(f"Configuration chargée: DB={settings.POSTGRES_DB}@{settings.POSTGRES_HOST}, JWT alg={settings.JWT_ALGORITHM}")
