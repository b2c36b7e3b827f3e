"""
Configuration pour le module de gestion des utilisateurs.
"""
from typing import List

from pydantic_settings import BaseSettings

class UserSettings(BaseSettings):
    """Paramètres de configuration pour la gestion des utilisateurs."""

    # Politique de mot de passe
    PASSWORD_MIN_LENGTH: int = 8
    # bcrypt ignore (ou refuse) au-delà de 72 octets
    PASSWORD_MAX_BYTES: int = 72

    # Contraintes sur le nom d'utilisateur et l'email
    USERNAME_MIN_LENGTH: int = 1
    USERNAME_MAX_LENGTH: int = 180
    EMAIL_MAX_LENGTH: int = 180

    # Réinitialisation du mot de passe
    RESETTING_TOKEN_TTL: int = 86400  # 24 heures, en secondes
    RESETTING_TOKEN_BYTES: int = 32

    # Inscription: rôles acceptés dans le champ "role" (liste vide = tout rôle ROLE_*)
    REGISTRATION_ALLOWED_ROLES: List[str] = ["ROLE_USER"]

    # Cache HTTP du profil
    PROFILE_CACHE_SHARED_MAX_AGE: int = 300  # 5 minutes

    class Config:
        env_prefix = "USER_"
        case_sensitive = True

# Instance des paramètres
settings = UserSettings()

def get_user_settings() -> UserSettings:
    """Dépendance FastAPI fournissant la configuration utilisateur."""
    return settings
