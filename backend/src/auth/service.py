"""
Service d'authentification pour l'API.

Contient la logique métier pour:
- L'authentification des utilisateurs (nom d'utilisateur ou email + mot de passe)
- L'émission du token JWT et l'horodatage de la dernière connexion
- L'obtention de l'utilisateur à partir d'un token
"""
import logging
from datetime import datetime, timezone
from typing import Optional

from src.auth.exceptions import InactiveUserException, InvalidCredentialsException
from src.auth.security import create_user_token, get_token_user_id
from src.users.models import User
from src.users.service import UserService

logger = logging.getLogger(__name__)

class AuthService:
    """Service pour gérer l'authentification des utilisateurs."""

    def __init__(self, user_service: UserService):
        self.user_service = user_service

    async def authenticate_user(self, username: str, password: str) -> User:
        """
        Authentifie un utilisateur par nom d'utilisateur (ou email) et mot de passe.

        Raises:
            InvalidCredentialsException: utilisateur inconnu ou mot de passe incorrect
            InactiveUserException: compte désactivé
        """
        logger.debug(f"[AuthService] Tentative d'authentification pour: {username}")

        user = await self.user_service.find_user_by_username_or_email(username)
        if user is None:
            logger.warning(f"[AuthService] Utilisateur non trouvé: {username}")
            raise InvalidCredentialsException()

        if not self.user_service.check_password(user, password):
            logger.warning(f"[AuthService] Mot de passe incorrect pour: {username}")
            raise InvalidCredentialsException()

        if not user.enabled:
            logger.warning(f"[AuthService] Tentative de connexion d'un utilisateur inactif: {username}")
            raise InactiveUserException()

        logger.info(f"[AuthService] Authentification réussie pour: {username} (ID: {user.id})")
        return user

    async def login(self, username: str, password: str) -> str:
        """Authentifie l'utilisateur, enregistre la date de connexion et retourne son token."""
        user = await self.authenticate_user(username, password)
        user.last_login = datetime.now(timezone.utc)
        self.user_service.db.add(user)
        await self.user_service.db.commit()
        return create_user_token(user)

    async def get_user_from_token(self, token: str) -> Optional[User]:
        """Retourne l'utilisateur désigné par le token, ou None si token invalide ou utilisateur absent."""
        logger.debug("[AuthService] Récupération utilisateur depuis token")

        user_id = get_token_user_id(token)
        if user_id is None:
            logger.warning("[AuthService] Token invalide ou expiré")
            return None

        user = await self.user_service.get_user_by_id(user_id)
        if user is None:
            logger.warning(f"[AuthService] Utilisateur ID {user_id} du token non trouvé en base")
            return None

        logger.debug(f"[AuthService] Utilisateur récupéré depuis token: ID {user_id}")
        return user
