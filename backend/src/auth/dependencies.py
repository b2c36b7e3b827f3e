"""
Module définissant les dépendances FastAPI pour l'authentification.

Fournit des dépendances pour:
- Le service d'authentification (AuthService)
- L'obtention de l'utilisateur courant à partir du token JWT
- La vérification des droits sur un utilisateur cible
"""
import logging
from typing import Annotated, Optional

from fastapi import Depends
from fastapi.security import OAuth2PasswordBearer

from src.auth.exceptions import (
    InactiveUserException,
    TokenInvalidException,
    TokenMissingException,
)
from src.auth.service import AuthService
from src.config import settings
from src.users.dependencies import UserServiceDep
from src.users.models import User

logger = logging.getLogger(__name__)

# --- Dépendances OAuth2 ---
oauth2_scheme = OAuth2PasswordBearer(tokenUrl=settings.LOGIN_PATH, auto_error=False)

def get_auth_service(user_service: UserServiceDep) -> AuthService:
    """Fournit une instance du service d'authentification."""
    logger.debug("Fourniture de AuthService")
    return AuthService(user_service=user_service)

AuthServiceDep = Annotated[AuthService, Depends(get_auth_service)]

async def get_current_user(
    token: Annotated[Optional[str], Depends(oauth2_scheme)],
    auth_service: AuthServiceDep,
) -> User:
    """
    Vérifie le token JWT et retourne l'utilisateur courant.

    Args:
        token: Token JWT optionnel (en-tête Authorization: Bearer)
        auth_service: Service d'authentification

    Returns:
        User: L'utilisateur authentifié (modèle table)

    Raises:
        TokenMissingException: Si le token est manquant
        TokenInvalidException: Si le token est invalide ou l'utilisateur introuvable
        InactiveUserException: Si le compte est désactivé
    """
    if token is None:
        logger.warning("Token manquant dans la requête.")
        raise TokenMissingException()

    user = await auth_service.get_user_from_token(token)
    if user is None:
        logger.warning("Token invalide ou utilisateur non trouvé.")
        raise TokenInvalidException()

    if not user.enabled:
        logger.warning(f"Tentative d'accès par un utilisateur inactif: ID {user.id}")
        raise InactiveUserException()

    logger.debug(f"Utilisateur authentifié: ID {user.id}")
    return user

CurrentUserDep = Annotated[User, Depends(get_current_user)]

def is_same_user_or_admin(current_user: User, target: User) -> bool:
    """Vrai si l'utilisateur courant est la cible elle-même ou un administrateur."""
    return current_user.id == target.id or current_user.is_admin()
