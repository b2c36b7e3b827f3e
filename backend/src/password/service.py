"""
Module contenant la logique métier du mot de passe.

PasswordService couvre le changement de mot de passe par un utilisateur
authentifié et le cycle de réinitialisation:
demande (jeton + horodatage) puis confirmation (nouveau mot de passe).
"""
import logging
from datetime import datetime, timezone
from typing import Any, Dict, Optional

from src.users.config import UserSettings
from src.users.constants import (
    ERROR_CURRENT_PASSWORD_INVALID,
    ERROR_PASSWORD_ALREADY_REQUESTED,
    ERROR_TOKEN_REQUIRED,
    ERROR_TOKEN_UNKNOWN,
    ERROR_USER_NOT_RECOGNISED,
)
from src.users.exceptions import (
    FormValidationError,
    PasswordAlreadyRequestedException,
    ResetTokenException,
    UserNotRecognisedException,
)
from src.users.forms import ChangePasswordForm, ResettingForm, bind_form
from src.users.models import User
from src.users.service import UserService
from src.users.utils import generate_token

logger = logging.getLogger(__name__)

class PasswordService:
    """Service pour le changement et la réinitialisation des mots de passe."""

    def __init__(self, user_service: UserService, settings: UserSettings):
        self.user_service = user_service
        self.settings = settings

    # --- Changement de mot de passe ---

    def validate_change_password(self, requester: User, data: Optional[Dict[str, Any]]) -> ChangePasswordForm:
        """
        Valide le formulaire de changement de mot de passe.

        Le mot de passe actuel est vérifié contre celui de l'utilisateur qui fait la requête.

        Raises:
            FormValidationError: Si le formulaire est invalide
        """
        form, errors = bind_form(ChangePasswordForm, data, self.settings)
        if form is not None and not self.user_service.check_password(requester, form.current_password):
            errors = {"current_password": [ERROR_CURRENT_PASSWORD_INVALID]}
        if errors:
            logger.info(f"[PasswordService] Changement de mot de passe refusé pour user ID {requester.id}: {sorted(errors)}")
            raise FormValidationError(errors)
        return form

    async def change_password(self, user: User, plain_password: str) -> User:
        logger.info(f"[PasswordService] Changement du mot de passe de l'utilisateur ID {user.id}")
        return await self.user_service.update_user(user, plain_password=plain_password)

    # --- Demande de réinitialisation ---

    async def find_user_for_reset(self, username: Optional[str]) -> Optional[User]:
        """Recherche l'utilisateur par nom d'utilisateur ou email."""
        if not isinstance(username, str):
            return None
        return await self.user_service.find_user_by_username_or_email(username)

    def ensure_user_recognised(self, user: Optional[User]) -> User:
        if user is None:
            logger.info("[PasswordService] Demande de réinitialisation pour un utilisateur inconnu")
            raise UserNotRecognisedException(ERROR_USER_NOT_RECOGNISED)
        return user

    def ensure_request_allowed(self, user: User) -> None:
        """
        Refuse une nouvelle demande tant que la précédente n'a pas expiré.

        Raises:
            PasswordAlreadyRequestedException: Demande encore valide (aucune modification)
        """
        ttl = self.settings.RESETTING_TOKEN_TTL
        if user.is_password_request_non_expired(ttl):
            logger.info(f"[PasswordService] Réinitialisation déjà demandée pour user ID {user.id}")
            raise PasswordAlreadyRequestedException(
                ERROR_PASSWORD_ALREADY_REQUESTED.format(hours=ttl // 3600)
            )

    def ensure_confirmation_token(self, user: User) -> str:
        """Génère le jeton de confirmation s'il n'existe pas encore."""
        if user.confirmation_token is None:
            user.confirmation_token = generate_token(self.settings.RESETTING_TOKEN_BYTES)
        return user.confirmation_token

    async def mark_password_requested(self, user: User) -> User:
        user.password_requested_at = datetime.now(timezone.utc)
        return await self.user_service.update_user(user)

    # --- Confirmation de réinitialisation ---

    async def find_user_by_token(self, token: Optional[str]) -> User:
        """
        Retourne l'utilisateur associé au jeton de confirmation.

        Raises:
            ResetTokenException: Jeton absent ou inconnu
        """
        if not token:
            raise ResetTokenException(ERROR_TOKEN_REQUIRED)
        user = await self.user_service.find_user_by_confirmation_token(token)
        if user is None:
            logger.info("[PasswordService] Jeton de réinitialisation inconnu")
            raise ResetTokenException(ERROR_TOKEN_UNKNOWN.format(token=token))
        return user

    def validate_resetting(self, data: Optional[Dict[str, Any]]) -> ResettingForm:
        form, errors = bind_form(ResettingForm, data, self.settings)
        if errors:
            raise FormValidationError(errors)
        return form

    async def reset_password(self, user: User, plain_password: str) -> User:
        """Applique le nouveau mot de passe, efface le jeton et réactive le compte."""
        user.confirmation_token = None
        user.password_requested_at = None
        user.enabled = True
        logger.info(f"[PasswordService] Réinitialisation du mot de passe de l'utilisateur ID {user.id}")
        return await self.user_service.update_user(user, plain_password=plain_password)
