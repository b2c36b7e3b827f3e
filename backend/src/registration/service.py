"""
Module contenant la logique métier de l'inscription.
"""
import logging
from typing import Any, Dict, Optional, Tuple

from src.users.config import UserSettings
from src.users.exceptions import FormErrors
from src.users.forms import RegistrationForm, bind_form
from src.users.models import User
from src.users.service import UserService

logger = logging.getLogger(__name__)

class RegistrationService:
    """Service pour l'inscription de nouveaux utilisateurs."""

    def __init__(self, user_service: UserService, settings: UserSettings):
        self.user_service = user_service
        self.settings = settings

    def create_user(self) -> User:
        """Nouvel utilisateur, actif dès l'inscription."""
        user = self.user_service.create_user()
        user.enabled = True
        return user

    async def validate(self, data: Optional[Dict[str, Any]]) -> Tuple[Optional[RegistrationForm], FormErrors]:
        """
        Valide le formulaire d'inscription puis l'unicité de username, email et user_id.

        Returns:
            (formulaire, {}) si valide, (formulaire ou None, erreurs) sinon
        """
        form, errors = bind_form(RegistrationForm, data, self.settings)
        if form is None:
            return None, errors
        errors = await self.user_service.check_uniqueness(
            username=form.username,
            email=form.email,
            user_id=form.user_id,
        )
        return form, errors

    def apply(self, user: User, form: RegistrationForm) -> None:
        user.username = form.username
        user.email = form.email
        user.user_id = form.user_id
        if form.role:
            user.add_role(form.role)

    async def register(self, user: User, form: RegistrationForm) -> User:
        logger.info(f"[RegistrationService] Inscription de {form.username} (user_id={form.user_id})")
        return await self.user_service.update_user(user, plain_password=form.plain_password)
