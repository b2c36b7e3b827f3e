"""
Module contenant la logique métier du profil utilisateur.

Sérialisation du profil, validateurs HTTP (ETag, Cache-Control) et édition
des identifiants de l'utilisateur.
"""
import hashlib
import logging
from typing import Any, Dict, Optional

from src.users.config import UserSettings
from src.users.constants import ERROR_CURRENT_PASSWORD_INVALID
from src.users.exceptions import FormValidationError
from src.users.forms import ProfileForm, bind_form
from src.users.models import User, UserRead
from src.users.service import UserService

logger = logging.getLogger(__name__)

def compute_etag(body: bytes) -> str:
    """ETag fort: empreinte SHA-1 du corps de la réponse."""
    return '"' + hashlib.sha1(body).hexdigest() + '"'

def etag_matches(if_none_match: Optional[str], etag: str) -> bool:
    """
    Vrai si l'en-tête If-None-Match désigne l'ETag courant.

    Accepte une liste séparée par des virgules, les ETags faibles (W/) et "*".
    """
    if not if_none_match:
        return False
    for candidate in if_none_match.split(","):
        candidate = candidate.strip()
        if candidate == "*":
            return True
        if candidate.startswith("W/"):
            candidate = candidate[2:]
        if candidate == etag:
            return True
    return False

class ProfileService:
    """Service pour la consultation et l'édition du profil."""

    def __init__(self, user_service: UserService, settings: UserSettings):
        self.user_service = user_service
        self.settings = settings

    def serialize(self, user: User) -> Dict[str, Any]:
        return UserRead.model_validate(user, from_attributes=True).model_dump()

    def cache_control(self) -> str:
        return f"public, s-maxage={self.settings.PROFILE_CACHE_SHARED_MAX_AGE}, must-revalidate"

    async def validate_edit(self, user: User, data: Optional[Dict[str, Any]]) -> ProfileForm:
        """
        Valide le formulaire d'édition du profil.

        Le mot de passe actuel doit être correct et le nouveau couple
        username/email ne doit pas appartenir à un autre utilisateur.

        Raises:
            FormValidationError: Si le formulaire est invalide
        """
        form, errors = bind_form(ProfileForm, data, self.settings)
        if form is not None:
            if not self.user_service.check_password(user, form.current_password):
                errors["current_password"] = [ERROR_CURRENT_PASSWORD_INVALID]
            errors.update(await self.user_service.check_uniqueness(
                username=form.username,
                email=form.email,
                exclude_id=user.id,
            ))
        if errors:
            logger.info(f"[ProfileService] Édition du profil refusée pour user ID {user.id}: {sorted(errors)}")
            raise FormValidationError(errors)
        return form

    def apply(self, user: User, form: ProfileForm) -> None:
        user.username = form.username
        user.email = form.email

    async def save(self, user: User) -> User:
        return await self.user_service.update_user(user)
