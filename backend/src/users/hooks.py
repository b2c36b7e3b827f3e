"""
Points d'extension du cycle de vie des utilisateurs.

Chaque opération (inscription, changement ou réinitialisation du mot de passe,
édition du profil) appelle des hooks nommés à des étapes fixes. Un hook retourne
None pour laisser le traitement par défaut continuer, ou une Response pour le
court-circuiter. Les hooks "completed" sont de simples notifications.

Les implémentations héritent de UserLifecycleHooks et ne surchargent que les
méthodes utiles; elles sont enregistrées avec register_hooks() et appelées dans
l'ordre d'enregistrement par le HookDispatcher injecté dans les routeurs.
"""
import logging
from dataclasses import dataclass
from typing import List, Optional, Sequence

from fastapi import Request, Response
from pydantic import BaseModel

from src.users.models import User

logger = logging.getLogger(__name__)

class UserEvents:
    """Noms des points d'extension (= noms des méthodes de UserLifecycleHooks)."""
    REGISTRATION_INITIALIZE = "registration_initialize"
    REGISTRATION_SUCCESS = "registration_success"
    REGISTRATION_FAILURE = "registration_failure"
    REGISTRATION_COMPLETED = "registration_completed"

    CHANGE_PASSWORD_INITIALIZE = "change_password_initialize"
    CHANGE_PASSWORD_SUCCESS = "change_password_success"
    CHANGE_PASSWORD_COMPLETED = "change_password_completed"

    RESETTING_SEND_EMAIL_INITIALIZE = "resetting_send_email_initialize"
    RESETTING_RESET_REQUEST = "resetting_reset_request"
    RESETTING_SEND_EMAIL_CONFIRM = "resetting_send_email_confirm"
    RESETTING_SEND_EMAIL_COMPLETED = "resetting_send_email_completed"

    RESETTING_RESET_INITIALIZE = "resetting_reset_initialize"
    RESETTING_RESET_SUCCESS = "resetting_reset_success"
    RESETTING_RESET_COMPLETED = "resetting_reset_completed"

    PROFILE_EDIT_INITIALIZE = "profile_edit_initialize"
    PROFILE_EDIT_SUCCESS = "profile_edit_success"
    PROFILE_EDIT_COMPLETED = "profile_edit_completed"

@dataclass
class LifecycleEvent:
    """Contexte passé aux hooks."""
    request: Request
    user: Optional[User] = None
    form: Optional[BaseModel] = None
    response: Optional[Response] = None

class UserLifecycleHooks:
    """Implémentation par défaut: aucun hook n'intervient."""

    async def registration_initialize(self, event: LifecycleEvent) -> Optional[Response]:
        return None

    async def registration_success(self, event: LifecycleEvent) -> Optional[Response]:
        return None

    async def registration_failure(self, event: LifecycleEvent) -> Optional[Response]:
        return None

    async def registration_completed(self, event: LifecycleEvent) -> None:
        return None

    async def change_password_initialize(self, event: LifecycleEvent) -> Optional[Response]:
        return None

    async def change_password_success(self, event: LifecycleEvent) -> Optional[Response]:
        return None

    async def change_password_completed(self, event: LifecycleEvent) -> None:
        return None

    async def resetting_send_email_initialize(self, event: LifecycleEvent) -> Optional[Response]:
        # event.user vaut None si l'utilisateur n'a pas été trouvé
        return None

    async def resetting_reset_request(self, event: LifecycleEvent) -> Optional[Response]:
        return None

    async def resetting_send_email_confirm(self, event: LifecycleEvent) -> Optional[Response]:
        return None

    async def resetting_send_email_completed(self, event: LifecycleEvent) -> Optional[Response]:
        return None

    async def resetting_reset_initialize(self, event: LifecycleEvent) -> Optional[Response]:
        return None

    async def resetting_reset_success(self, event: LifecycleEvent) -> Optional[Response]:
        return None

    async def resetting_reset_completed(self, event: LifecycleEvent) -> None:
        return None

    async def profile_edit_initialize(self, event: LifecycleEvent) -> Optional[Response]:
        return None

    async def profile_edit_success(self, event: LifecycleEvent) -> Optional[Response]:
        return None

    async def profile_edit_completed(self, event: LifecycleEvent) -> None:
        return None

class HookDispatcher:
    """Appelle une liste ordonnée de hooks."""

    def __init__(self, hooks: Sequence[UserLifecycleHooks] = ()):
        self.hooks = list(hooks)

    async def dispatch(self, name: str, event: LifecycleEvent) -> Optional[Response]:
        """Appelle les hooks dans l'ordre; s'arrête à la première Response retournée."""
        for hook in self.hooks:
            response = await getattr(hook, name)(event)
            if response is not None:
                logger.info(f"[Hooks] {name} court-circuité par {type(hook).__name__}")
                return response
        return None

    async def notify(self, name: str, event: LifecycleEvent) -> None:
        """Appelle tous les hooks; les valeurs de retour sont ignorées."""
        for hook in self.hooks:
            await getattr(hook, name)(event)

# Hooks enregistrés au niveau de l'application
registered_hooks: List[UserLifecycleHooks] = []

def register_hooks(*hooks: UserLifecycleHooks) -> None:
    registered_hooks.extend(hooks)

def get_hook_dispatcher() -> HookDispatcher:
    """Dépendance FastAPI fournissant le dispatcher des hooks enregistrés."""
    return HookDispatcher(registered_hooks)
