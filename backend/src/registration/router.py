"""
Module définissant les routes API FastAPI pour l'inscription.

Contient l'endpoint:
- /register : Création d'un utilisateur et émission de son token JWT
"""
import logging
from typing import Annotated, Any, Dict, Optional

from fastapi import APIRouter, Body, Request, status
from fastapi.responses import JSONResponse

from src.auth.security import create_user_token
from src.registration.dependencies import RegistrationServiceDep
from src.users.constants import MESSAGE_USER_CREATED
from src.users.dependencies import HookDispatcherDep
from src.users.exceptions import FormValidationError
from src.users.hooks import LifecycleEvent, UserEvents

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Registration"])

@router.post("/register", status_code=status.HTTP_201_CREATED)
async def register(
    request: Request,
    registration_service: RegistrationServiceDep,
    hooks: HookDispatcherDep,
    payload: Annotated[Optional[Dict[str, Any]], Body()] = None,
):
    """
    Enregistre un nouvel utilisateur.

    - **username**: Nom d'utilisateur
    - **email**: Email
    - **plainPassword**: Mot de passe (chaîne ou {"first", "second"})
    - **user_id**: Identifiant externe, entier positif unique
    - **role**: Rôle optionnel (ROLE_*)

    Retourne un message et le token JWT du nouvel utilisateur.
    """
    user = registration_service.create_user()
    event = LifecycleEvent(request=request, user=user)
    response = await hooks.dispatch(UserEvents.REGISTRATION_INITIALIZE, event)
    if response is not None:
        return response

    form, errors = await registration_service.validate(payload)
    event.form = form
    if errors:
        logger.info(f"[Router] Inscription refusée: {sorted(errors)}")
        response = await hooks.dispatch(UserEvents.REGISTRATION_FAILURE, event)
        if response is not None:
            return response
        raise FormValidationError(errors)

    registration_service.apply(user, form)
    response = await hooks.dispatch(UserEvents.REGISTRATION_SUCCESS, event)
    if response is not None:
        return response

    await registration_service.register(user, form)
    token = create_user_token(user)
    logger.info(f"[Router] Utilisateur créé: ID {user.id}, user_id {user.user_id}")

    response = JSONResponse(
        status_code=status.HTTP_201_CREATED,
        content={"message": MESSAGE_USER_CREATED, "token": token},
        headers={"Location": str(request.url_for("get_profile", user_id=user.user_id))},
    )
    event.response = response
    await hooks.notify(UserEvents.REGISTRATION_COMPLETED, event)
    return response

# Créer une instance du routeur pour l'export
registration_router = router
