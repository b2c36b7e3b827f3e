"""
Module définissant les routes API FastAPI pour le mot de passe.

Contient les endpoints pour:
- /password/{user_id}/edit : Changement du mot de passe (l'utilisateur lui-même ou un admin)
- /password/reset/request : Demande de réinitialisation (émet un jeton)
- /password/reset/confirm : Confirmation de réinitialisation avec le jeton
"""
import logging
from typing import Annotated, Any, Dict, Optional

from fastapi import APIRouter, Body, Query, Request, Response, status
from fastapi.responses import JSONResponse

from src.auth.constants import ERROR_PROFILE_FORBIDDEN
from src.auth.dependencies import CurrentUserDep, is_same_user_or_admin
from src.auth.exceptions import PermissionDeniedException
from src.auth.models import MessageResponse, TokenResponse
from src.password.dependencies import PasswordServiceDep
from src.users.constants import MESSAGE_PASSWORD_RESET
from src.users.dependencies import HookDispatcherDep, PathUserDep
from src.users.hooks import LifecycleEvent, UserEvents

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/password", tags=["Password"])

JsonBody = Annotated[Optional[Dict[str, Any]], Body()]

@router.post("/{user_id}/edit", status_code=status.HTTP_204_NO_CONTENT)
async def change_password(
    request: Request,
    current_user: CurrentUserDep,
    user: PathUserDep,
    password_service: PasswordServiceDep,
    hooks: HookDispatcherDep,
    payload: JsonBody = None,
):
    """
    Change le mot de passe de l'utilisateur désigné.

    - **current_password**: Mot de passe actuel de l'utilisateur authentifié
    - **plainPassword**: Nouveau mot de passe (chaîne ou {"first", "second"})
    """
    if not is_same_user_or_admin(current_user, user):
        logger.warning(f"[Router] User ID {current_user.id} ne peut pas modifier le mot de passe de user_id {user.user_id}")
        raise PermissionDeniedException(ERROR_PROFILE_FORBIDDEN)

    event = LifecycleEvent(request=request, user=user)
    response = await hooks.dispatch(UserEvents.CHANGE_PASSWORD_INITIALIZE, event)
    if response is not None:
        return response

    form = password_service.validate_change_password(current_user, payload)
    event.form = form

    response = await hooks.dispatch(UserEvents.CHANGE_PASSWORD_SUCCESS, event)
    await password_service.change_password(user, form.plain_password)
    if response is None:
        response = Response(status_code=status.HTTP_204_NO_CONTENT)

    event.response = response
    await hooks.notify(UserEvents.CHANGE_PASSWORD_COMPLETED, event)
    return response

@router.post("/reset/request", response_model=TokenResponse)
async def request_password_reset(
    request: Request,
    password_service: PasswordServiceDep,
    hooks: HookDispatcherDep,
    payload: JsonBody = None,
):
    """
    Demande la réinitialisation du mot de passe.

    - **username**: Nom d'utilisateur ou email

    Retourne le jeton de confirmation à transmettre à /password/reset/confirm.
    """
    username = (payload or {}).get("username")
    logger.info(f"[Router] Demande de réinitialisation pour: {username}")
    user = await password_service.find_user_for_reset(username)

    event = LifecycleEvent(request=request, user=user)
    response = await hooks.dispatch(UserEvents.RESETTING_SEND_EMAIL_INITIALIZE, event)
    if response is not None:
        return response

    user = password_service.ensure_user_recognised(user)

    response = await hooks.dispatch(UserEvents.RESETTING_RESET_REQUEST, event)
    if response is not None:
        return response

    password_service.ensure_request_allowed(user)
    token = password_service.ensure_confirmation_token(user)

    response = await hooks.dispatch(UserEvents.RESETTING_SEND_EMAIL_CONFIRM, event)
    if response is not None:
        return response

    await password_service.mark_password_requested(user)

    response = await hooks.dispatch(UserEvents.RESETTING_SEND_EMAIL_COMPLETED, event)
    if response is not None:
        return response

    return TokenResponse(token=token)

@router.post("/reset/confirm", response_model=MessageResponse)
async def confirm_password_reset(
    request: Request,
    password_service: PasswordServiceDep,
    hooks: HookDispatcherDep,
    token: Optional[str] = Query(None, description="Jeton de confirmation reçu lors de la demande"),
    payload: JsonBody = None,
):
    """
    Réinitialise le mot de passe à l'aide du jeton de confirmation.

    - **plainPassword**: Nouveau mot de passe (chaîne ou {"first", "second"})
    """
    user = await password_service.find_user_by_token(token)

    event = LifecycleEvent(request=request, user=user)
    response = await hooks.dispatch(UserEvents.RESETTING_RESET_INITIALIZE, event)
    if response is not None:
        return response

    form = password_service.validate_resetting(payload)
    event.form = form

    response = await hooks.dispatch(UserEvents.RESETTING_RESET_SUCCESS, event)
    await password_service.reset_password(user, form.plain_password)
    if response is None:
        response = JSONResponse(content=MessageResponse(message=MESSAGE_PASSWORD_RESET).model_dump())

    event.response = response
    await hooks.notify(UserEvents.RESETTING_RESET_COMPLETED, event)
    return response

# Créer une instance du routeur pour l'export
password_router = router
