"""
Module définissant les routes API FastAPI pour le profil utilisateur.

Contient les endpoints pour:
- GET /profile/{user_id} : Consultation du profil (GET conditionnel via ETag)
- PUT /profile/{user_id}/edit : Édition du nom d'utilisateur et de l'email
"""
import logging
from typing import Annotated, Any, Dict, Optional

from fastapi import APIRouter, Body, Header, Request, Response, status
from fastapi.responses import JSONResponse

from src.profile.dependencies import OwnedProfileDep, ProfileServiceDep
from src.profile.service import compute_etag, etag_matches
from src.users.dependencies import HookDispatcherDep
from src.users.hooks import LifecycleEvent, UserEvents
from src.users.models import UserRead

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/profile", tags=["Profile"])

@router.get("/{user_id}", response_model=UserRead, name="get_profile")
async def get_profile(
    user: OwnedProfileDep,
    profile_service: ProfileServiceDep,
    if_none_match: Optional[str] = Header(None),
):
    """
    Récupère le profil de l'utilisateur authentifié.

    La réponse porte un ETag et un Cache-Control; si l'en-tête If-None-Match
    correspond, la réponse est 304 sans corps.
    """
    response = JSONResponse(content=profile_service.serialize(user))
    etag = compute_etag(response.body)
    headers = {"ETag": etag, "Cache-Control": profile_service.cache_control()}

    if etag_matches(if_none_match, etag):
        logger.debug(f"[Router] Profil user_id {user.user_id} non modifié")
        return Response(status_code=status.HTTP_304_NOT_MODIFIED, headers=headers)

    response.headers.update(headers)
    return response

@router.put("/{user_id}/edit", status_code=status.HTTP_204_NO_CONTENT)
async def edit_profile(
    request: Request,
    user: OwnedProfileDep,
    profile_service: ProfileServiceDep,
    hooks: HookDispatcherDep,
    payload: Annotated[Optional[Dict[str, Any]], Body()] = None,
):
    """
    Modifie le profil de l'utilisateur authentifié.

    - **username**: Nouveau nom d'utilisateur
    - **email**: Nouvel email
    - **current_password**: Mot de passe actuel (confirmation)

    Les champs inconnus sont ignorés.
    """
    event = LifecycleEvent(request=request, user=user)
    response = await hooks.dispatch(UserEvents.PROFILE_EDIT_INITIALIZE, event)
    if response is not None:
        return response

    form = await profile_service.validate_edit(user, payload)
    event.form = form
    profile_service.apply(user, form)

    response = await hooks.dispatch(UserEvents.PROFILE_EDIT_SUCCESS, event)
    await profile_service.save(user)
    logger.info(f"[Router] Profil user_id {user.user_id} modifié")
    if response is None:
        response = Response(
            status_code=status.HTTP_204_NO_CONTENT,
            headers={"Location": str(request.url_for("get_profile", user_id=user.user_id))},
        )

    event.response = response
    await hooks.notify(UserEvents.PROFILE_EDIT_COMPLETED, event)
    return response

# Créer une instance du routeur pour l'export
profile_router = router
