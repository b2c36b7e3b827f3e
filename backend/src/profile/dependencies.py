"""
Dépendances FastAPI pour le module profil.
"""
from typing import Annotated

from fastapi import Depends

from src.auth.constants import ERROR_PROFILE_FORBIDDEN
from src.auth.dependencies import CurrentUserDep
from src.auth.exceptions import PermissionDeniedException
from src.profile.service import ProfileService
from src.users.dependencies import PathUserDep, UserServiceDep, UserSettingsDep
from src.users.models import User

def get_profile_service(user_service: UserServiceDep, settings: UserSettingsDep) -> ProfileService:
    return ProfileService(user_service=user_service, settings=settings)

ProfileServiceDep = Annotated[ProfileService, Depends(get_profile_service)]

async def get_owned_profile(current_user: CurrentUserDep, user: PathUserDep) -> User:
    """Retourne l'utilisateur du chemin s'il s'agit de l'utilisateur authentifié, sinon 403."""
    if current_user.id != user.id:
        raise PermissionDeniedException(ERROR_PROFILE_FORBIDDEN)
    return user

OwnedProfileDep = Annotated[User, Depends(get_owned_profile)]
