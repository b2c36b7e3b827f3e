"""
Module définissant les dépendances FastAPI pour le module utilisateur.

Fournit l'instance FastCRUD du modèle User, le UserService injecté avec la
session DB, la configuration utilisateur, le dispatcher des hooks et la
résolution de l'utilisateur désigné dans le chemin de l'URL.
"""
import logging
from typing import Annotated

from fastapi import Depends, Path
from fastcrud import FastCRUD
from sqlalchemy.ext.asyncio import AsyncSession

from src.database import get_db_session
from src.users.config import UserSettings, get_user_settings
from src.users.exceptions import UserNotFoundException
from src.users.hooks import HookDispatcher, get_hook_dispatcher
from src.users.models import User
from src.users.service import UserService

logger = logging.getLogger(__name__)

# Type hint pour la dépendance de session DB
DbSessionDep = Annotated[AsyncSession, Depends(get_db_session)]

def get_user_crud() -> FastCRUD:
    """
    Fournit une instance de FastCRUD pour le modèle User.

    Returns:
        FastCRUD: Instance configurée pour le modèle User (la session est passée à chaque appel)
    """
    return FastCRUD(User)

UserCrudDep = Annotated[FastCRUD, Depends(get_user_crud)]

def get_user_service(user_crud: UserCrudDep, db: DbSessionDep) -> UserService:
    """Fournit une instance du service de gestion des utilisateurs."""
    logger.debug("Fourniture de UserService")
    return UserService(user_crud=user_crud, db=db)

UserServiceDep = Annotated[UserService, Depends(get_user_service)]
UserSettingsDep = Annotated[UserSettings, Depends(get_user_settings)]
HookDispatcherDep = Annotated[HookDispatcher, Depends(get_hook_dispatcher)]

async def get_path_user(
    user_service: UserServiceDep,
    user_id: int = Path(..., ge=1, description="Identifiant externe (user_id) de l'utilisateur"),
) -> User:
    """Résout l'utilisateur désigné par son user_id dans le chemin, ou 404."""
    user = await user_service.find_user_by_user_id(user_id)
    if user is None:
        logger.info(f"[Dependencies] Aucun utilisateur pour user_id={user_id}")
        raise UserNotFoundException(user_id)
    return user

PathUserDep = Annotated[User, Depends(get_path_user)]
