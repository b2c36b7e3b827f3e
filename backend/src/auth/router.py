"""
Module définissant les routes API FastAPI pour l'authentification.

Contient les endpoints pour:
- /login : Connexion et obtention d'un token JWT (traité par JsonLoginMiddleware)
- /auth : Vérification qu'un token valide accompagne la requête
"""
import logging

from fastapi import APIRouter

from src.auth.constants import MESSAGE_AUTHENTICATED
from src.auth.dependencies import CurrentUserDep
from src.auth.models import LoginRequest, MessageResponse, TokenResponse
from src.config import settings

logger = logging.getLogger(__name__)

# Définition du routeur
router = APIRouter()

@router.post(settings.LOGIN_PATH, response_model=TokenResponse, tags=["Authentication"])
async def login(credentials: LoginRequest):
    """
    Authentifie l'utilisateur et retourne un token JWT.

    - **username**: Nom d'utilisateur ou email
    - **password**: Mot de passe de l'utilisateur

    Déclarée pour la documentation OpenAPI; la requête est traitée par le middleware.
    """
    raise RuntimeError("Cette route ne devrait jamais être atteinte.")

@router.get("/auth", response_model=MessageResponse, tags=["Authentication"])
async def check_authentication(current_user: CurrentUserDep):
    """Confirme que le token JWT fourni est valide."""
    logger.info(f"[Router] Authentification vérifiée pour user ID: {current_user.id}")
    return MessageResponse(message=MESSAGE_AUTHENTICATED)

# Créer une instance du routeur pour l'export
auth_router = router
