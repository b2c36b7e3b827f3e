"""
Middleware d'authentification JSON.

Intercepte POST sur le chemin de connexion (settings.LOGIN_PATH) avant le
routage: le corps JSON {"username": ..., "password": ...} est vérifié et la
réponse {"token": ...} est produite ici. La route déclarée dans le routeur
auth n'est donc jamais atteinte.
"""
import logging
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import HTTPException, Request, status
from fastapi.responses import JSONResponse
from fastcrud import FastCRUD
from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.responses import Response

from src.auth.constants import ERROR_LOGIN_BAD_REQUEST
from src.auth.models import TokenResponse
from src.auth.service import AuthService
from src.config import settings
from src.database import get_db_session
from src.users.models import User
from src.users.service import UserService

logger = logging.getLogger(__name__)

class JsonLoginMiddleware(BaseHTTPMiddleware):
    """Authentifie les requêtes POST de connexion et retourne un token JWT."""

    def __init__(self, app, login_path: Optional[str] = None):
        super().__init__(app)
        self.login_path = login_path or settings.LOGIN_PATH

    async def dispatch(self, request: Request, call_next: RequestResponseEndpoint) -> Response:
        if request.method != "POST" or request.url.path != self.login_path:
            return await call_next(request)

        try:
            payload = await request.json()
        except ValueError:
            logger.warning("[Login] Corps de requête JSON invalide")
            return self._bad_request()

        if not isinstance(payload, dict):
            return self._bad_request()
        username = payload.get("username")
        password = payload.get("password")
        if not isinstance(username, str) or not isinstance(password, str):
            return self._bad_request()

        # Respecte les surcharges de dépendances (tests)
        session_provider = request.app.dependency_overrides.get(get_db_session, get_db_session)
        async with asynccontextmanager(session_provider)() as db:
            auth_service = AuthService(UserService(user_crud=FastCRUD(User), db=db))
            try:
                token = await auth_service.login(username, password)
            except HTTPException as e:
                return JSONResponse(
                    status_code=e.status_code,
                    content={"detail": e.detail},
                    headers=e.headers,
                )

        logger.info(f"[Login] Token émis pour: {username}")
        return JSONResponse(content=TokenResponse(token=token).model_dump())

    @staticmethod
    def _bad_request() -> JSONResponse:
        return JSONResponse(
            status_code=status.HTTP_400_BAD_REQUEST,
            content={"detail": ERROR_LOGIN_BAD_REQUEST},
        )
