"""
Fonctions utilitaires de sécurité pour l'authentification.

Comprend le hachage/vérification de mot de passe et la création/décodage de token JWT.
"""
import bcrypt
from datetime import datetime, timedelta, timezone
from typing import Any, Dict, Optional
from jose import JWTError, jwt
import logging

from src.config import settings
from src.users.models import User

logger = logging.getLogger(__name__)

def verify_password(plain_password: str, hashed_password: str) -> bool:
    """Vérifie un mot de passe en clair contre un hash bcrypt."""
    if not plain_password or not hashed_password:
        return False
    try:
        plain_password_bytes = plain_password.encode('utf-8')
        hashed_password_bytes = hashed_password.encode('utf-8')
        return bcrypt.checkpw(plain_password_bytes, hashed_password_bytes)
    except ValueError as e:
        # Hash mal formé ou mot de passe trop long pour bcrypt
        logger.error(f"Erreur lors de la vérification du mot de passe: {e}", exc_info=True)
        return False

def get_password_hash(password: str) -> str:
    """Génère le hash bcrypt d'un mot de passe."""
    try:
        password_bytes = password.encode('utf-8')
        hashed_bytes = bcrypt.hashpw(password_bytes, bcrypt.gensalt())
        return hashed_bytes.decode('utf-8')
    except ValueError as e:
        logger.error(f"Erreur lors du hachage du mot de passe: {e}", exc_info=True)
        raise ValueError("Erreur lors du hachage du mot de passe") from e

def create_access_token(data: dict, expires_delta: Optional[timedelta] = None) -> str:
    """Crée un token JWT avec les données fournies et une expiration."""
    to_encode = data.copy()
    now = datetime.now(timezone.utc)
    if expires_delta:
        expire = now + expires_delta
    else:
        expire = now + timedelta(minutes=settings.ACCESS_TOKEN_EXPIRE_MINUTES)
    to_encode.update({"iat": now, "exp": expire})
    encoded_jwt = jwt.encode(to_encode, settings.JWT_SECRET_KEY, algorithm=settings.JWT_ALGORITHM)
    return encoded_jwt

def create_user_token(user: User) -> str:
    """Crée le token JWT d'un utilisateur (sub = clé primaire, username, rôles)."""
    return create_access_token(
        data={"sub": str(user.id), "username": user.username, "roles": user.get_roles()}
    )

def decode_access_token(token: str) -> Optional[Dict[str, Any]]:
    """Décode un token JWT et retourne son payload, ou None si invalide/expiré."""
    try:
        return jwt.decode(token, settings.JWT_SECRET_KEY, algorithms=[settings.JWT_ALGORITHM])
    except JWTError as e:
        logger.warning(f"Erreur de décodage JWT: {e}") # Inclut expiration, signature invalide, etc.
        return None

def get_token_user_id(token: str) -> Optional[int]:
    """Retourne l'ID utilisateur ('sub') d'un token JWT, ou None."""
    payload = decode_access_token(token)
    if payload is None:
        return None
    user_id_str: Optional[str] = payload.get("sub")
    if user_id_str is None:
        logger.warning("Token JWT décodé mais sans champ 'sub' (user_id).")
        return None
    try:
        return int(user_id_str)
    except ValueError:
        logger.warning(f"Le champ 'sub' dans le token n'est pas un entier valide: '{user_id_str}'")
        return None
