"""
Utilitaires pour le module de gestion des utilisateurs.
"""
import re
import secrets
from datetime import datetime, timezone
from typing import Optional

EMAIL_PATTERN = re.compile(r"^.+@\S+\.\S+$")

def canonicalize(value: Optional[str]) -> str:
    """Forme canonique (insensible à la casse) d'un nom d'utilisateur ou d'un email."""
    if value is None:
        return ""
    return value.strip().lower()

def looks_like_email(value: str) -> bool:
    return bool(EMAIL_PATTERN.match(value))

def generate_token(nbytes: int = 32) -> str:
    """
    Génère un jeton de confirmation aléatoire, utilisable dans une URL.

    Args:
        nbytes: Nombre d'octets aléatoires

    Returns:
        str: Jeton encodé en base64 url-safe, sans padding
    """
    return secrets.token_urlsafe(nbytes)

def as_utc(value: Optional[datetime]) -> Optional[datetime]:
    """SQLite renvoie des datetimes naïfs: on les considère comme UTC."""
    if value is None:
        return None
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value
