# src/users/models.py
"""
Module définissant les modèles SQLModel pour l'entité User.

Ce module contient :
- UserBase : Classe SQLModel de base avec les champs exposés.
- User : Modèle de table SQLModel (table=True) héritant de UserBase.
- UserRead : Schéma de sérialisation pour l'API.
"""
from datetime import datetime, timedelta, timezone
from typing import List, Optional

from sqlalchemy import JSON, Column, DateTime, Integer, String
from sqlmodel import SQLModel, Field

from src.users.constants import ADMIN_ROLES, ROLE_DEFAULT
from src.users.utils import as_utc, canonicalize

# =====================================================
# Schémas: Utilisateurs (SQLModel approach)
# =====================================================

class UserBase(SQLModel):
    """Champs communs exposés par l'API."""
    username: str = Field(max_length=180, nullable=False)
    email: str = Field(max_length=180, nullable=False)

# ----- Modèle de Table -----
class User(UserBase, table=True):
    """Modèle de table SQLModel pour les utilisateurs."""
    __tablename__ = "users"

    id: Optional[int] = Field(default=None, primary_key=True, index=True)
    username_canonical: str = Field(default="", max_length=180, unique=True, index=True, nullable=False)
    email_canonical: str = Field(default="", max_length=180, unique=True, index=True, nullable=False)
    # Identifiant du système d'identité externe
    user_id: Optional[int] = Field(
        default=None,
        sa_column=Column(Integer, unique=True, index=True, nullable=False),
    )
    # Hash bcrypt (le sel est inclus dans le hash)
    password: str = Field(default="", max_length=255, nullable=False)
    # ROLE_USER est implicite et n'est jamais stocké
    roles: List[str] = Field(default_factory=list, sa_column=Column(JSON, nullable=False))
    enabled: bool = Field(default=False, nullable=False)
    confirmation_token: Optional[str] = Field(
        default=None,
        sa_column=Column(String(180), unique=True, nullable=True),
    )
    password_requested_at: Optional[datetime] = Field(
        default=None,
        sa_column=Column(DateTime(timezone=True), nullable=True),
    )
    last_login: Optional[datetime] = Field(
        default=None,
        sa_column=Column(DateTime(timezone=True), nullable=True),
    )

    def update_canonical_fields(self) -> None:
        self.username_canonical = canonicalize(self.username)
        self.email_canonical = canonicalize(self.email)

    def get_roles(self) -> List[str]:
        """Retourne les rôles de l'utilisateur, rôle par défaut inclus."""
        roles = list(self.roles or [])
        if ROLE_DEFAULT not in roles:
            roles.append(ROLE_DEFAULT)
        return roles

    def add_role(self, role: str) -> None:
        role = role.upper()
        if role == ROLE_DEFAULT:
            return
        if role not in (self.roles or []):
            # Réaffectation pour que SQLAlchemy détecte la modification de la colonne JSON
            self.roles = [*(self.roles or []), role]

    def has_role(self, role: str) -> bool:
        return role.upper() in self.get_roles()

    def is_admin(self) -> bool:
        return any(self.has_role(role) for role in ADMIN_ROLES)

    def is_password_request_non_expired(self, ttl: int) -> bool:
        """Vrai si une demande de réinitialisation date de moins de `ttl` secondes."""
        requested_at = as_utc(self.password_requested_at)
        if requested_at is None:
            return False
        return requested_at + timedelta(seconds=ttl) > datetime.now(timezone.utc)

# ----- Schémas API -----
class UserRead(UserBase):
    """Représentation JSON d'un utilisateur (profil)."""
    id: int
    user_id: int
