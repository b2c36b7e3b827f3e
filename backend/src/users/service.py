"""
Module contenant la logique métier (services) pour les utilisateurs.

UserService joue le rôle de gestionnaire d'utilisateurs: création, recherches,
contrôles d'unicité (via FastCRUD) et persistance avec hachage du mot de passe.
"""
import logging
from typing import Optional

from fastcrud import FastCRUD
from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from src.auth.security import get_password_hash, verify_password
from src.users.constants import ERROR_EMAIL_TAKEN, ERROR_USER_ID_TAKEN, ERROR_USERNAME_TAKEN
from src.users.exceptions import FormErrors, UserAlreadyExistsError
from src.users.models import User
from src.users.utils import canonicalize, looks_like_email

logger = logging.getLogger(__name__)

class UserService:
    """Service pour gérer les opérations sur les utilisateurs."""

    def __init__(self, user_crud: FastCRUD, db: AsyncSession):
        self.user_crud = user_crud
        self.db = db

    def create_user(self) -> User:
        """Retourne un nouvel utilisateur non persisté."""
        return User(username="", email="", roles=[], enabled=False)

    async def get_user_by_id(self, id: int) -> Optional[User]:
        """Récupère un utilisateur par sa clé primaire."""
        logger.debug(f"[UserService] Récupération utilisateur ID: {id}")
        return await self.db.get(User, id)

    async def _find_one_by(self, **criteria) -> Optional[User]:
        stmt = select(User).filter_by(**criteria)
        result = await self.db.execute(stmt)
        return result.scalars().first()

    async def find_user_by_user_id(self, user_id: int) -> Optional[User]:
        """Récupère un utilisateur par son identifiant externe."""
        return await self._find_one_by(user_id=user_id)

    async def find_user_by_username(self, username: str) -> Optional[User]:
        return await self._find_one_by(username_canonical=canonicalize(username))

    async def find_user_by_email(self, email: str) -> Optional[User]:
        return await self._find_one_by(email_canonical=canonicalize(email))

    async def find_user_by_username_or_email(self, username_or_email: Optional[str]) -> Optional[User]:
        """Recherche par email si la valeur y ressemble, sinon par nom d'utilisateur."""
        if not username_or_email:
            return None
        if looks_like_email(username_or_email):
            return await self.find_user_by_email(username_or_email)
        return await self.find_user_by_username(username_or_email)

    async def find_user_by_confirmation_token(self, token: str) -> Optional[User]:
        return await self._find_one_by(confirmation_token=token)

    def check_password(self, user: User, plain_password: str) -> bool:
        return verify_password(plain_password, user.password)

    async def check_uniqueness(
        self,
        username: Optional[str] = None,
        email: Optional[str] = None,
        user_id: Optional[int] = None,
        exclude_id: Optional[int] = None,
    ) -> FormErrors:
        """
        Vérifie l'unicité des identifiants avant écriture.

        Args:
            exclude_id: Clé primaire de l'utilisateur à ignorer (édition)

        Returns:
            FormErrors: Erreurs par champ, vide si tout est unique
        """
        exclusion = {"id__ne": exclude_id} if exclude_id is not None else {}
        errors: FormErrors = {}
        if username is not None and await self.user_crud.exists(
            db=self.db, username_canonical=canonicalize(username), **exclusion
        ):
            errors["username"] = [ERROR_USERNAME_TAKEN]
        if email is not None and await self.user_crud.exists(
            db=self.db, email_canonical=canonicalize(email), **exclusion
        ):
            errors["email"] = [ERROR_EMAIL_TAKEN]
        if user_id is not None and await self.user_crud.exists(
            db=self.db, user_id=user_id, **exclusion
        ):
            errors["user_id"] = [ERROR_USER_ID_TAKEN]
        if errors:
            logger.info(f"[UserService] Identifiants déjà utilisés: {sorted(errors)}")
        return errors

    async def update_user(self, user: User, plain_password: Optional[str] = None) -> User:
        """
        Persiste l'utilisateur: champs canoniques, hash du nouveau mot de passe, commit.

        Raises:
            UserAlreadyExistsError: Si une contrainte d'unicité est violée
        """
        user.update_canonical_fields()
        if plain_password:
            user.password = get_password_hash(plain_password)
        self.db.add(user)
        try:
            await self.db.commit()
        except IntegrityError as e:
            await self.db.rollback()
            logger.warning(f"[UserService] Erreur d'intégrité lors de l'enregistrement de {user.username}: {e}")
            raise UserAlreadyExistsError() from e
        await self.db.refresh(user)
        logger.info(f"[UserService] Utilisateur ID {user.id} enregistré.")
        return user
