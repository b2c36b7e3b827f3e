"""
Formulaires (modèles Pydantic) liés aux données soumises sur les endpoints utilisateur.

Les champs inconnus sont ignorés silencieusement (extra="ignore"): ils ne sont ni
rejetés ni recopiés sur l'entité. Les règles qui dépendent de la configuration
(longueurs, rôles autorisés) lisent `UserSettings` dans le contexte de validation.
"""
import re
from typing import Any, Dict, Optional, Tuple, Type, TypeVar

from pydantic import BaseModel, ConfigDict, EmailStr, Field, ValidationError, ValidationInfo, field_validator
from pydantic_core import PydanticCustomError

from src.users.config import UserSettings, settings as default_settings
from src.users.constants import (
    ERROR_BLANK,
    ERROR_EMAIL_INVALID,
    ERROR_EMAIL_LONG,
    ERROR_INVALID_VALUE,
    ERROR_PASSWORD_LONG,
    ERROR_PASSWORD_MISMATCH,
    ERROR_PASSWORD_SHORT,
    ERROR_ROLE_INVALID,
    ERROR_ROLE_NOT_ALLOWED,
    ERROR_USER_ID_INVALID,
    ERROR_USERNAME_LONG,
    ERROR_USERNAME_SHORT,
    ROLE_PATTERN,
)
from src.users.exceptions import FormErrors

FormT = TypeVar("FormT", bound=BaseModel)

# Préfixe des types d'erreur levés par nos validateurs (message déjà rédigé)
FORM_ERROR_PREFIX = "form_"

def _error(code: str, message: str) -> PydanticCustomError:
    return PydanticCustomError(FORM_ERROR_PREFIX + code, message)

def _policy(info: ValidationInfo) -> UserSettings:
    context = info.context or {}
    return context.get("settings") or default_settings

def _require_text(value: Any) -> str:
    if not isinstance(value, str) or not value.strip():
        raise _error("blank", ERROR_BLANK)
    return value

class BaseForm(BaseModel):
    model_config = ConfigDict(extra="ignore", populate_by_name=True)

class IdentityFields(BaseForm):
    username: str
    email: EmailStr

    @field_validator("username", mode="before")
    @classmethod
    def check_username(cls, value: Any, info: ValidationInfo) -> str:
        value = _require_text(value).strip()
        policy = _policy(info)
        if len(value) < policy.USERNAME_MIN_LENGTH:
            raise _error("username_short", ERROR_USERNAME_SHORT)
        if len(value) > policy.USERNAME_MAX_LENGTH:
            raise _error("username_long", ERROR_USERNAME_LONG)
        return value

    @field_validator("email", mode="before")
    @classmethod
    def check_email(cls, value: Any, info: ValidationInfo) -> str:
        value = _require_text(value).strip()
        if len(value) > _policy(info).EMAIL_MAX_LENGTH:
            raise _error("email_long", ERROR_EMAIL_LONG)
        return value

class PlainPasswordField(BaseForm):
    plain_password: str = Field(alias="plainPassword")

    @field_validator("plain_password", mode="before")
    @classmethod
    def check_plain_password(cls, value: Any, info: ValidationInfo) -> str:
        # Forme répétée {"first": ..., "second": ...} acceptée en plus de la chaîne simple
        if isinstance(value, dict):
            if value.get("first") != value.get("second"):
                raise _error("password_mismatch", ERROR_PASSWORD_MISMATCH)
            value = value.get("first")
        value = _require_text(value)
        policy = _policy(info)
        if len(value) < policy.PASSWORD_MIN_LENGTH:
            raise _error("password_short", ERROR_PASSWORD_SHORT)
        if len(value.encode("utf-8")) > policy.PASSWORD_MAX_BYTES:
            raise _error("password_long", ERROR_PASSWORD_LONG)
        return value

class CurrentPasswordField(BaseForm):
    current_password: str

    @field_validator("current_password", mode="before")
    @classmethod
    def check_current_password(cls, value: Any) -> str:
        return _require_text(value)

class RegistrationForm(IdentityFields, PlainPasswordField):
    """Inscription: identifiants, mot de passe, identifiant externe et rôle."""
    user_id: int
    role: Optional[str] = None

    @field_validator("user_id", mode="before")
    @classmethod
    def check_user_id(cls, value: Any) -> int:
        if value is None or value == "":
            raise _error("blank", ERROR_BLANK)
        if isinstance(value, bool):
            raise _error("user_id_invalid", ERROR_USER_ID_INVALID)
        if isinstance(value, str) and value.strip().isdigit():
            value = int(value.strip())
        if not isinstance(value, int) or value <= 0:
            raise _error("user_id_invalid", ERROR_USER_ID_INVALID)
        return value

    @field_validator("role", mode="before")
    @classmethod
    def check_role(cls, value: Any, info: ValidationInfo) -> Optional[str]:
        if value is None or value == "":
            return None
        if not isinstance(value, str) or not re.match(ROLE_PATTERN, value.strip().upper()):
            raise _error("role_invalid", ERROR_ROLE_INVALID)
        role = value.strip().upper()
        allowed = [r.upper() for r in _policy(info).REGISTRATION_ALLOWED_ROLES]
        if allowed and role not in allowed:
            raise _error("role_not_allowed", ERROR_ROLE_NOT_ALLOWED)
        return role

class ProfileForm(IdentityFields, CurrentPasswordField):
    """Édition du profil; le mot de passe actuel confirme la modification."""

class ChangePasswordForm(CurrentPasswordField, PlainPasswordField):
    pass

class ResettingForm(PlainPasswordField):
    pass

def form_errors(exc: ValidationError) -> FormErrors:
    """Convertit une ValidationError Pydantic en {champ: [messages]}."""
    errors: FormErrors = {}
    for error in exc.errors():
        field = str(error["loc"][0]) if error["loc"] else "form"
        if error["type"] == "missing":
            message = ERROR_BLANK
        elif error["type"].startswith(FORM_ERROR_PREFIX):
            message = error["msg"]
        elif field == "email":
            message = ERROR_EMAIL_INVALID
        else:
            message = ERROR_INVALID_VALUE
        errors.setdefault(field, []).append(message)
    return errors

def bind_form(
    form_class: Type[FormT],
    data: Optional[Dict[str, Any]],
    settings: Optional[UserSettings] = None,
) -> Tuple[Optional[FormT], FormErrors]:
    """
    Lie les données soumises à un formulaire.

    Returns:
        (formulaire, {}) si valide, (None, erreurs) sinon
    """
    try:
        form = form_class.model_validate(
            data if isinstance(data, dict) else {},
            context={"settings": settings or default_settings},
        )
        return form, {}
    except ValidationError as exc:
        return None, form_errors(exc)
