"""
Dépendances FastAPI pour le module mot de passe.
"""
from typing import Annotated

from fastapi import Depends

from src.password.service import PasswordService
from src.users.dependencies import UserServiceDep, UserSettingsDep

def get_password_service(user_service: UserServiceDep, settings: UserSettingsDep) -> PasswordService:
    return PasswordService(user_service=user_service, settings=settings)

PasswordServiceDep = Annotated[PasswordService, Depends(get_password_service)]
