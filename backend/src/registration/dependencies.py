"""
Dépendances FastAPI pour le module d'inscription.
"""
from typing import Annotated

from fastapi import Depends

from src.registration.service import RegistrationService
from src.users.dependencies import UserServiceDep, UserSettingsDep

def get_registration_service(user_service: UserServiceDep, settings: UserSettingsDep) -> RegistrationService:
    return RegistrationService(user_service=user_service, settings=settings)

RegistrationServiceDep = Annotated[RegistrationService, Depends(get_registration_service)]
