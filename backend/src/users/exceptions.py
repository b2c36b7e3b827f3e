"""
Exceptions personnalisées pour le module de gestion des utilisateurs.
"""
from typing import Dict, List

from fastapi import HTTPException, status

FormErrors = Dict[str, List[str]]

class UserError(Exception):
    """Classe de base pour les exceptions liées aux utilisateurs."""
    pass

class UserAlreadyExistsError(UserError):
    """Levée lorsqu'une contrainte d'unicité est violée à l'écriture."""
    def __init__(self, detail: str = "Un utilisateur avec ces identifiants existe déjà"):
        super().__init__(detail)

class FormValidationError(UserError):
    """Levée lorsque la validation d'un formulaire échoue.

    `errors` associe chaque champ à la liste de ses messages d'erreur.
    """
    def __init__(self, errors: FormErrors):
        self.errors = errors
        super().__init__(f"Formulaire invalide: {', '.join(sorted(errors))}")

# --- Exceptions HTTP ---

class UserNotFoundException(HTTPException):
    """Aucun utilisateur pour l'identifiant externe demandé."""
    def __init__(self, user_id: int):
        super().__init__(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Utilisateur {user_id} non trouvé",
        )

class UserNotRecognisedException(HTTPException):
    """Demande de réinitialisation pour un utilisateur inconnu."""
    def __init__(self, detail: str):
        super().__init__(status_code=status.HTTP_403_FORBIDDEN, detail=detail)

class PasswordAlreadyRequestedException(HTTPException):
    """Une demande de réinitialisation est encore valide."""
    def __init__(self, detail: str):
        super().__init__(status_code=status.HTTP_403_FORBIDDEN, detail=detail)

class ResetTokenException(HTTPException):
    """Jeton de réinitialisation absent ou inconnu."""
    def __init__(self, detail: str):
        super().__init__(status_code=status.HTTP_400_BAD_REQUEST, detail=detail)
