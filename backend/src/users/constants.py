"""
Constantes pour le module de gestion des utilisateurs.
"""

# --- Rôles ---
ROLE_DEFAULT = "ROLE_USER"
ROLE_ADMIN = "ROLE_ADMIN"
ROLE_SUPER_ADMIN = "ROLE_SUPER_ADMIN"
ADMIN_ROLES = (ROLE_ADMIN, ROLE_SUPER_ADMIN)
ROLE_PATTERN = r"^ROLE_[A-Z0-9_]+$"

# --- Messages de validation ---
ERROR_BLANK = "Cette valeur ne doit pas être vide."
ERROR_INVALID_VALUE = "Cette valeur n'est pas valide."
ERROR_USERNAME_SHORT = "Le nom d'utilisateur est trop court."
ERROR_USERNAME_LONG = "Le nom d'utilisateur est trop long."
ERROR_USERNAME_TAKEN = "Ce nom est deja utilise."
ERROR_EMAIL_INVALID = "L'adresse email n'est pas valide."
ERROR_EMAIL_LONG = "L'adresse email est trop longue."
ERROR_EMAIL_TAKEN = "Cet email est deja utilise."
ERROR_USER_ID_INVALID = "Le user_id doit être un entier positif."
ERROR_USER_ID_TAKEN = "Cet user_id est deja utilise."
ERROR_ROLE_INVALID = "Ce rôle n'est pas valide."
ERROR_ROLE_NOT_ALLOWED = "Ce rôle ne peut pas être attribué à l'inscription."
ERROR_PASSWORD_SHORT = "Le mot de passe est trop court."
ERROR_PASSWORD_LONG = "Le mot de passe est trop long."
ERROR_PASSWORD_MISMATCH = "Les deux mots de passe ne sont pas identiques."
ERROR_CURRENT_PASSWORD_INVALID = "Le mot de passe actuel est invalide."
VALIDATION_FAILED = "Validation Failed"

# --- Messages de succès ---
MESSAGE_USER_CREATED = "L'utilisateur a été créé avec succès."
MESSAGE_PASSWORD_RESET = "Le mot de passe a été réinitialisé avec succès."

# --- Messages de réinitialisation ---
ERROR_USER_NOT_RECOGNISED = "Utilisateur non reconnu."
ERROR_PASSWORD_ALREADY_REQUESTED = (
    "Un nouveau mot de passe a déjà été demandé pour cet utilisateur "
    "dans les dernières {hours} heures."
)
ERROR_TOKEN_REQUIRED = "Vous devez fournir un jeton."
ERROR_TOKEN_UNKNOWN = "Aucun utilisateur ne correspond au jeton de confirmation \"{token}\"."
