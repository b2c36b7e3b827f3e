"""
Constantes pour le module d'authentification.

Ce module contient les constantes utilisées dans le module d'authentification.
"""

# --- Messages d'erreur ---
ERROR_CREDENTIALS_INVALID = "Nom d'utilisateur ou mot de passe incorrect"
ERROR_LOGIN_BAD_REQUEST = "Le corps de la requête doit être un objet JSON avec \"username\" et \"password\""
ERROR_TOKEN_INVALID = "Token d'authentification invalide"
ERROR_TOKEN_MISSING = "Token d'authentification manquant"
ERROR_USER_INACTIVE = "Compte utilisateur inactif"
ERROR_PERMISSION_DENIED = "Permission refusée"
ERROR_PROFILE_FORBIDDEN = "Vous ne pouvez pas accéder à ces informations"

# --- Messages de succès ---
MESSAGE_AUTHENTICATED = "Vous êtes authentifié !"

# --- En-têtes HTTP ---
HEADER_WWW_AUTHENTICATE = "WWW-Authenticate"
HEADER_WWW_AUTHENTICATE_VALUE = "Bearer"
