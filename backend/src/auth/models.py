"""
Module définissant les schémas de réponse de l'authentification.

Ce module contient :
- LoginRequest : Corps attendu par POST /login.
- TokenResponse : Réponse contenant le token JWT.
- MessageResponse : Réponse simple avec un message.
"""
from sqlmodel import SQLModel

class LoginRequest(SQLModel):
    """Identifiants soumis à POST /login (username ou email)."""
    username: str
    password: str

class TokenResponse(SQLModel):
    """Schéma pour la réponse contenant le token d'accès."""
    token: str

class MessageResponse(SQLModel):
    message: str
