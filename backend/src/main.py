"""
Module principal de l'application FastAPI UserBridge.

Ce module configure et initialise l'instance FastAPI, ajoute les middlewares
nécessaires (connexion JSON, CORS), enregistre les gestionnaires d'erreurs de
validation et inclut les routeurs (authentification, mot de passe, profil,
inscription).
"""
import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from src.config import settings
from src.database import create_tables
from src.users.constants import VALIDATION_FAILED
from src.users.exceptions import FormErrors, FormValidationError, UserAlreadyExistsError

# --- Importer les routeurs ---
from src.auth.middleware import JsonLoginMiddleware
from src.auth.router import auth_router
from src.password.router import password_router
from src.profile.router import profile_router
from src.registration.router import registration_router

# Configurer le logging
logging.basicConfig(level=settings.LOG_LEVEL.upper())
logger = logging.getLogger(__name__)

@asynccontextmanager
async def lifespan(app: FastAPI):
    if settings.DB_AUTO_CREATE:
        logger.info("Création des tables (DB_AUTO_CREATE actif)")
        await create_tables()
    yield

app = FastAPI(
    title="UserBridge API",
    description="API REST de gestion des utilisateurs: connexion, inscription, mot de passe et profil.",
    version="1.0.0",
    lifespan=lifespan,
)

# Le middleware ajouté en dernier est le plus externe: CORS enveloppe la connexion
app.add_middleware(JsonLoginMiddleware, login_path=settings.LOGIN_PATH)
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
    expose_headers=["Location", "ETag"],
)

# ======================================================
# Gestionnaires d'erreurs
# ======================================================
def validation_failed(errors: FormErrors) -> JSONResponse:
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content={"detail": VALIDATION_FAILED, "errors": errors},
    )

@app.exception_handler(FormValidationError)
async def form_validation_error_handler(request: Request, exc: FormValidationError):
    return validation_failed(exc.errors)

@app.exception_handler(UserAlreadyExistsError)
async def user_already_exists_handler(request: Request, exc: UserAlreadyExistsError):
    return validation_failed({"form": [str(exc)]})

@app.exception_handler(RequestValidationError)
async def request_validation_error_handler(request: Request, exc: RequestValidationError):
    errors: FormErrors = {}
    for error in exc.errors():
        loc = [str(part) for part in error.get("loc", ())]
        field = ".".join(loc[1:]) or (loc[0] if loc else "form")
        errors.setdefault(field, []).append(error.get("msg", ""))
    logger.info(f"[Main] Requête invalide sur {request.url.path}: {sorted(errors)}")
    return validation_failed(errors)

# ======================================================
# Inclure les routeurs
# ======================================================
app.include_router(auth_router)
app.include_router(password_router)
app.include_router(profile_router)
app.include_router(registration_router)

@app.get("/", tags=["Root"])
async def read_root():
    return {"message": "Bienvenue sur l'API UserBridge"}
