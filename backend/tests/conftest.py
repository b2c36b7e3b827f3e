# Standard Library

from typing import AsyncGenerator, List, Optional

# Third-Party Libraries
import pytest
import pytest_asyncio

from httpx import AsyncClient, ASGITransport
from sqlalchemy.ext.asyncio import AsyncSession, create_async_engine, AsyncEngine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool
from sqlmodel import SQLModel

# First-Party Libraries (Your project)
from src.main import app
from src.database import get_db_session
from src.users.models import User
from src.auth.security import get_password_hash, create_user_token

# URL de base pour la DB en mémoire
TEST_DATABASE_BASE_URL = "sqlite+aiosqlite:///:memory:"

# --- Fixtures de Base ---

@pytest_asyncio.fixture(scope="function")
async def db_session() -> AsyncGenerator[AsyncSession, None]:
    """Crée un engine, des tables, et fournit une session DB en mémoire pour chaque test."""
    # Une seule connexion partagée: la base en mémoire vit tant que l'engine existe
    engine: AsyncEngine = create_async_engine(TEST_DATABASE_BASE_URL, echo=False, poolclass=StaticPool)

    async with engine.begin() as conn:
        await conn.run_sync(SQLModel.metadata.create_all)

    TestingSessionLocal = sessionmaker(
        autocommit=False,
        autoflush=False,
        bind=engine,
        class_=AsyncSession,
        expire_on_commit=False,
    )

    async with TestingSessionLocal() as session:
        yield session

    await engine.dispose()

@pytest_asyncio.fixture(scope="function")
async def test_client(db_session: AsyncSession) -> AsyncGenerator[AsyncClient, None]:
    """Fournit un AsyncClient httpx qui utilise la session DB de test isolée."""
    async def override_get_db_session() -> AsyncGenerator[AsyncSession, None]:
        yield db_session

    app.dependency_overrides[get_db_session] = override_get_db_session
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as client:
        yield client
    app.dependency_overrides.clear()

# --- Fixtures Utilisateur et Authentification ---

async def create_test_user(
    db_session: AsyncSession,
    username: str,
    email: str,
    user_id: int,
    password: str,
    roles: Optional[List[str]] = None,
    enabled: bool = True,
) -> User:
    user = User(
        username=username,
        email=email,
        user_id=user_id,
        password=get_password_hash(password),
        roles=roles or [],
        enabled=enabled,
    )
    user.update_canonical_fields()
    db_session.add(user)
    await db_session.commit() # Commit pour obtenir l'ID
    await db_session.refresh(user)
    return user

@pytest_asyncio.fixture(scope="function")
async def test_user(db_session: AsyncSession) -> User:
    """Crée un utilisateur standard (user_id externe 42)."""
    return await create_test_user(db_session, "testuser", "testuser@example.com", 42, "testpassword")

@pytest_asyncio.fixture(scope="function")
async def test_user_2(db_session: AsyncSession) -> User:
    """Crée un deuxième utilisateur standard (user_id externe 43)."""
    return await create_test_user(db_session, "testuser2", "testuser2@example.com", 43, "testpassword2")

@pytest_asyncio.fixture(scope="function")
async def admin_user(db_session: AsyncSession) -> User:
    """Crée un utilisateur admin."""
    return await create_test_user(
        db_session, "admin", "admin@example.com", 1, "adminpassword", roles=["ROLE_ADMIN"]
    )

@pytest_asyncio.fixture(scope="function")
async def disabled_user(db_session: AsyncSession) -> User:
    """Crée un utilisateur désactivé."""
    return await create_test_user(
        db_session, "disabled", "disabled@example.com", 99, "disabledpassword", enabled=False
    )

def bearer(user: User) -> dict[str, str]:
    if user.id is None:
        pytest.fail("L'ID de l'utilisateur est None après commit/refresh.")
    return {"Authorization": f"Bearer {create_user_token(user)}"}

@pytest_asyncio.fixture(scope="function")
async def auth_headers_user(test_user: User) -> dict[str, str]:
    """Génère les headers d'authentification pour l'utilisateur standard."""
    return bearer(test_user)

@pytest_asyncio.fixture(scope="function")
async def auth_headers_user_2(test_user_2: User) -> dict[str, str]:
    """Génère les headers d'authentification pour le deuxième utilisateur standard."""
    return bearer(test_user_2)

@pytest_asyncio.fixture(scope="function")
async def auth_headers_admin(admin_user: User) -> dict[str, str]:
    """Génère les headers d'authentification pour l'utilisateur admin."""
    return bearer(admin_user)
