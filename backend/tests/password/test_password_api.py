"""
Tests d'intégration pour le changement et la réinitialisation du mot de passe.
"""
from datetime import datetime, timedelta, timezone

import pytest
from httpx import AsyncClient
from fastapi import status
from fastapi.responses import JSONResponse
from sqlalchemy.ext.asyncio import AsyncSession

from src.auth.security import verify_password
from src.main import app
from src.users.constants import (
    ERROR_CURRENT_PASSWORD_INVALID,
    ERROR_PASSWORD_MISMATCH,
    ERROR_PASSWORD_SHORT,
    MESSAGE_PASSWORD_RESET,
    VALIDATION_FAILED,
)
from src.users.hooks import HookDispatcher, LifecycleEvent, UserLifecycleHooks, get_hook_dispatcher
from src.users.models import User

pytestmark = pytest.mark.asyncio

# --- Tests pour POST /password/{user_id}/edit ---

async def test_change_own_password(
    test_client: AsyncClient, test_user: User, auth_headers_user: dict[str, str], db_session: AsyncSession
):
    response = await test_client.post(
        "/password/42/edit",
        json={"current_password": "testpassword", "plainPassword": "newpassword123"},
        headers=auth_headers_user,
    )
    assert response.status_code == status.HTTP_204_NO_CONTENT
    assert response.content == b""
    await db_session.refresh(test_user)
    assert verify_password("newpassword123", test_user.password)

async def test_change_password_repeated_form(
    test_client: AsyncClient, test_user: User, auth_headers_user: dict[str, str]
):
    response = await test_client.post(
        "/password/42/edit",
        json={
            "current_password": "testpassword",
            "plainPassword": {"first": "newpassword123", "second": "newpassword123"},
        },
        headers=auth_headers_user,
    )
    assert response.status_code == status.HTTP_204_NO_CONTENT

async def test_change_password_mismatch(
    test_client: AsyncClient, test_user: User, auth_headers_user: dict[str, str]
):
    response = await test_client.post(
        "/password/42/edit",
        json={
            "current_password": "testpassword",
            "plainPassword": {"first": "newpassword123", "second": "otherpassword123"},
        },
        headers=auth_headers_user,
    )
    assert response.status_code == status.HTTP_400_BAD_REQUEST
    assert response.json()["errors"]["plainPassword"] == [ERROR_PASSWORD_MISMATCH]

async def test_change_password_wrong_current_password(
    test_client: AsyncClient, test_user: User, auth_headers_user: dict[str, str], db_session: AsyncSession
):
    response = await test_client.post(
        "/password/42/edit",
        json={"current_password": "wrong", "plainPassword": "newpassword123"},
        headers=auth_headers_user,
    )
    assert response.status_code == status.HTTP_400_BAD_REQUEST
    data = response.json()
    assert data["detail"] == VALIDATION_FAILED
    assert data["errors"]["current_password"] == [ERROR_CURRENT_PASSWORD_INVALID]
    await db_session.refresh(test_user)
    assert verify_password("testpassword", test_user.password)

async def test_change_password_too_short(
    test_client: AsyncClient, test_user: User, auth_headers_user: dict[str, str]
):
    response = await test_client.post(
        "/password/42/edit",
        json={"current_password": "testpassword", "plainPassword": "short"},
        headers=auth_headers_user,
    )
    assert response.status_code == status.HTTP_400_BAD_REQUEST
    assert response.json()["errors"]["plainPassword"] == [ERROR_PASSWORD_SHORT]

async def test_change_password_of_other_user_forbidden(
    test_client: AsyncClient, test_user: User, test_user_2: User, auth_headers_user: dict[str, str]
):
    response = await test_client.post(
        "/password/43/edit",
        json={"current_password": "testpassword", "plainPassword": "newpassword123"},
        headers=auth_headers_user,
    )
    assert response.status_code == status.HTTP_403_FORBIDDEN

async def test_admin_can_change_password_of_other_user(
    test_client: AsyncClient,
    test_user: User,
    admin_user: User,
    auth_headers_admin: dict[str, str],
    db_session: AsyncSession,
):
    response = await test_client.post(
        "/password/42/edit",
        json={"current_password": "adminpassword", "plainPassword": "newpassword123"},
        headers=auth_headers_admin,
    )
    assert response.status_code == status.HTTP_204_NO_CONTENT
    await db_session.refresh(test_user)
    assert verify_password("newpassword123", test_user.password)

async def test_change_password_unknown_user(test_client: AsyncClient, auth_headers_user: dict[str, str]):
    response = await test_client.post(
        "/password/777/edit",
        json={"current_password": "testpassword", "plainPassword": "newpassword123"},
        headers=auth_headers_user,
    )
    assert response.status_code == status.HTTP_404_NOT_FOUND

async def test_change_password_unauthenticated(test_client: AsyncClient, test_user: User):
    response = await test_client.post(
        "/password/42/edit",
        json={"current_password": "testpassword", "plainPassword": "newpassword123"},
    )
    assert response.status_code == status.HTTP_401_UNAUTHORIZED

# --- Tests pour POST /password/reset/request ---

async def test_reset_request_issues_token(
    test_client: AsyncClient, test_user: User, db_session: AsyncSession
):
    response = await test_client.post("/password/reset/request", json={"username": "testuser"})
    assert response.status_code == status.HTTP_200_OK
    token = response.json()["token"]
    assert token
    await db_session.refresh(test_user)
    assert test_user.confirmation_token == token
    assert test_user.password_requested_at is not None

async def test_reset_request_by_email(test_client: AsyncClient, test_user: User):
    response = await test_client.post("/password/reset/request", json={"username": "testuser@example.com"})
    assert response.status_code == status.HTTP_200_OK

async def test_reset_request_unknown_user(test_client: AsyncClient):
    response = await test_client.post("/password/reset/request", json={"username": "nobody"})
    assert response.status_code == status.HTTP_403_FORBIDDEN

async def test_reset_request_twice_within_ttl(
    test_client: AsyncClient, test_user: User, db_session: AsyncSession
):
    first = await test_client.post("/password/reset/request", json={"username": "testuser"})
    assert first.status_code == status.HTTP_200_OK
    await db_session.refresh(test_user)
    requested_at = test_user.password_requested_at

    second = await test_client.post("/password/reset/request", json={"username": "testuser"})
    assert second.status_code == status.HTTP_403_FORBIDDEN
    assert "24" in second.json()["detail"]
    await db_session.refresh(test_user)
    assert test_user.password_requested_at == requested_at

async def test_reset_request_after_ttl_keeps_token(
    test_client: AsyncClient, test_user: User, db_session: AsyncSession
):
    test_user.confirmation_token = "existing-token"
    test_user.password_requested_at = datetime.now(timezone.utc) - timedelta(days=2)
    db_session.add(test_user)
    await db_session.commit()

    response = await test_client.post("/password/reset/request", json={"username": "testuser"})
    assert response.status_code == status.HTTP_200_OK
    assert response.json()["token"] == "existing-token"

# --- Tests pour POST /password/reset/confirm ---

async def test_reset_confirm_updates_password_and_clears_token(
    test_client: AsyncClient, test_user: User, db_session: AsyncSession
):
    request = await test_client.post("/password/reset/request", json={"username": "testuser"})
    token = request.json()["token"]

    response = await test_client.post(
        "/password/reset/confirm", params={"token": token}, json={"plainPassword": "resetpassword123"}
    )
    assert response.status_code == status.HTTP_200_OK
    assert response.json() == {"message": MESSAGE_PASSWORD_RESET}

    await db_session.refresh(test_user)
    assert test_user.confirmation_token is None
    assert test_user.password_requested_at is None
    assert verify_password("resetpassword123", test_user.password)

    login = await test_client.post("/login", json={"username": "testuser", "password": "resetpassword123"})
    assert login.status_code == status.HTTP_200_OK

async def test_reset_confirm_twice_with_same_token(test_client: AsyncClient, test_user: User):
    request = await test_client.post("/password/reset/request", json={"username": "testuser"})
    token = request.json()["token"]

    first = await test_client.post(
        "/password/reset/confirm", params={"token": token}, json={"plainPassword": "resetpassword123"}
    )
    assert first.status_code == status.HTTP_200_OK
    second = await test_client.post(
        "/password/reset/confirm", params={"token": token}, json={"plainPassword": "anotherpassword123"}
    )
    assert second.status_code == status.HTTP_400_BAD_REQUEST

async def test_reset_confirm_missing_token(test_client: AsyncClient):
    response = await test_client.post("/password/reset/confirm", json={"plainPassword": "resetpassword123"})
    assert response.status_code == status.HTTP_400_BAD_REQUEST

async def test_reset_confirm_unknown_token(test_client: AsyncClient):
    response = await test_client.post(
        "/password/reset/confirm", params={"token": "nope"}, json={"plainPassword": "resetpassword123"}
    )
    assert response.status_code == status.HTTP_400_BAD_REQUEST
    assert "nope" in response.json()["detail"]

async def test_reset_confirm_invalid_password_keeps_token(
    test_client: AsyncClient, test_user: User, db_session: AsyncSession
):
    request = await test_client.post("/password/reset/request", json={"username": "testuser"})
    token = request.json()["token"]

    response = await test_client.post(
        "/password/reset/confirm",
        params={"token": token},
        json={"plainPassword": "short", "unexpected": "ignored"},
    )
    assert response.status_code == status.HTTP_400_BAD_REQUEST
    assert response.json()["errors"]["plainPassword"] == [ERROR_PASSWORD_SHORT]
    await db_session.refresh(test_user)
    assert test_user.confirmation_token == token

async def test_reset_confirm_enables_disabled_user(
    test_client: AsyncClient, disabled_user: User, db_session: AsyncSession
):
    request = await test_client.post("/password/reset/request", json={"username": "disabled"})
    token = request.json()["token"]

    response = await test_client.post(
        "/password/reset/confirm", params={"token": token}, json={"plainPassword": "resetpassword123"}
    )
    assert response.status_code == status.HTTP_200_OK
    await db_session.refresh(disabled_user)
    assert disabled_user.enabled is True

# --- Hooks du cycle de vie ---

def use_hooks(*hooks: UserLifecycleHooks) -> None:
    app.dependency_overrides[get_hook_dispatcher] = lambda: HookDispatcher(hooks)

class SilentResetHooks(UserLifecycleHooks):
    """Répond de la même façon que l'utilisateur soit connu ou non."""
    def __init__(self):
        self.users = []

    async def resetting_send_email_initialize(self, event: LifecycleEvent):
        self.users.append(event.user)
        return JSONResponse(content={"sent": True})

class HoldResetEmailHooks(UserLifecycleHooks):
    async def resetting_send_email_confirm(self, event: LifecycleEvent):
        return JSONResponse(status_code=status.HTTP_202_ACCEPTED, content={"queued": event.user.username})

class LockedPasswordHooks(UserLifecycleHooks):
    def __init__(self):
        self.completed = False

    async def change_password_initialize(self, event: LifecycleEvent):
        return JSONResponse(status_code=status.HTTP_423_LOCKED, content={"locked": event.user.user_id})

    async def change_password_completed(self, event: LifecycleEvent):
        self.completed = True

class ChangePasswordRecorder(UserLifecycleHooks):
    def __init__(self):
        self.calls = []

    async def change_password_initialize(self, event: LifecycleEvent):
        self.calls.append("initialize")

    async def change_password_success(self, event: LifecycleEvent):
        self.calls.append("success")
        assert event.form.plain_password == "newpassword123"

    async def change_password_completed(self, event: LifecycleEvent):
        self.calls.append("completed")
        assert event.response.status_code == status.HTTP_204_NO_CONTENT

async def test_reset_request_initialize_hook_replaces_unknown_user_error(test_client: AsyncClient):
    hooks = SilentResetHooks()
    use_hooks(hooks)
    response = await test_client.post("/password/reset/request", json={"username": "nobody"})
    assert response.status_code == status.HTTP_200_OK
    assert response.json() == {"sent": True}
    assert hooks.users == [None]

async def test_reset_request_initialize_hook_receives_known_user(test_client: AsyncClient, test_user: User):
    hooks = SilentResetHooks()
    use_hooks(hooks)
    response = await test_client.post("/password/reset/request", json={"username": "testuser"})
    assert response.status_code == status.HTTP_200_OK
    assert hooks.users[0].id == test_user.id

async def test_reset_request_confirm_hook_skips_stamp(
    test_client: AsyncClient, test_user: User, db_session: AsyncSession
):
    use_hooks(HoldResetEmailHooks())
    response = await test_client.post("/password/reset/request", json={"username": "testuser"})
    assert response.status_code == status.HTTP_202_ACCEPTED
    assert response.json() == {"queued": "testuser"}
    await db_session.refresh(test_user)
    assert test_user.password_requested_at is None
    assert test_user.confirmation_token is None

async def test_change_password_initialize_hook_skips_persistence(
    test_client: AsyncClient, test_user: User, auth_headers_user: dict[str, str], db_session: AsyncSession
):
    hooks = LockedPasswordHooks()
    use_hooks(hooks)
    response = await test_client.post(
        "/password/42/edit",
        json={"current_password": "testpassword", "plainPassword": "newpassword123"},
        headers=auth_headers_user,
    )
    assert response.status_code == status.HTTP_423_LOCKED
    assert response.json() == {"locked": 42}
    assert hooks.completed is False
    await db_session.refresh(test_user)
    assert verify_password("testpassword", test_user.password)

async def test_change_password_hooks_called_in_order(
    test_client: AsyncClient, test_user: User, auth_headers_user: dict[str, str]
):
    hooks = ChangePasswordRecorder()
    use_hooks(hooks)
    response = await test_client.post(
        "/password/42/edit",
        json={"current_password": "testpassword", "plainPassword": "newpassword123"},
        headers=auth_headers_user,
    )
    assert response.status_code == status.HTTP_204_NO_CONTENT
    assert hooks.calls == ["initialize", "success", "completed"]
