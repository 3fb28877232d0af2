"""Auth dependency tests (Supabase Auth mocked)."""

from types import SimpleNamespace
from unittest.mock import AsyncMock, MagicMock, patch

import pytest
from fastapi import HTTPException
from httpx import ASGITransport, AsyncClient

from polyglai.main import app
from polyglai.middleware.auth import AuthUser, _bearer_token, get_current_user, require_admin, resolve_user
from polyglai.translator.microsoft import TranslationResult, get_translator


@pytest.mark.parametrize(
    "header,expected",
    [
        ("Bearer abc.def", "abc.def"),
        ("bearer abc", "abc"),
        ("Basic abc", None),
        ("Bearer", None),
        (None, None),
    ],
)
def test_bearer_token(header, expected):
    assert _bearer_token(header) == expected


def _client(get_user: AsyncMock) -> MagicMock:
    client = MagicMock()
    client.auth.get_user = get_user
    return client


@pytest.mark.asyncio
async def test_resolve_user():
    user = SimpleNamespace(id="user-1", email="a@b.c", app_metadata={"role": "admin"})
    client = _client(AsyncMock(return_value=SimpleNamespace(user=user)))
    with patch("polyglai.middleware.auth.get_client", AsyncMock(return_value=client)):
        resolved = await resolve_user("token")
    assert resolved.id == "user-1"
    assert resolved.is_admin


@pytest.mark.asyncio
async def test_resolve_user_rejected_token():
    client = _client(AsyncMock(side_effect=RuntimeError("invalid JWT")))
    with patch("polyglai.middleware.auth.get_client", AsyncMock(return_value=client)):
        assert await resolve_user("bad") is None


@pytest.mark.asyncio
async def test_current_user_required():
    with pytest.raises(HTTPException) as exc:
        await get_current_user(None)
    assert exc.value.status_code == 401


@pytest.mark.asyncio
async def test_require_admin():
    with pytest.raises(HTTPException) as exc:
        await require_admin(AuthUser(id="user-1"))
    assert exc.value.status_code == 403

    admin = AuthUser(id="admin", app_metadata={"role": "admin"})
    assert await require_admin(admin) is admin


@pytest.mark.asyncio
async def test_resolve_user_client_unavailable():
    """A Supabase client that cannot be built falls back to anonymous."""
    with patch("polyglai.middleware.auth.get_client", AsyncMock(side_effect=RuntimeError("no url"))):
        assert await resolve_user("token") is None


@pytest.mark.asyncio
async def test_translate_with_token_when_auth_is_down():
    translator = MagicMock()
    translator.translate_with_transliteration = AsyncMock(
        return_value=TranslationResult(translation="hola")
    )
    app.dependency_overrides[get_translator] = lambda: translator
    try:
        with patch("polyglai.middleware.auth.get_client", AsyncMock(side_effect=RuntimeError("no url"))):
            async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as client:
                response = await client.post(
                    "/translate",
                    json={"text": "hello"},
                    headers={"Authorization": "Bearer abc"},
                )
    finally:
        app.dependency_overrides.clear()

    assert response.status_code == 200
    assert response.json()["translation"] == "hola"
