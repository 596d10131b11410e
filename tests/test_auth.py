from __future__ import annotations

from types import SimpleNamespace
from uuid import uuid4

import pytest
from fastapi import HTTPException
from jose import JWTError

from src.core.auth import (
    AuthContext,
    JwksCache,
    _decode_access_token,
    _get_signing_key,
    require_auth_context,
    require_owner,
    subject_to_user_id,
)


class _FakeSession:
    def __init__(self, value: object | None) -> None:
        self._value = value

    async def scalar(self, stmt):  # noqa: ANN001
        return self._value


def _ctx(*, role: str = "owner") -> AuthContext:
    return AuthContext(
        user_id=uuid4(),
        organization_id=uuid4(),
        subject="user_1",
        role=role,
    )


def test_subject_to_user_id_parses_uuid_subjects() -> None:
    user_id = uuid4()
    assert subject_to_user_id(str(user_id)) == user_id

    with pytest.raises(HTTPException) as exc:
        subject_to_user_id("user_abc")
    assert exc.value.status_code == 403

    with pytest.raises(HTTPException):
        subject_to_user_id(None)


@pytest.mark.asyncio
async def test_require_owner_allows_owner() -> None:
    ctx = _ctx(role="owner")
    assert await require_owner(ctx) is ctx


@pytest.mark.asyncio
@pytest.mark.parametrize("role", ["admin", "receptionist", "professional"])
async def test_require_owner_blocks_other_roles(role: str) -> None:
    with pytest.raises(HTTPException) as exc:
        await require_owner(_ctx(role=role))
    assert exc.value.status_code == 403


def test_get_signing_key_missing_kid(monkeypatch: pytest.MonkeyPatch) -> None:
    from src.core import auth

    monkeypatch.setattr(auth.jwt, "get_unverified_header", lambda token: {})
    with pytest.raises(HTTPException) as exc:
        _get_signing_key("token")
    assert exc.value.status_code == 401


def test_get_signing_key_no_matching_key(monkeypatch: pytest.MonkeyPatch) -> None:
    from src.core import auth

    monkeypatch.setattr(auth.jwt, "get_unverified_header", lambda token: {"kid": "abc"})
    monkeypatch.setattr(auth.jwks_cache, "get", lambda url: {"keys": [{"kid": "zzz"}]})

    with pytest.raises(HTTPException) as exc:
        _get_signing_key("token")
    assert exc.value.status_code == 401


def test_decode_access_token_invalid(monkeypatch: pytest.MonkeyPatch) -> None:
    from src.core import auth

    monkeypatch.setattr(auth, "_get_signing_key", lambda token: {"kid": "abc"})

    def _boom(*args, **kwargs):  # noqa: ANN002, ANN003
        raise JWTError("bad token")

    monkeypatch.setattr(auth.jwt, "decode", _boom)
    with pytest.raises(HTTPException) as exc:
        _decode_access_token("token")
    assert exc.value.status_code == 401


def test_jwks_cache_fetches_and_reuses(monkeypatch: pytest.MonkeyPatch) -> None:
    from src.core import auth

    calls = {"count": 0}

    class _Resp:
        def raise_for_status(self) -> None:
            return None

        def json(self) -> dict:
            return {"keys": [{"kid": "a"}]}

    def _get(url: str, timeout: int):  # noqa: ANN001
        calls["count"] += 1
        return _Resp()

    monkeypatch.setattr(auth.requests, "get", _get)
    cache = JwksCache(ttl_seconds=300)

    assert cache.get("https://auth.example/jwks") == {"keys": [{"kid": "a"}]}
    assert cache.get("https://auth.example/jwks") == {"keys": [{"kid": "a"}]}
    assert calls["count"] == 1


@pytest.mark.asyncio
async def test_require_auth_context_resolves_profile(monkeypatch: pytest.MonkeyPatch) -> None:
    from src.core import auth

    user_id = uuid4()
    organization_id = uuid4()
    claims = {"sub": str(user_id), "email": "ana@clinica.example"}
    monkeypatch.setattr(auth, "_decode_access_token", lambda token: claims)
    profile = SimpleNamespace(id=user_id, organization_id=organization_id, role="owner")
    request = SimpleNamespace(state=SimpleNamespace())

    context = await require_auth_context(
        request,
        credentials=SimpleNamespace(credentials="token"),
        session=_FakeSession(profile),
    )

    assert context.user_id == user_id
    assert context.organization_id == organization_id
    assert context.role == "owner"
    assert context.email == "ana@clinica.example"
    assert request.state.organization_id == organization_id


@pytest.mark.asyncio
async def test_require_auth_context_downgrades_unknown_role(monkeypatch: pytest.MonkeyPatch) -> None:
    from src.core import auth

    user_id = uuid4()
    monkeypatch.setattr(auth, "_decode_access_token", lambda token: {"sub": str(user_id)})
    profile = SimpleNamespace(id=user_id, organization_id=uuid4(), role="superuser")

    context = await require_auth_context(
        SimpleNamespace(state=SimpleNamespace()),
        credentials=SimpleNamespace(credentials="token"),
        session=_FakeSession(profile),
    )

    assert context.role == "professional"


@pytest.mark.asyncio
async def test_require_auth_context_without_profile(monkeypatch: pytest.MonkeyPatch) -> None:
    from src.core import auth

    monkeypatch.setattr(auth, "_decode_access_token", lambda token: {"sub": str(uuid4())})

    with pytest.raises(HTTPException) as exc:
        await require_auth_context(
            SimpleNamespace(state=SimpleNamespace()),
            credentials=SimpleNamespace(credentials="token"),
            session=_FakeSession(None),
        )
    assert exc.value.status_code == 403
