"""
Tests for guest resolution and user registration.
"""
import asyncio

import pytest

from convochat.core.security import verify_password
from convochat.repositories.user_repository import UserRepository
from convochat.services.identity_resolver import IdentityResolver
from convochat.services.user_service import UserExistsError, UserService


async def test_guest_is_created_once(user_service):
    resolver = IdentityResolver(user_service)

    first = await resolver.resolve_or_create_guest()
    second = await resolver.resolve_or_create_guest()

    assert first.id == second.id
    assert first.username == "guest"
    assert first.email == "guest@example.com"
    assert verify_password("guest123", first.hashed_password)


async def test_guest_resolution_is_safe_when_concurrent(session_factory):
    async def resolve():
        async with session_factory() as session:
            resolver = IdentityResolver(UserService(UserRepository(session)))
            guest = await resolver.resolve_or_create_guest()
            return guest.id

    ids = await asyncio.gather(resolve(), resolve(), resolve())
    assert len(set(ids)) == 1


async def test_guest_created_between_lookup_and_insert_is_reread(user_service, monkeypatch):
    existing = await user_service.register("guest", "guest@example.com", "guest123")
    repository = user_service.repository
    real_lookup = repository.get_by_username
    calls = []

    async def stale_first_lookup(username):
        calls.append(username)
        if len(calls) == 1:
            return None
        return await real_lookup(username)

    monkeypatch.setattr(repository, "get_by_username", stale_first_lookup)

    guest = await IdentityResolver(user_service).resolve_or_create_guest()
    assert guest.id == existing.id


async def test_guest_email_taken_by_another_account_raises(user_service):
    await user_service.register("someone", "guest@example.com", "password")

    with pytest.raises(UserExistsError):
        await IdentityResolver(user_service).resolve_or_create_guest()


async def test_custom_guest_identity(user_service):
    resolver = IdentityResolver(user_service, username="visitor", email="visitor@example.com", password="pw123456")
    guest = await resolver.resolve_or_create_guest()
    assert guest.username == "visitor"


async def test_register_rejects_duplicates(user_service):
    await user_service.register("alice", "alice@example.com", "password")

    with pytest.raises(UserExistsError, match="Username"):
        await user_service.register("alice", "other@example.com", "password")
    with pytest.raises(UserExistsError, match="Email"):
        await user_service.register("other", "alice@example.com", "password")


async def test_register_maps_integrity_error(user_service, monkeypatch):
    await user_service.register("alice", "alice@example.com", "password")
    repository = user_service.repository

    async def missing(_):
        return None

    # Simulate a competing insert that the pre-checks did not see
    monkeypatch.setattr(repository, "get_by_username", missing)
    monkeypatch.setattr(repository, "get_by_email", missing)

    with pytest.raises(UserExistsError):
        await user_service.register("alice", "alice@example.com", "password")


async def test_authenticate(user_service):
    user = await user_service.register("alice", "alice@example.com", "password")

    assert (await user_service.authenticate("alice", "password")).id == user.id
    assert await user_service.authenticate("alice", "wrong") is None
    assert await user_service.authenticate("nobody", "password") is None
