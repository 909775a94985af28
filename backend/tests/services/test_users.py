"""User directory tests."""

import uuid

from storefront.core.domain_types import Actor, UserRole
from storefront.services.users import UserDirectory, find_user


async def test_create_user_normalizes_email(test_db):
    result = await UserDirectory(test_db).create_user(" Carol@Example.com ", "Carol")
    assert result["user"].email == "carol@example.com"
    assert result["user"].role == "consumer"


async def test_duplicate_email_is_invalid(test_db, consumer):
    result = await UserDirectory(test_db).create_user(
        consumer.email, "Alice again", UserRole.CONSUMER,
    )
    assert result["error_code"] == "INVALID_REQUEST"


async def test_anonymous_cannot_register_privileged_roles(test_db):
    directory = UserDirectory(test_db)
    for role in (UserRole.PROVIDER, UserRole.ADMIN):
        result = await directory.create_user(f"{role.value}@example.com", "Mallory", role)
        assert result["error_code"] == "FORBIDDEN"


async def test_non_admin_cannot_register_provider(test_db, provider):
    result = await UserDirectory(test_db).create_user(
        "friend@example.com", "Friend", UserRole.PROVIDER, Actor.from_record(provider),
    )
    assert result["error_code"] == "FORBIDDEN"


async def test_admin_registers_provider(test_db, admin):
    result = await UserDirectory(test_db).create_user(
        "shop@example.com", "Shop", UserRole.PROVIDER, Actor.from_record(admin),
    )
    assert result["user"].role == "provider"


async def test_resolve_actor_uses_stored_role(test_db, provider):
    result = await UserDirectory(test_db).resolve_actor(provider.id)
    assert result["actor"] == Actor.from_record(provider)
    assert result["actor"].role == UserRole.PROVIDER


async def test_resolve_unknown_actor(test_db):
    result = await UserDirectory(test_db).resolve_actor(uuid.uuid4())
    assert result["error_code"] == "NOT_FOUND"


async def test_user_sees_own_profile(test_db, consumer):
    result = await UserDirectory(test_db).get_user(Actor.from_record(consumer), consumer.id)
    assert result["user"].id == consumer.id


async def test_user_cannot_see_others(test_db, consumer, other_consumer):
    result = await UserDirectory(test_db).get_user(
        Actor.from_record(other_consumer), consumer.id,
    )
    assert result["error_code"] == "FORBIDDEN"


async def test_admin_lookup_of_unknown_user(test_db, admin):
    result = await UserDirectory(test_db).get_user(Actor.from_record(admin), uuid.uuid4())
    assert result["error_code"] == "NOT_FOUND"


async def test_find_user_with_role(test_db, provider):
    assert await find_user(test_db, provider.id, UserRole.PROVIDER) is not None
    assert await find_user(test_db, provider.id, UserRole.CONSUMER) is None
