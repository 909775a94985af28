"""User Directory — registration records and lookups backing authorization.

Invariants:
    - Emails are unique (duplicate -> INVALID_REQUEST)
    - Only consumers self-register; provider/admin accounts need an admin caller
    - find_user returns None rather than an error result (used by other services)
    - resolve_actor is the only path from a raw caller id to an Actor
"""

import logging

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from storefront.core.domain_types import Actor, UserId, UserRole
from storefront.core.results import forbidden, invalid_request, not_found, ok_result
from storefront.models.user import User
from storefront.services.storage_guard import storage_guard

logger = logging.getLogger(__name__)


async def find_user(
    db: AsyncSession, user_id: UserId, role: UserRole | None = None,
) -> User | None:
    """Load a user, optionally requiring a role."""
    query = select(User).where(User.id == user_id)
    if role is not None:
        query = query.where(User.role == role.value)
    result = await db.execute(query)
    return result.scalar_one_or_none()


def check_may_register(role: UserRole, actor: Actor | None) -> dict | None:
    if role != UserRole.CONSUMER and not (actor and actor.is_admin):
        return forbidden(f"Only an admin can register a {role.value} account.")
    return None


class UserDirectory:
    def __init__(self, db: AsyncSession):
        self.db = db

    @storage_guard("user registration")
    async def create_user(
        self,
        email: str,
        name: str,
        role: UserRole = UserRole.CONSUMER,
        actor: Actor | None = None,
    ) -> dict:
        error = check_may_register(role, actor)
        if error:
            return error

        user = User(email=email.strip().lower(), name=name.strip(), role=role.value)
        try:
            self.db.add(user)
            await self.db.commit()
        except IntegrityError:
            await self.db.rollback()
            return invalid_request(f"Email '{email}' is already registered.")
        logger.info(f"User registered as {role.value}", extra={"actor_id": user.id})
        return ok_result(user=user)

    @storage_guard("caller lookup")
    async def resolve_actor(self, user_id: UserId) -> dict:
        """Result carries `actor` built from the stored role."""
        user = await find_user(self.db, user_id)
        if not user:
            return not_found("User", user_id)
        return ok_result(actor=Actor.from_record(user))

    @storage_guard("user lookup")
    async def get_user(self, actor: Actor, user_id: UserId) -> dict:
        if actor.id != user_id and not actor.is_admin:
            return forbidden("Users can only view their own profile.")
        user = await find_user(self.db, user_id)
        if not user:
            return not_found("User", user_id)
        return ok_result(user=user)
