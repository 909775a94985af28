"""User Routes — registration records and profile lookup.

Invariants:
    - Anonymous callers may only register consumer accounts;
      provider and admin accounts are registered by an admin
    - GET /users/{id} is limited to the user themself or an admin
"""

from uuid import UUID

from fastapi import APIRouter, Depends, status

from storefront.api.dependencies import (
    get_actor, get_optional_actor, get_user_directory,
)
from storefront.api.results import unwrap
from storefront.core.domain_types import Actor
from storefront.schemas.user import UserCreate, UserResponse
from storefront.services.users import UserDirectory

router = APIRouter(prefix="/api/v1/users", tags=["users"])


@router.post(
    "", response_model=UserResponse, status_code=status.HTTP_201_CREATED,
)
async def create_user(
    body: UserCreate,
    actor: Actor | None = Depends(get_optional_actor),
    users: UserDirectory = Depends(get_user_directory),
):
    result = unwrap(
        await users.create_user(body.email, body.name, body.role, actor), actor,
    )
    return UserResponse.model_validate(result["user"])


@router.get("/{user_id}", response_model=UserResponse)
async def get_user(
    user_id: UUID,
    actor: Actor = Depends(get_actor),
    users: UserDirectory = Depends(get_user_directory),
):
    result = unwrap(await users.get_user(actor, user_id), actor, user_id)
    return UserResponse.model_validate(result["user"])
