# fitflow/routes/users.py
"""
User directory routes.

Endpoints:
    GET /users - All users (admin)
    GET /users/role/{email} - Role lookup, ``member`` when unknown
    GET /users/{email} - One user
    POST /users - Register or refresh a user; never assigns a role
    PATCH /users - Update sign-in time; role changes are admin-only
    DELETE /users/{email} - Remove a user (admin)
"""

from typing import List

from fastapi import APIRouter, Depends, status

from ..api.dependencies import get_current_principal, get_user_service, require_admin
from ..core.enums import UserRole
from ..principal import Principal
from ..schemas.common import MessageResponse
from ..schemas.user import (
    RoleResponse,
    UserResponse,
    UserUpdateRequest,
    UserUpsertRequest,
    UserUpsertResponse,
)
from ..services.user_service import UserService

router = APIRouter(prefix="/users", tags=["users"])


@router.get("", response_model=List[UserResponse])
def list_users(
    _: Principal = Depends(require_admin),
    service: UserService = Depends(get_user_service),
) -> List[UserResponse]:
    return [UserResponse.model_validate(user) for user in service.list_users()]


@router.get("/role/{email}", response_model=RoleResponse)
def get_role(email: str, service: UserService = Depends(get_user_service)) -> RoleResponse:
    """
    Role lookup used by the frontend before a user is registered.

    An unknown email answers ``member`` rather than 404 on purpose: every
    person starts as a member, and registration never grants another role.
    """
    return RoleResponse(role=UserRole(service.get_role(email)))


@router.get("/{email}", response_model=UserResponse)
def get_user(
    email: str,
    _: Principal = Depends(get_current_principal),
    service: UserService = Depends(get_user_service),
) -> UserResponse:
    return UserResponse.model_validate(service.get_user(email))


@router.post("", response_model=UserUpsertResponse)
def upsert_user(
    payload: UserUpsertRequest,
    service: UserService = Depends(get_user_service),
) -> UserUpsertResponse:
    user, created = service.upsert_user(
        email=payload.email,
        display_name=payload.display_name,
        photo_url=payload.photo_url,
        last_sign_in_time=payload.last_sign_in_time,
    )
    return UserUpsertResponse(
        message="User created" if created else "User updated",
        created=created,
        user=UserResponse.model_validate(user),
    )


@router.patch("", response_model=UserResponse)
def update_user(
    payload: UserUpdateRequest,
    principal: Principal = Depends(get_current_principal),
    service: UserService = Depends(get_user_service),
) -> UserResponse:
    user = service.update_user(
        principal,
        payload.email,
        last_sign_in_time=payload.last_sign_in_time,
        role=payload.role,
    )
    return UserResponse.model_validate(user)


@router.delete("/{email}", response_model=MessageResponse, status_code=status.HTTP_200_OK)
def delete_user(
    email: str,
    _: Principal = Depends(require_admin),
    service: UserService = Depends(get_user_service),
) -> MessageResponse:
    service.delete_user(email)
    return MessageResponse(message="User deleted")
