"""
User endpoints.

Registration after sign-in, role lookup and admin account management.
"""
from typing import List, Optional

from fastapi import APIRouter, Depends, Query, Response, status

from api.dependencies import get_caller, get_user_service
from core.application.dtos import (
    RegisterUserRequest,
    RegisterUserResponse,
    SuspendUserRequest,
    UpdateUserRequest,
    UserDTO,
    UserRoleDTO,
)
from core.application.services import UserService
from core.domain.value_objects import CallerContext


router = APIRouter()


@router.post(
    "",
    response_model=RegisterUserResponse,
    summary="Register a user",
    description="Creates a pending account; an existing email returns the stored account",
)
async def register_user(
    request: RegisterUserRequest,
    response: Response,
    service: UserService = Depends(get_user_service),
):
    result = await service.register_user(request)
    response.status_code = status.HTTP_201_CREATED if result.created else status.HTTP_200_OK
    return result


@router.get("/{email}/role", response_model=UserRoleDTO, summary="Get a user's role")
async def get_user_role(
    email: str,
    caller: CallerContext = Depends(get_caller),
    service: UserService = Depends(get_user_service),
):
    role = await service.get_role(caller, email)
    return UserRoleDTO(role=role)


@router.get("", response_model=List[UserDTO], summary="List users")
async def list_users(
    search_text: Optional[str] = Query(default=None, alias="searchText"),
    limit: int = Query(default=100, ge=1, le=1000),
    caller: CallerContext = Depends(get_caller),
    service: UserService = Depends(get_user_service),
):
    return await service.list_users(caller, search_text=search_text, limit=limit)


@router.patch("/{user_id}", response_model=UserDTO, summary="Update role and/or status")
async def update_user(
    user_id: str,
    request: UpdateUserRequest,
    caller: CallerContext = Depends(get_caller),
    service: UserService = Depends(get_user_service),
):
    return await service.update_user(caller, user_id, request)


@router.patch("/{user_id}/suspend", response_model=UserDTO, summary="Suspend a user")
async def suspend_user(
    user_id: str,
    request: SuspendUserRequest,
    caller: CallerContext = Depends(get_caller),
    service: UserService = Depends(get_user_service),
):
    return await service.suspend_user(caller, user_id, request)


@router.delete("/{user_id}", status_code=status.HTTP_204_NO_CONTENT, summary="Delete a user")
async def delete_user(
    user_id: str,
    caller: CallerContext = Depends(get_caller),
    service: UserService = Depends(get_user_service),
):
    await service.delete_user(caller, user_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
