"""Users Router - user CRUD. Mounted at /users."""
from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException, status

from api.dependencies import get_user_store, store_errors
from api.models import UserCreateRequest, UserUpdateRequest
from mini_crm.users import UserStore

router = APIRouter()


@router.get("")
def list_users(store: UserStore = Depends(get_user_store)) -> dict:
    with store_errors("load users"):
        users = store.list()
    return {"count": len(users), "users": [u.to_api_dict() for u in users]}


@router.post("", status_code=status.HTTP_201_CREATED)
def create_user(
    request: UserCreateRequest,
    store: UserStore = Depends(get_user_store),
) -> dict:
    with store_errors("save user"):
        user_id = store.create(
            request.name, request.email, request.password, image=request.image
        )
        user = store.get(user_id)
    return {"id": user_id, "user": user.to_api_dict() if user else None}


@router.get("/{user_id}")
def get_user(user_id: str, store: UserStore = Depends(get_user_store)) -> dict:
    with store_errors("load user"):
        user = store.get(user_id)
    if not user:
        raise HTTPException(status_code=404, detail="User not found")
    return {"user": user.to_api_dict()}


@router.patch("/{user_id}")
def edit_user(
    user_id: str,
    request: UserUpdateRequest,
    store: UserStore = Depends(get_user_store),
) -> dict:
    with store_errors("save user"):
        user = store.edit(user_id, request.supplied_fields())
    return {"user": user.to_api_dict()}


@router.delete("/{user_id}")
def delete_user(user_id: str, store: UserStore = Depends(get_user_store)) -> dict:
    with store_errors("delete user"):
        deleted = store.delete(user_id)
    return {"deleted": deleted, "userId": user_id}
