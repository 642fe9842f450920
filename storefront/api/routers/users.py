from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from storefront.data.database import get_db
from storefront.domain.errors import UserNotFound
from storefront.services.user_service import UserService
from storefront.domain.schemas import MessageOut, UserCreate, UserRead, UserUpdate
from storefront.api.deps import RequestContext, get_request_context

router = APIRouter(prefix="/users", tags=["users"])


def _require_owner(ctx: RequestContext, user_id: int):
    # only the owner may see or touch the profile
    if ctx.user_id != user_id:
        raise UserNotFound("User not found")


@router.post("", response_model=UserRead, status_code=201)
def create_user(payload: UserCreate, db: Session = Depends(get_db)):
    return UserService(db).create_user(payload)


@router.get("/{user_id}", response_model=UserRead)
def get_user(
    user_id: int,
    ctx: RequestContext = Depends(get_request_context),
    db: Session = Depends(get_db),
):
    _require_owner(ctx, user_id)
    return UserService(db).get_user(user_id)


@router.put("/{user_id}", response_model=UserRead)
def update_user(
    user_id: int,
    payload: UserUpdate,
    ctx: RequestContext = Depends(get_request_context),
    db: Session = Depends(get_db),
):
    _require_owner(ctx, user_id)
    return UserService(db).update_user(user_id, payload)


@router.delete("/{user_id}", response_model=MessageOut)
def delete_user(
    user_id: int,
    ctx: RequestContext = Depends(get_request_context),
    db: Session = Depends(get_db),
):
    _require_owner(ctx, user_id)
    UserService(db).delete_user(user_id)
    return {"detail": "User successfully deleted"}
