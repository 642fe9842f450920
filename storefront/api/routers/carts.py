# storefront/api/routers/carts.py
from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from storefront.data.database import get_db
from storefront.domain.schemas import CartOut
from storefront.services.cart_service import CartService
from storefront.api.deps import RequestContext, get_request_context, get_lock

router = APIRouter(prefix="/cart", tags=["cart"])


def get_service(db: Session = Depends(get_db), lock=Depends(get_lock)):
    return CartService(db=db, lock_service=lock)


@router.get("", response_model=CartOut)
def get_cart(
    ctx: RequestContext = Depends(get_request_context),
    svc: CartService = Depends(get_service),
):
    return svc.get_cart(ctx.user_id)


@router.post("/items/{product_id}", response_model=CartOut)
def add_item(
    product_id: int,
    ctx: RequestContext = Depends(get_request_context),
    svc: CartService = Depends(get_service),
):
    return svc.add_product(ctx.user_id, product_id)


@router.post("/items/{product_id}/decrement", response_model=CartOut)
def decrement_item(
    product_id: int,
    ctx: RequestContext = Depends(get_request_context),
    svc: CartService = Depends(get_service),
):
    return svc.decrement_product(ctx.user_id, product_id)


@router.delete("/items/{product_id}", response_model=CartOut)
def delete_item(
    product_id: int,
    ctx: RequestContext = Depends(get_request_context),
    svc: CartService = Depends(get_service),
):
    return svc.delete_product(ctx.user_id, product_id)
