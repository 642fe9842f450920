# storefront/api/routers/orders.py
from typing import List

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from storefront.data.database import get_db
from storefront.domain.schemas import OrderOut
from storefront.services.order_service import OrderService
from storefront.api.deps import RequestContext, get_request_context, get_lock

router = APIRouter(prefix="/orders", tags=["orders"])


def get_service(db: Session = Depends(get_db), lock=Depends(get_lock)):
    return OrderService(db=db, lock_service=lock)


@router.post("", response_model=OrderOut, status_code=201)
def create_order(
    ctx: RequestContext = Depends(get_request_context),
    svc: OrderService = Depends(get_service),
):
    """
    Places the order from the confirmed checkout session.
    Notification is sent asynchronously.
    """
    return svc.commit_order(ctx.user_id)


@router.get("", response_model=List[OrderOut])
def list_orders(
    ctx: RequestContext = Depends(get_request_context),
    svc: OrderService = Depends(get_service),
):
    return svc.list_orders(ctx.user_id)


@router.get("/{order_id}", response_model=OrderOut)
def get_order(
    order_id: int,
    ctx: RequestContext = Depends(get_request_context),
    svc: OrderService = Depends(get_service),
):
    return svc.get_order(order_id, ctx.user_id)
