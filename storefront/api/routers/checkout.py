# storefront/api/routers/checkout.py
from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from storefront.data.database import get_db
from storefront.domain.schemas import AddressIn, AddressOut, CheckoutOut, MessageOut
from storefront.services.checkout_service import CheckoutService
from storefront.api.deps import RequestContext, get_request_context, get_lock

router = APIRouter(prefix="/checkout", tags=["checkout"])


def get_service(db: Session = Depends(get_db), lock=Depends(get_lock)):
    return CheckoutService(db=db, lock_service=lock)


@router.post("", response_model=CheckoutOut, status_code=201)
def start_checkout(
    ctx: RequestContext = Depends(get_request_context),
    svc: CheckoutService = Depends(get_service),
):
    return svc.start(ctx.user_id)


@router.get("", response_model=CheckoutOut)
def get_checkout(
    ctx: RequestContext = Depends(get_request_context),
    svc: CheckoutService = Depends(get_service),
):
    return svc.get_checkout(ctx.user_id)


@router.delete("", response_model=MessageOut)
def abandon_checkout(
    ctx: RequestContext = Depends(get_request_context),
    svc: CheckoutService = Depends(get_service),
):
    svc.abandon(ctx.user_id)
    return {"detail": "Checkout session deleted"}


@router.put("/shipping/{address_id}", response_model=CheckoutOut)
def set_shipping(
    address_id: int,
    ctx: RequestContext = Depends(get_request_context),
    svc: CheckoutService = Depends(get_service),
):
    return svc.set_shipping_address(ctx.user_id, address_id)


@router.put("/billing/{address_id}", response_model=CheckoutOut)
def set_billing(
    address_id: int,
    ctx: RequestContext = Depends(get_request_context),
    svc: CheckoutService = Depends(get_service),
):
    return svc.set_billing_address(ctx.user_id, address_id)


@router.put("/payment-card", response_model=CheckoutOut)
def set_payment_card(
    ctx: RequestContext = Depends(get_request_context),
    svc: CheckoutService = Depends(get_service),
):
    return svc.set_payment_card(ctx.user_id)


@router.put("/stage/{stage_name}", response_model=CheckoutOut)
def set_stage(
    stage_name: str,
    ctx: RequestContext = Depends(get_request_context),
    svc: CheckoutService = Depends(get_service),
):
    return svc.set_stage(ctx.user_id, stage_name)


@router.post("/alt-address", response_model=AddressOut, status_code=201)
def create_alt_address(
    payload: AddressIn,
    ctx: RequestContext = Depends(get_request_context),
    svc: CheckoutService = Depends(get_service),
):
    return svc.create_alternate_address(ctx.user_id, payload.model_dump())


@router.put("/alt-address", response_model=AddressOut)
def update_alt_address(
    payload: AddressIn,
    ctx: RequestContext = Depends(get_request_context),
    svc: CheckoutService = Depends(get_service),
):
    return svc.update_alternate_address(ctx.user_id, payload.model_dump())


@router.get("/alt-address", response_model=AddressOut)
def get_alt_address(
    ctx: RequestContext = Depends(get_request_context),
    svc: CheckoutService = Depends(get_service),
):
    return svc.get_alternate_address(ctx.user_id)
