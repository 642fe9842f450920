from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from storefront.data.database import get_db
from storefront.data.models.payment_card import PaymentCardModel
from storefront.domain.enums import AddressType
from storefront.domain.schemas import AddressIn, AddressOut, MessageOut, PaymentCardIn, PaymentCardOut
from storefront.services.account_service import AccountService
from storefront.api.deps import RequestContext, get_request_context, get_lock

router = APIRouter(prefix="/account", tags=["account"])


def get_service(db: Session = Depends(get_db), lock=Depends(get_lock)):
    return AccountService(db=db, lock_service=lock)


def _card_out(card: PaymentCardModel) -> PaymentCardOut:
    return PaymentCardOut(
        id=card.id,
        user_id=card.user_id,
        last4=card.card_number[-4:],
        first_name=card.first_name,
        last_name=card.last_name,
        expiration_month=card.expiration_month,
        expiration_year=card.expiration_year,
        payment_card_type=card.payment_card_type,
    )


#address book
@router.get("/addresses/{address_id}", response_model=AddressOut)
def get_address(
    address_id: int,
    ctx: RequestContext = Depends(get_request_context),
    svc: AccountService = Depends(get_service),
):
    return svc.get_address_by_id(ctx.user_id, address_id)


#primary shipping address
@router.get("/primary-address", response_model=AddressOut)
def get_primary_address(
    ctx: RequestContext = Depends(get_request_context),
    svc: AccountService = Depends(get_service),
):
    return svc.get_address(ctx.user_id, AddressType.SHIPPING_PRIMARY)


@router.post("/primary-address", response_model=AddressOut, status_code=201)
def create_primary_address(
    payload: AddressIn,
    ctx: RequestContext = Depends(get_request_context),
    svc: AccountService = Depends(get_service),
):
    return svc.create_address(ctx.user_id, AddressType.SHIPPING_PRIMARY, payload.model_dump())


@router.put("/primary-address", response_model=AddressOut)
def update_primary_address(
    payload: AddressIn,
    ctx: RequestContext = Depends(get_request_context),
    svc: AccountService = Depends(get_service),
):
    return svc.update_address(ctx.user_id, AddressType.SHIPPING_PRIMARY, payload.model_dump())


#billing address
@router.get("/billing-address", response_model=AddressOut)
def get_billing_address(
    ctx: RequestContext = Depends(get_request_context),
    svc: AccountService = Depends(get_service),
):
    return svc.get_address(ctx.user_id, AddressType.BILLING)


@router.post("/billing-address", response_model=AddressOut, status_code=201)
def create_billing_address(
    payload: AddressIn,
    ctx: RequestContext = Depends(get_request_context),
    svc: AccountService = Depends(get_service),
):
    return svc.create_address(ctx.user_id, AddressType.BILLING, payload.model_dump())


@router.put("/billing-address", response_model=AddressOut)
def update_billing_address(
    payload: AddressIn,
    ctx: RequestContext = Depends(get_request_context),
    svc: AccountService = Depends(get_service),
):
    return svc.update_address(ctx.user_id, AddressType.BILLING, payload.model_dump())


@router.delete("/billing-address", response_model=MessageOut)
def delete_billing_address(
    ctx: RequestContext = Depends(get_request_context),
    svc: AccountService = Depends(get_service),
):
    svc.delete_address(ctx.user_id, AddressType.BILLING)
    return {"detail": "Billing address deleted"}


#payment card
@router.get("/payment-card", response_model=PaymentCardOut)
def get_payment_card(
    ctx: RequestContext = Depends(get_request_context),
    svc: AccountService = Depends(get_service),
):
    return _card_out(svc.get_payment_card(ctx.user_id))


@router.post("/payment-card", response_model=PaymentCardOut, status_code=201)
def create_payment_card(
    payload: PaymentCardIn,
    ctx: RequestContext = Depends(get_request_context),
    svc: AccountService = Depends(get_service),
):
    return _card_out(svc.create_payment_card(ctx.user_id, payload.model_dump()))


@router.put("/payment-card", response_model=PaymentCardOut)
def update_payment_card(
    payload: PaymentCardIn,
    ctx: RequestContext = Depends(get_request_context),
    svc: AccountService = Depends(get_service),
):
    return _card_out(svc.update_payment_card(ctx.user_id, payload.model_dump()))


@router.delete("/payment-card", response_model=MessageOut)
def delete_payment_card(
    ctx: RequestContext = Depends(get_request_context),
    svc: AccountService = Depends(get_service),
):
    svc.delete_payment_card(ctx.user_id)
    return {"detail": "Payment card deleted"}
