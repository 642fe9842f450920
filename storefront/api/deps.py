# storefront/api/deps.py
from dataclasses import dataclass

from fastapi import Header

from storefront.services.lock_service import get_lock_service


@dataclass(frozen=True)
class RequestContext:
    """Identity of the caller, scoped to one request."""

    user_id: int


def get_request_context(x_user_id: int = Header(..., gt=0)) -> RequestContext:
    # authentication happens upstream; the gateway forwards the user id
    return RequestContext(user_id=x_user_id)


def get_lock():
    return get_lock_service()
