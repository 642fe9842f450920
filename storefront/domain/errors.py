# storefront/domain/errors.py
"""
Domain errors raised by the services.

NotFound / InvalidState / Conflict describe a rejected request and are mapped
straight to a response by the API layer. PersistenceError wraps a storage
failure and is reported as an opaque 500.
"""


class StorefrontError(Exception):
    """Base class for everything the core raises on purpose."""


class NotFound(StorefrontError):
    pass


class InvalidState(StorefrontError):
    pass


class Conflict(StorefrontError):
    pass


class PersistenceError(StorefrontError):
    pass


# NotFound
class UserNotFound(NotFound):
    pass


class ProductNotFound(NotFound):
    pass


class CartNotFound(NotFound):
    pass


class CheckoutNotFound(NotFound):
    pass


class AddressNotFound(NotFound):
    pass


class PaymentMethodNotFound(NotFound):
    pass


class OrderNotFound(NotFound):
    pass


# InvalidState
class InvalidStage(InvalidState):
    pass


class InvalidAddressType(InvalidState):
    pass


class ProductNotRemoved(InvalidState):
    pass


class EmptyCart(InvalidState):
    pass


class CheckoutIncomplete(InvalidState):
    pass


# Conflict
class OutOfStock(Conflict):
    pass


class InsufficientInventory(Conflict):
    pass


class CheckoutAlreadyExists(Conflict):
    pass


class DuplicateAddress(Conflict):
    pass


class DuplicateUser(Conflict):
    pass


class ConcurrentModification(Conflict):
    pass


class DuplicatePaymentCard(Conflict):
    pass


# PersistenceError
class LockUnavailable(PersistenceError):
    """The lock backend could not be reached."""
