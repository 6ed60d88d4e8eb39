# app/core/exceptions.py
from fastapi import status


class MarketplaceError(Exception):
    """Base exception for business-rule and infrastructure errors raised by the workflows."""
    status_code: int = status.HTTP_400_BAD_REQUEST
    kind: str = "InvalidState"
    default_detail: str = "Request could not be processed."

    def __init__(self, detail: str | None = None):
        self.detail = detail or self.default_detail
        super().__init__(self.detail)


# --- Error kinds ---

class NotFoundError(MarketplaceError):
    status_code = status.HTTP_404_NOT_FOUND
    kind = "NotFound"
    default_detail = "Resource not found"

class ForbiddenError(MarketplaceError):
    status_code = status.HTTP_403_FORBIDDEN
    kind = "Forbidden"
    default_detail = "forbidden: action not allowed"

class ConflictError(MarketplaceError):
    status_code = status.HTTP_409_CONFLICT
    kind = "Conflict"
    default_detail = "Resource already exists"

class InvalidStateError(MarketplaceError):
    status_code = status.HTTP_400_BAD_REQUEST
    kind = "InvalidState"
    default_detail = "Resource is not in a state that allows this action"

class CapacityExceededError(MarketplaceError):
    status_code = status.HTTP_403_FORBIDDEN
    kind = "CapacityExceeded"
    default_detail = "No free slot available"

class InternalError(MarketplaceError):
    """Storage or infrastructure failure. The detail is logged, never returned to clients."""
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
    kind = "Internal"
    default_detail = "An unexpected internal server error occurred."


# --- Not found ---

class SubscriptionNotFound(NotFoundError):
    default_detail = "hosted subscription not found"

class ServiceNotFound(NotFoundError):
    default_detail = "specified subscription service not found"

class JoinRequestNotFound(NotFoundError):
    default_detail = "join request not found"

class MembershipNotFound(NotFoundError):
    default_detail = "subscription membership not found"

class PaymentRecordNotFound(NotFoundError):
    default_detail = "payment record not found"


# --- Forbidden ---

class Forbidden(ForbiddenError):
    pass

class CannotManageRequest(ForbiddenError):
    default_detail = "you are not authorized to manage this join request"

class HostCannotJoinOwn(ForbiddenError):
    default_detail = "host cannot request to join their own subscription"

class NotMember(ForbiddenError):
    default_detail = "user is not the member of this subscription slot"


# --- Conflict ---

class AlreadyMember(ConflictError):
    default_detail = "you are already a member of this subscription"

class AlreadyRequested(ConflictError):
    default_detail = "you have already sent a join request to this subscription"

class ServiceAlreadyExists(ConflictError):
    default_detail = "subscription service with this name already exists"


# --- Invalid state ---

class JoinRequestNotPending(InvalidStateError):
    default_detail = "join request is not in pending state"

class PaymentRecordNotModifiable(InvalidStateError):
    default_detail = "payment record is not in a state that can be modified by host"


# --- Capacity ---

class SubscriptionFull(CapacityExceededError):
    default_detail = "subscription has no available slots"
