from .user_model import Users
from .subscription_service_model import SubscriptionService
from .hosted_subscription_model import HostedSubscription, BillingCycle
from .membership_model import SubscriptionMembership, PaymentStatus
from .join_request_model import JoinRequest, JoinRequestStatus
from .payment_record_model import PaymentRecord, PaymentRecordStatus

__all__ = [
    "Users",
    "SubscriptionService",
    "HostedSubscription",
    "BillingCycle",
    "SubscriptionMembership",
    "PaymentStatus",
    "JoinRequest",
    "JoinRequestStatus",
    "PaymentRecord",
    "PaymentRecordStatus",
]
