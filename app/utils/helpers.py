import logging
from datetime import datetime, timedelta, timezone
from decimal import Decimal, ROUND_HALF_UP
from typing import Optional

from dateutil.relativedelta import relativedelta

from app.models.hosted_subscription_model import BillingCycle

logger = logging.getLogger(__name__)

CENTS = Decimal("0.01")


def utcnow() -> datetime:
    """Naive UTC timestamp, matching how DateTime columns are stored."""
    return datetime.now(timezone.utc).replace(tzinfo=None)


def end_of_next_month(now: datetime) -> datetime:
    """Last instant of the calendar month after the month containing `now`."""
    first_of_month = now.replace(day=1, hour=0, minute=0, second=0, microsecond=0)
    return first_of_month + relativedelta(months=2) - timedelta(microseconds=1)


def add_billing_cycle(base: datetime, billing_cycle, subscription_id: Optional[int] = None) -> datetime:
    """
    Advances `base` by one billing cycle. Month arithmetic clamps to the last
    valid day (Jan 31 + 1 month -> Feb 28/29).
    """
    if billing_cycle == BillingCycle.MONTHLY:
        return base + relativedelta(months=1)
    if billing_cycle == BillingCycle.ANNUALLY:
        return base + relativedelta(years=1)

    logger.warning(
        "Unknown billing cycle '%s' for hosted subscription %s, defaulting to monthly",
        billing_cycle,
        subscription_id,
    )
    return base + relativedelta(months=1)


def cost_per_slot(cost_per_cycle, total_slots: int) -> Decimal:
    """Per-slot share of the plan cost, rounded to cents. Zero when the plan has no slots."""
    if not total_slots or total_slots <= 0:
        return Decimal("0.00")
    return (Decimal(cost_per_cycle) / Decimal(total_slots)).quantize(CENTS, rounding=ROUND_HALF_UP)
