"""
Order pricing and ready-time estimation.

Everything here is pure: the hour of day and "now" are passed in by the caller
(OrderService reads them from its injected clock), and the rule constants come
from a PricingRules instance, which defaults to the values in settings.
"""
from dataclasses import dataclass
from datetime import datetime, timedelta
from decimal import ROUND_HALF_UP, Decimal
from typing import Iterable, Optional, Tuple

from restaurant.config import settings

CENT = Decimal("0.01")


@dataclass(frozen=True)
class PricingRules:
    tax_rate: Decimal = settings.TAX_RATE
    happy_hour_start: int = settings.HAPPY_HOUR_START
    happy_hour_end: int = settings.HAPPY_HOUR_END
    happy_hour_rate: Decimal = settings.HAPPY_HOUR_DISCOUNT_RATE
    bulk_threshold: Decimal = settings.BULK_DISCOUNT_THRESHOLD
    bulk_rate: Decimal = settings.BULK_DISCOUNT_RATE
    default_preparation_minutes: int = settings.DEFAULT_PREPARATION_MINUTES
    delivery_extra_minutes: int = settings.DELIVERY_EXTRA_MINUTES


@dataclass(frozen=True)
class PriceQuote:
    subtotal: Decimal
    tax: Decimal
    discount: Decimal
    total: Decimal
    discount_reason: Optional[str] = None

    @property
    def charged_total(self) -> Decimal:
        """The amount billed: the exact total rounded half-up to cents, and the only rounding step."""
        return to_cents(self.total)


def to_cents(value: Decimal) -> Decimal:
    return Decimal(value).quantize(CENT, rounding=ROUND_HALF_UP)


def line_subtotal(quantity: int, unit_price) -> Decimal:
    return Decimal(quantity) * Decimal(unit_price)


def compute_discount(
    subtotal: Decimal, hour: int, rules: PricingRules = PricingRules()
) -> Tuple[Decimal, Optional[str]]:
    # happy hour and bulk are exclusive; happy hour wins
    if rules.happy_hour_start <= hour < rules.happy_hour_end:
        return subtotal * rules.happy_hour_rate, "happy_hour"
    if subtotal > rules.bulk_threshold:
        return subtotal * rules.bulk_rate, "bulk"
    return Decimal("0"), None


def price_order(
    lines: Iterable[Tuple[int, Decimal]], hour: int, rules: PricingRules = PricingRules()
) -> PriceQuote:
    """
    lines: iterable of (quantity, unit_price) pairs taken from the cart snapshot.
    hour: local hour of day, 0-23.

    Returns the exact (unrounded) quote.
    """
    subtotal = sum((line_subtotal(q, p) for q, p in lines), Decimal("0"))
    tax = subtotal * rules.tax_rate
    discount, reason = compute_discount(subtotal, hour, rules)
    return PriceQuote(
        subtotal=subtotal,
        tax=tax,
        discount=discount,
        total=subtotal + tax - discount,
        discount_reason=reason,
    )


def estimate_ready_time(
    now: datetime,
    preparation_times: Iterable[Optional[int]],
    is_delivery: bool,
    rules: PricingRules = PricingRules(),
) -> datetime:
    """Slowest dish decides; unknown preparation time counts as the default. Delivery adds a fixed leg."""
    minutes = max(
        (
            t if t is not None else rules.default_preparation_minutes
            for t in preparation_times
        ),
        default=rules.default_preparation_minutes,
    )
    if is_delivery:
        minutes += rules.delivery_extra_minutes
    return now + timedelta(minutes=minutes)
