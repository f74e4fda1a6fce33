# backend/app/services/pricing_service.py
"""
Pricing for bookings and sessions.

Trainer services carry an hourly rate. A requested line item is matched
against the trainer's catalog by name and priced pro rata:

    price = (hourly rate / 60) * duration_minutes

Each line item stores its price rounded to cents. A booking total is the
sum of the unrounded line amounts, rounded once.
Matching walks the catalog in the order the trainer listed it and takes
the first service whose name equals the requested name, contains it, or
is contained in it (all case-insensitive). If nothing matches, the first
service is used. A trainer with no services cannot be priced.
"""

from dataclasses import dataclass
from decimal import ROUND_HALF_UP, Decimal
import logging
from typing import Iterable, List, Optional, Sequence, cast

from sqlalchemy.orm import Session

from ..core.exceptions import NoServicesAvailableException
from ..models.trainer import TrainerProfile, TrainerService
from .base import BaseService

logger = logging.getLogger(__name__)

CENTS = Decimal("0.01")


@dataclass
class PricedLine:
    """A line item after pricing. ``amount`` is unrounded, ``price`` is in cents."""

    service: TrainerService
    duration: int
    amount: Decimal

    @property
    def price(self) -> Decimal:
        return to_cents(self.amount)


def names_match(service_name: str, requested: str) -> bool:
    service_key = (service_name or "").strip().lower()
    requested_key = (requested or "").strip().lower()
    if not service_key or not requested_key:
        return False
    return (
        service_key == requested_key
        or requested_key in service_key
        or service_key in requested_key
    )


def match_service(
    services: Sequence[TrainerService], requested_name: Optional[str]
) -> Optional[TrainerService]:
    """
    Pick the service used to price ``requested_name``.

    Returns None only when ``services`` is empty.
    """
    if not services:
        return None
    if requested_name:
        for service in services:
            if names_match(service.name, requested_name):
                return service
    return services[0]


def to_cents(value: Decimal) -> Decimal:
    return value.quantize(CENTS, rounding=ROUND_HALF_UP)


def line_amount(hourly_rate: Decimal, duration_minutes: int) -> Decimal:
    """Unrounded pro-rata amount for ``duration_minutes`` at ``hourly_rate``."""
    return Decimal(hourly_rate) / Decimal(60) * Decimal(duration_minutes)


def total_price(amounts: Iterable[Decimal]) -> Decimal:
    """Sum unrounded line amounts, then round once."""
    return to_cents(sum(amounts, Decimal("0")))


class PricingService(BaseService):
    """Prices line items against a trainer's service catalog."""

    def __init__(self, db: Session):
        super().__init__(db)

    @BaseService.measure_operation("price_lines")
    def price_lines(
        self, trainer: TrainerProfile, lines: Sequence[tuple[Optional[str], int]]
    ) -> List[PricedLine]:
        """
        Price ``(service_name, duration_minutes)`` pairs for ``trainer``.

        Raises:
            NoServicesAvailableException: If the trainer has no services
        """
        services = list(trainer.services)
        if not services:
            self.logger.warning(f"Trainer {trainer.id} has no services to price against")
            raise NoServicesAvailableException(trainer.id)

        priced: List[PricedLine] = []
        for requested_name, duration in lines:
            service = cast(TrainerService, match_service(services, requested_name))
            priced.append(
                PricedLine(
                    service=service, duration=duration, amount=line_amount(service.price, duration)
                )
            )
        return priced

    def quote_session(
        self, trainer: TrainerProfile, service_type: Optional[str], duration: int
    ) -> Optional[PricedLine]:
        """Price a single session, or None when the trainer has no services."""
        if not trainer.services:
            return None
        return self.price_lines(trainer, [(service_type, duration)])[0]
