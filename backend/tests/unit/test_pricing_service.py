"""
Tests for line item pricing against a trainer's service catalog.
"""

from decimal import Decimal
from unittest.mock import MagicMock

import pytest

from app.core.exceptions import NoServicesAvailableException
from app.models.trainer import TrainerProfile, TrainerService
from app.services.pricing_service import (
    PricingService,
    line_amount,
    match_service,
    names_match,
    to_cents,
    total_price,
)


def _service(name: str, price: str, position: int = 0) -> TrainerService:
    return TrainerService(name=name, price=Decimal(price), duration=60, position=position)


@pytest.fixture
def catalog():
    return [
        _service("Personal Training", "60.00", 0),
        _service("Yoga Flow", "90.00", 1),
        _service("Yoga", "45.00", 2),
    ]


@pytest.fixture
def pricing_service():
    return PricingService(MagicMock())


class TestNamesMatch:
    def test_exact_match_ignores_case(self):
        assert names_match("Yoga Flow", "yoga flow")

    def test_requested_contained_in_service(self):
        assert names_match("Personal Training", "personal")

    def test_service_contained_in_request(self):
        assert names_match("Yoga", "Yoga for runners")

    def test_unrelated_names(self):
        assert not names_match("Personal Training", "Pilates")

    def test_blank_names_never_match(self):
        assert not names_match("", "Yoga")
        assert not names_match("Yoga", "   ")


class TestMatchService:
    def test_first_match_in_catalog_order_wins(self, catalog):
        # "Yoga Flow" comes before "Yoga" and also contains the request
        assert match_service(catalog, "yoga").name == "Yoga Flow"

    def test_falls_back_to_first_service(self, catalog):
        assert match_service(catalog, "Boxing").name == "Personal Training"

    def test_no_request_uses_first_service(self, catalog):
        assert match_service(catalog, None).name == "Personal Training"

    def test_empty_catalog(self):
        assert match_service([], "Yoga") is None


class TestLineAmount:
    def test_full_hour(self):
        assert line_amount(Decimal("60.00"), 60) == Decimal("60")

    def test_pro_rata(self):
        assert to_cents(line_amount(Decimal("50.00"), 45)) == Decimal("37.50")

    def test_rounds_half_up_to_cents(self):
        # 70 / 60 * 50 = 58.333...
        assert to_cents(line_amount(Decimal("70.00"), 50)) == Decimal("58.33")
        # 1 / 60 * 15 = 0.25
        assert to_cents(line_amount(Decimal("1.00"), 15)) == Decimal("0.25")

    def test_total_price(self):
        assert total_price([Decimal("37.50"), Decimal("58.33")]) == Decimal("95.83")
        assert total_price([]) == Decimal("0.00")

    def test_total_rounds_the_sum_not_each_line(self):
        # Each 20 minute line at 50/h is 16.666..., which rounds to 16.67
        amounts = [line_amount(Decimal("50.00"), 20)] * 3

        assert [to_cents(amount) for amount in amounts] == [Decimal("16.67")] * 3
        assert total_price(amounts) == Decimal("50.00")


class TestPricingService:
    def test_price_lines(self, pricing_service, catalog):
        trainer = TrainerProfile(id="trainer-1", user_id="user-1")
        trainer.services = catalog

        priced = pricing_service.price_lines(trainer, [("Yoga Flow", 60), ("Boxing", 30)])

        assert [line.service.name for line in priced] == ["Yoga Flow", "Personal Training"]
        assert [line.price for line in priced] == [Decimal("90.00"), Decimal("30.00")]

    def test_price_lines_without_services(self, pricing_service):
        trainer = TrainerProfile(id="trainer-1", user_id="user-1")

        with pytest.raises(NoServicesAvailableException) as exc_info:
            pricing_service.price_lines(trainer, [("Yoga", 60)])

        assert exc_info.value.status_code == 400
        assert exc_info.value.details == {"trainer_id": "trainer-1"}

    def test_quote_session_without_services(self, pricing_service):
        trainer = TrainerProfile(id="trainer-1", user_id="user-1")
        assert pricing_service.quote_session(trainer, "Yoga", 60) is None

    def test_quote_session(self, pricing_service, catalog):
        trainer = TrainerProfile(id="trainer-1", user_id="user-1")
        trainer.services = catalog

        quote = pricing_service.quote_session(trainer, "Personal Training", 90)

        assert quote.price == Decimal("90.00")
        assert quote.duration == 90

    def test_fractional_lines_total_matches_hourly_rate(self, pricing_service):
        trainer = TrainerProfile(id="trainer-1", user_id="user-1")
        trainer.services = [_service("Personal Training", "50.00")]

        priced = pricing_service.price_lines(trainer, [("Personal Training", 20)] * 3)

        assert [line.price for line in priced] == [Decimal("16.67")] * 3
        assert total_price(line.amount for line in priced) == Decimal("50.00")
