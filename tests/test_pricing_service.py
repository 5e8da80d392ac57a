"""
Tests for price and discount calculation
"""

import pytest

from theater_admin.schemas.app_config import (
    AppConfig,
    EditableItem,
    PriceConstants,
    PromoCode,
    ShowType,
    TheaterVoucher,
)
from theater_admin.schemas.pricing import ReservationDraft
from theater_admin.services import pricing_service

@pytest.fixture
def config():
    return AppConfig(
        show_types=[ShowType(id="test", name="Test Show", price_standard=10, price_premium=25)],
        merchandise=[EditableItem(id="merch_1", name="Programme", price=12.5)],
        promo_codes=[
            PromoCode(code="GROEP20", type="fixed", value=50),
            PromoCode(code="VROEGBOEK", type="percentage", value=10),
            PromoCode(code="OUD", type="percentage", value=10, is_active=False),
            PromoCode(code="OP", type="fixed", value=5, usage_limit=2, usage_count=2),
            PromoCode(code="GROOT", type="fixed", value=5, min_booking_value=100),
            PromoCode(code="LENTE", type="fixed", value=5, valid_from="2025-03-01", valid_until="2025-05-31"),
            PromoCode(code="LUNCH", type="fixed", value=5, applies_to_show_types=["Lunch Theater"]),
        ],
        theater_vouchers=[
            TheaterVoucher(code="BON-25", type="value", value=25),
            TheaterVoucher(code="BON-2P", type="persons", persons=2, package_type="premium"),
            TheaterVoucher(code="BON-USED", type="value", value=25, status="used"),
            TheaterVoucher(code="BON-OLD", type="value", value=25, expiry_date="2024-12-31"),
        ],
        prices=PriceConstants(pre_show_or_after_party=15, cap=5),
    )

def draft(guests, **kwargs):
    kwargs.setdefault("date", "2025-04-10")
    return ReservationDraft(show_type="Test Show", guests=guests, **kwargs)

class TestSubtotal:
    """Subtotal from packages and addons"""

    def test_standard_and_premium_package(self, config):
        assert pricing_service.compute_subtotal(draft(4), config) == 40
        assert pricing_service.compute_subtotal(draft(4, drink_package="premium"), config) == 100

    def test_pre_show_and_after_party_are_per_guest(self, config):
        assert pricing_service.compute_subtotal(draft(2, pre_show_drinks=True, after_party=True), config) == 80

    def test_merchandise_and_caps(self, config):
        subtotal = pricing_service.compute_subtotal(draft(1, addons={"merch_1": 2, "cap3": 1}), config)
        assert subtotal == 10 + 25 + 5

    def test_unknown_show_type_and_addon_cost_nothing(self, config):
        unknown = ReservationDraft(show_type="Onbekend", guests=3, addons={"mystery": 4})
        assert pricing_service.compute_subtotal(unknown, config) == 0

class TestComputePrice:
    """Discount rules"""

    def test_no_code(self, config):
        price = pricing_service.compute_price(draft(20), config)
        assert (price.subtotal, price.discount, price.total) == (200, 0, 200)
        assert price.error is None

    def test_fixed_code(self, config):
        price = pricing_service.compute_price(draft(20), config, "GROEP20")
        assert price.discount == 50
        assert price.total == 150
        assert price.applied_code == "GROEP20"

    def test_fixed_code_is_capped_at_subtotal(self, config):
        price = pricing_service.compute_price(draft(3), config, "GROEP20")
        assert price.subtotal == 30
        assert price.discount == 30
        assert price.total == 0

    def test_percentage_code(self, config):
        price = pricing_service.compute_price(draft(15), config, "VROEGBOEK")
        assert price.discount == 15
        assert price.total == 135

    def test_unknown_code(self, config):
        price = pricing_service.compute_price(draft(20), config, "BESTAATNIET")
        assert price.discount == 0
        assert price.total == 200
        assert price.error == pricing_service.INVALID_CODE
        assert price.applied_code is None

    def test_code_match_is_case_sensitive(self, config):
        price = pricing_service.compute_price(draft(20), config, "groep20")
        assert price.discount == 0
        assert price.error == pricing_service.INVALID_CODE

    def test_inactive_code(self, config):
        assert pricing_service.compute_price(draft(20), config, "OUD").error == pricing_service.INVALID_CODE

    def test_usage_limit_reached(self, config):
        assert pricing_service.compute_price(draft(20), config, "OP").error == pricing_service.USED_CODE

    def test_minimum_booking_value(self, config):
        assert pricing_service.compute_price(draft(5), config, "GROOT").error == pricing_service.MIN_VALUE_NOT_REACHED
        assert pricing_service.compute_price(draft(10), config, "GROOT").discount == 5

    def test_validity_window_uses_show_date(self, config):
        assert pricing_service.compute_price(draft(5), config, "LENTE").discount == 5
        expired = pricing_service.compute_price(draft(5, date="2025-06-01"), config, "LENTE")
        assert expired.error == pricing_service.EXPIRED_CODE

    def test_show_type_restriction(self, config):
        price = pricing_service.compute_price(draft(5), config, "LUNCH")
        assert price.error == pricing_service.NOT_FOR_SHOW_TYPE

    def test_value_voucher(self, config):
        price = pricing_service.compute_price(draft(5), config, "BON-25")
        assert price.discount == 25
        assert price.total == 25

    def test_persons_voucher_uses_package_price(self, config):
        price = pricing_service.compute_price(draft(4, drink_package="premium"), config, "BON-2P")
        assert price.discount == 50
        assert price.total == 50

    def test_used_and_expired_vouchers(self, config):
        assert pricing_service.compute_price(draft(5), config, "BON-USED").error == pricing_service.USED_CODE
        assert pricing_service.compute_price(draft(5), config, "BON-OLD").error == pricing_service.EXPIRED_CODE

    @pytest.mark.parametrize("guests,code", [(1, "GROEP20"), (3, "BON-25"), (50, "VROEGBOEK"), (2, "BON-2P")])
    def test_discount_never_exceeds_subtotal(self, config, guests, code):
        price = pricing_service.compute_price(draft(guests), config, code)
        assert 0 <= price.discount <= price.subtotal
        assert price.total >= 0
