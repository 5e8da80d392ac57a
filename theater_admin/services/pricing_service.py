"""
Price and discount calculation for reservation drafts
"""

import logging
from datetime import date as date_type
from typing import Optional, Tuple

from theater_admin.schemas.app_config import AppConfig, PromoCode, TheaterVoucher
from theater_admin.schemas.pricing import PriceBreakdown, ReservationDraft

logger = logging.getLogger(__name__)

PRE_SHOW_DRINKS = "preShowDrinks"
AFTER_PARTY = "afterParty"
CAP_PREFIX = "cap"

INVALID_CODE = "Invalid code"
EXPIRED_CODE = "Code has expired"
USED_CODE = "Code has already been used"
MIN_VALUE_NOT_REACHED = "Booking value too low for this code"
NOT_FOR_SHOW_TYPE = "Code is not valid for this show"


def per_person_price(config: AppConfig, show_type: str, drink_package: str) -> float:
    found = config.show_type(show_type)
    if found is None:
        return 0.0
    return found.price_premium if drink_package == "premium" else found.price_standard


def addon_unit_price(config: AppConfig, addon_id: str) -> float:
    if addon_id in (PRE_SHOW_DRINKS, AFTER_PARTY):
        return config.prices.pre_show_or_after_party
    for item in config.merchandise:
        if item.id == addon_id:
            return item.price
    if addon_id.startswith(CAP_PREFIX) and addon_id[len(CAP_PREFIX):].isdigit():
        return config.prices.cap
    logger.debug("Unknown addon %s priced at 0", addon_id)
    return 0.0


def compute_subtotal(draft: ReservationDraft, config: AppConfig) -> float:
    subtotal = draft.guests * per_person_price(config, draft.show_type, draft.drink_package)
    if draft.pre_show_drinks:
        subtotal += draft.guests * config.prices.pre_show_or_after_party
    if draft.after_party:
        subtotal += draft.guests * config.prices.pre_show_or_after_party
    for addon_id, quantity in draft.addons.items():
        if quantity > 0:
            subtotal += quantity * addon_unit_price(config, addon_id)
    return round(subtotal, 2)


def _parse_day(value: Optional[str]) -> Optional[date_type]:
    if not value:
        return None
    try:
        return date_type.fromisoformat(value)
    except ValueError:
        logger.warning("Ignoring malformed date %r in code rules", value)
        return None


def _within_dates(on: Optional[str], start: Optional[str], end: Optional[str]) -> bool:
    day = _parse_day(on) or date_type.today()
    first, last = _parse_day(start), _parse_day(end)
    if first and day < first:
        return False
    if last and day > last:
        return False
    return True


def _promo_discount(promo: PromoCode, draft: ReservationDraft, subtotal: float) -> Tuple[float, Optional[str]]:
    if not promo.is_active:
        return 0.0, INVALID_CODE
    if not _within_dates(draft.date, promo.valid_from, promo.valid_until):
        return 0.0, EXPIRED_CODE
    if promo.usage_limit is not None and promo.usage_count >= promo.usage_limit:
        return 0.0, USED_CODE
    if promo.min_booking_value is not None and subtotal < promo.min_booking_value:
        return 0.0, MIN_VALUE_NOT_REACHED
    if promo.applies_to_show_types and draft.show_type not in promo.applies_to_show_types:
        return 0.0, NOT_FOR_SHOW_TYPE
    if promo.type == "percentage":
        return subtotal * promo.value / 100, None
    return promo.value, None


def _voucher_discount(voucher: TheaterVoucher, draft: ReservationDraft, config: AppConfig) -> Tuple[float, Optional[str]]:
    if voucher.status == "used":
        return 0.0, USED_CODE
    if voucher.status not in ("active", "extended"):
        return 0.0, INVALID_CODE
    if not _within_dates(draft.date, None, voucher.expiry_date):
        return 0.0, EXPIRED_CODE
    if voucher.type == "persons":
        return voucher.persons * per_person_price(config, draft.show_type, voucher.package_type), None
    return voucher.value, None


def compute_price(draft: ReservationDraft, config: AppConfig, applied_code: Optional[str] = None) -> PriceBreakdown:
    """Subtotal, discount and total for a draft.

    Codes match exactly (case-sensitive) against promo codes first, then
    theater vouchers. A code that cannot be used gives no discount and an
    error message; nothing here raises.
    """
    subtotal = compute_subtotal(draft, config)
    if not applied_code:
        return PriceBreakdown(subtotal=subtotal, discount=0.0, total=subtotal)

    promo = next((p for p in config.promo_codes if p.code == applied_code), None)
    voucher = next((v for v in config.theater_vouchers if v.code == applied_code), None)
    if promo is not None:
        discount, error = _promo_discount(promo, draft, subtotal)
    elif voucher is not None:
        discount, error = _voucher_discount(voucher, draft, config)
    else:
        discount, error = 0.0, INVALID_CODE

    if error:
        return PriceBreakdown(subtotal=subtotal, discount=0.0, total=subtotal, error=error)

    discount = round(min(max(discount, 0.0), subtotal), 2)
    total = round(max(subtotal - discount, 0.0), 2)
    return PriceBreakdown(subtotal=subtotal, discount=discount, total=total, applied_code=applied_code)
