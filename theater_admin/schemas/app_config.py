"""
Tenant-wide configuration schemas and the built-in default configuration
"""

from typing import List, Literal, Optional
from pydantic import Field

from .common import CamelModel

class ArchivableItem(CamelModel):
    id: str = ""
    name: str
    archived: bool = False
    image_url: Optional[str] = None

class ShowType(ArchivableItem):
    """A kind of performance with its default capacity, prices and times"""
    default_capacity: int = Field(default=100, gt=0)
    price_standard: float = 0.0
    price_premium: float = 0.0
    color: Optional[str] = None
    show_in_legend: bool = True
    default_start_time: Optional[str] = None
    default_end_time: Optional[str] = None
    allow_custom_times: bool = False

class EditableItem(CamelModel):
    id: str
    name: str
    price: float = 0.0
    image_url: Optional[str] = None
    description: Optional[str] = None

class PromoCode(CamelModel):
    id: str = ""
    code: str
    description: str = ""
    type: Literal["percentage", "fixed"]
    value: float
    is_active: bool = True
    valid_from: Optional[str] = None
    valid_until: Optional[str] = None
    usage_limit: Optional[int] = None
    usage_count: int = 0
    min_booking_value: Optional[float] = None
    applies_to_show_types: List[str] = Field(default_factory=list)

class TheaterVoucher(CamelModel):
    """Gift code: a money value or a number of persons on a package"""
    id: str = ""
    code: str
    type: Literal["value", "persons"] = "value"
    value: float = 0.0
    persons: int = 0
    package_type: Literal["standard", "premium"] = "standard"
    issue_date: Optional[str] = None
    expiry_date: Optional[str] = None
    status: Literal["active", "used", "expired", "extended", "archived"] = "active"
    notes: Optional[str] = None
    extended_count: int = 0
    used_date: Optional[str] = None
    used_reservation_id: Optional[str] = None

class BookingSettings(CamelModel):
    min_guests: int = 1
    max_guests: int = 999
    booking_cutoff_hours: int = 4

class PriceConstants(CamelModel):
    pre_show_or_after_party: float = 15.0
    cap: float = 5.0

class AppConfig(CamelModel):
    """Tenant-wide settings persisted as one JSON blob"""
    schema_version: int = 0
    show_names: List[ArchivableItem] = Field(default_factory=list)
    show_types: List[ShowType] = Field(default_factory=list)
    cap_slogans: List[str] = Field(default_factory=list)
    merchandise: List[EditableItem] = Field(default_factory=list)
    promo_codes: List[PromoCode] = Field(default_factory=list)
    theater_vouchers: List[TheaterVoucher] = Field(default_factory=list)
    booking_settings: BookingSettings = Field(default_factory=BookingSettings)
    prices: PriceConstants = Field(default_factory=PriceConstants)

    def show_type(self, name: str) -> Optional[ShowType]:
        for show_type in self.show_types:
            if show_type.name == name:
                return show_type
        return None


def build_default_config(schema_version: int) -> AppConfig:
    """Return a fresh copy of the built-in configuration"""
    return AppConfig(
        schema_version=schema_version,
        show_names=[
            ArchivableItem(id="welkom-in-de-buurt", name="Welkom in de Buurt"),
            ArchivableItem(id="het-leven-volgens-fred", name="Het Leven Volgens Fred"),
            ArchivableItem(id="de-gelukkige-huisvrouw", name="De Gelukkige Huisvrouw"),
            ArchivableItem(id="nachtcafe", name="Nachtcafé"),
            ArchivableItem(id="de-verloedering", name="De Verloedering"),
        ],
        show_types=[
            ShowType(
                id="diner-theater", name="Diner Theater", default_capacity=150,
                price_standard=55, price_premium=65,
                default_start_time="18:00", default_end_time="21:30",
            ),
            ShowType(
                id="lunch-theater", name="Lunch Theater", default_capacity=100,
                price_standard=35, price_premium=45,
                default_start_time="12:00", default_end_time="15:30",
            ),
            ShowType(
                id="besloten-feest", name="Besloten Feest", default_capacity=200,
                price_standard=75, price_premium=90,
                default_start_time="19:00", default_end_time="22:30",
                allow_custom_times=True,
            ),
        ],
        cap_slogans=[
            "Meer pret in bed met een beetje vet",
            "Veel te dun is ook geen fun",
            "Lekker gluren naar de buren",
            "Mijn ziel heeft een ventiel",
            "Geen gezeik in onze wijk",
        ],
        merchandise=[
            EditableItem(id="merch_1", name="Luxe Programmaboekje", price=12.50),
            EditableItem(id="merch_2", name="Fles Huiswijn", price=24.00),
        ],
        promo_codes=[
            PromoCode(id="VROEGBOEK", code="VROEGBOEK", type="percentage", value=10),
            PromoCode(id="GROEP20", code="GROEP20", type="fixed", value=50),
            PromoCode(id="NIEUWKLANT", code="NIEUWKLANT", type="percentage", value=5),
        ],
        booking_settings=BookingSettings(min_guests=1, max_guests=999, booking_cutoff_hours=4),
        prices=PriceConstants(pre_show_or_after_party=15, cap=5),
    )
