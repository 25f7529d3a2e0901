"""Domain models for sh_catalog — pure dataclasses, no SQLAlchemy dependency."""

from dataclasses import dataclass


@dataclass
class Product:
    id: str
    name: str
    vendor_id: str
    price_cents: int
    negotiable: bool = True
    min_offer_ratio_bps: int | None = None  # None → platform default (9000)
