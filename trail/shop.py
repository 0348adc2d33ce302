"""trail/shop.py — Frontier general store.

Prices climb with distance travelled, up to +50 % at the end of the
trail.
"""

from __future__ import annotations
from dataclasses import dataclass

from core.catalogs import Catalogs
from core.numeric import round2
from core.session import GameSession
from trail.journey import Route


@dataclass
class ShopOffer:
    id: str
    name: str
    price_base: float
    price: float
    stack: bool = True


def price_multiplier(session: GameSession, route: Route) -> float:
    total = route.total_trail_miles or 1
    progress = max(0.0, min(1.0, session.miles / total))
    return 1 + 0.5 * progress


def build_shop_catalog(session: GameSession, catalogs: Catalogs, route: Route) -> list[ShopOffer]:
    mult = price_multiplier(session, route)
    return [
        ShopOffer(id=it.id, name=it.name, price_base=round2(it.price),
                  price=round2(it.price * mult), stack=it.stack)
        for it in catalogs.items()
    ]


def subtotal(offers: list[ShopOffer], quantities: dict[str, int]) -> float:
    total = 0.0
    for offer in offers:
        q = quantities.get(offer.id, 0)
        if q > 0:
            total += q * offer.price
    return total


def purchase(session: GameSession, offers: list[ShopOffer],
             quantities: dict[str, int], where: str = "the store") -> bool:
    """Buy everything in *quantities* or nothing at all."""
    cost = subtotal(offers, quantities)
    if cost <= 0 or cost > session.money + 1e-9:
        return False
    for offer in offers:
        q = quantities.get(offer.id, 0)
        if q > 0:
            session.add_item(offer.id, q)
    session.money = max(0.0, session.money - cost)
    session.log_line(f"Bought supplies at {where} for ${cost:.2f}.")
    session.save()
    return True
