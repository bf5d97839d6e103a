from __future__ import annotations

from dataclasses import dataclass
from typing import Optional


@dataclass(frozen=True)
class Tier:
    id: str
    name: str
    price: str
    frequency: str
    description: str
    payment_link: str


TIERS: tuple[Tier, ...] = (
    Tier(
        id="scan",
        name="One-Time Leak Scan",
        price="$35",
        frequency="one-time",
        description="A comprehensive, one-off analysis of a single billing document.",
        payment_link="https://paypal.me/YourPayPal/35",
    ),
    Tier(
        id="monitoring",
        name="Auto-Alert Monitoring",
        price="$55",
        frequency="/ month",
        description="Monthly monitoring with automated email alerts for detected anomalies.",
        payment_link="https://paypal.me/YourPayPal/55",
    ),
    Tier(
        id="bonus",
        name="Savings-Triggered Bonus",
        price="10-15%",
        frequency="of savings",
        description="Pay only a small percentage of the actual savings we identify for you.",
        payment_link="https://paypal.me/YourPayPal/10",
    ),
)

TIER_IDS = frozenset(t.id for t in TIERS)


def find_tier(tier_id: Optional[str]) -> Optional[Tier]:
    return next((t for t in TIERS if t.id == tier_id), None)
