"""Listing: one detected asset deposit, ready to be published."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import UTC, datetime

from cardano_listing_monitor.models.asset import AssetRecord
from cardano_listing_monitor.notifications.types import LISTING_EVENT_TYPE, NotificationMessage

LISTING_TITLE = "New Listing Detected"


def marketplace_asset_url(base_url: str, unit: str) -> str:
    """Canonical marketplace page for an asset: <base>/asset/<unit>."""
    return f"{base_url.rstrip('/')}/asset/{unit}"


@dataclass(frozen=True, slots=True)
class Listing:
    """Asset deposited into a watched address, with its resolved display image."""

    unit: str
    tx_hash: str
    address: str
    display_name: str
    price_label: str
    image_url: str
    marketplace_url: str
    fingerprint: str | None = None

    @classmethod
    def from_asset(
        cls,
        asset: AssetRecord,
        *,
        tx_hash: str,
        address: str,
        image_url: str,
        marketplace_base_url: str,
    ) -> Listing:
        return cls(
            unit=asset.unit,
            tx_hash=tx_hash,
            address=address,
            display_name=asset.display_name,
            price_label=asset.price_label,
            image_url=image_url,
            marketplace_url=marketplace_asset_url(marketplace_base_url, asset.unit),
            fingerprint=asset.fingerprint,
        )

    def to_notification(self, *, timestamp: datetime | None = None) -> NotificationMessage:
        """Build the outbound message (title, name + price body, link, image, publish time)."""
        return NotificationMessage(
            event_type=LISTING_EVENT_TYPE,
            title=LISTING_TITLE,
            message=f"{self.display_name}\nPrice: {self.price_label}",
            url=self.marketplace_url,
            image_url=self.image_url,
            timestamp=timestamp or datetime.now(UTC),
            payload={
                "name": self.display_name,
                "price": self.price_label,
                "unit": self.unit,
                "tx_hash": self.tx_hash,
                "fingerprint": self.fingerprint,
            },
        )
