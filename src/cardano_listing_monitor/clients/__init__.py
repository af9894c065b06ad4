"""HTTP and API clients."""

from cardano_listing_monitor.clients.blockfrost import BlockfrostClient
from cardano_listing_monitor.clients.http import AsyncHttpClient, ProbeResult

__all__ = [
    "AsyncHttpClient",
    "BlockfrostClient",
    "ProbeResult",
]
