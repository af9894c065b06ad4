from cardano_listing_monitor.DI.container import Container

__all__ = ["Container"]
