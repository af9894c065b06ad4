from .server import HealthServer, alive_handler, create_health_app

__all__ = ["HealthServer", "alive_handler", "create_health_app"]
