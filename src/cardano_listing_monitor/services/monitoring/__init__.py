from .monitoring_cycle import CycleReport, MonitoringCycle
from .scheduler import MonitoringScheduler

__all__ = ["CycleReport", "MonitoringCycle", "MonitoringScheduler"]
