from ..enrich.registry import DatabaseRegistry
from ..models import HealthStatus


class HealthReporter:
    """Read-only view of dataset availability, safe to call concurrently with lookups"""

    def __init__(self, registry: DatabaseRegistry, require_all: bool = False):
        self.registry = registry
        self.require_all = require_all

    def report(self) -> HealthStatus:
        return self.registry.health(require_all=self.require_all)
