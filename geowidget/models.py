"""
Domain values shared by the registry, the orchestrator and the API
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import TYPE_CHECKING, Any, Dict, Optional

if TYPE_CHECKING:
    from .address import Address
    from .schemas.geo import GeoRecord


class DatasetKind(str, Enum):
    """Which database a handle serves"""

    ASN = "asn"
    CITY = "city"

    def __str__(self) -> str:
        return self.value


class DatasetStatus(str, Enum):
    HIT = "hit"
    MISS = "miss"
    UNAVAILABLE = "unavailable"


class OutcomeKind(str, Enum):
    RESOLVED = "resolved"
    NOT_FOUND = "not_found"
    UNAVAILABLE = "unavailable"
    INVALID_ADDRESS = "invalid_address"


@dataclass(frozen=True)
class LookupOutcome:
    """Tagged result of resolving one address against every dataset"""

    outcome: OutcomeKind
    address: "Address"
    record: "GeoRecord"
    datasets: Dict[DatasetKind, DatasetStatus]
    summary: Optional[str] = None

    def unavailable(self):
        return [kind for kind, status in self.datasets.items() if status == DatasetStatus.UNAVAILABLE]


@dataclass(frozen=True)
class HealthStatus:
    """Loaded/unloaded state of every configured dataset"""

    datasets: Dict[DatasetKind, bool]
    all_loaded: bool
    healthy: bool
    require_all: bool
    details: Dict[DatasetKind, Dict[str, Any]] = field(default_factory=dict)
