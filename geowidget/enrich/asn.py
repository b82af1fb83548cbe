from typing import Optional

from ..models import DatasetKind
from ..schemas.geo import AsnInfo
from .base import DatabaseHandle


class AsnDatabase(DatabaseHandle):
    """Network ownership lookups against a GeoLite2-ASN style database"""

    kind = DatasetKind.ASN
    database_type_marker = "ASN"

    def _lookup(self, ip: str):
        return self._reader.asn(ip)

    def _convert(self, r) -> Optional[AsnInfo]:
        if r.autonomous_system_number is None:
            return None
        network = getattr(r, "network", None)
        return AsnInfo(
            number=r.autonomous_system_number,
            organization=r.autonomous_system_organization,
            network=str(network) if network is not None else None,
        )
