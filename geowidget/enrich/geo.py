"""
Place lookups using MaxMind GeoLite2 / GeoIP2 City databases
"""

from typing import Optional

from ..models import DatasetKind
from ..schemas.geo import NamedCode, PlaceInfo
from .base import DatabaseHandle


def _named(code: Optional[str], name: Optional[str]) -> Optional[NamedCode]:
    if code is None and name is None:
        return None
    return NamedCode(code=code, name=name)


class CityDatabase(DatabaseHandle):
    """City-level place lookups"""

    kind = DatasetKind.CITY
    database_type_marker = "City"

    def _lookup(self, ip: str):
        return self._reader.city(ip)

    def _convert(self, r) -> Optional[PlaceInfo]:
        region = r.subdivisions.most_specific
        subdivisions = [s for s in (_named(d.iso_code, d.name) for d in r.subdivisions) if s is not None]
        place = PlaceInfo(
            continent=_named(r.continent.code, r.continent.name),
            country=_named(r.country.iso_code, r.country.name),
            region=_named(region.iso_code, region.name),
            subdivisions=subdivisions or None,
            city=r.city.name,
            latitude=r.location.latitude,
            longitude=r.location.longitude,
            accuracy_radius=r.location.accuracy_radius,
            time_zone=r.location.time_zone,
            postal_code=r.postal.code,
        )
        # a record with no populated field carries no place data
        if not place.model_dump(exclude_none=True):
            return None
        return place
