"""
Merge per-dataset lookups into one outcome
"""

import logging
from typing import Dict, Optional

from ..address import Address
from ..errors import DatasetQueryError
from ..models import DatasetKind, DatasetStatus, LookupOutcome, OutcomeKind
from ..schemas.geo import AsnInfo, GeoRecord, PlaceInfo
from ..services.prometheus_metrics import prometheus_metrics
from .registry import DatabaseRegistry

logger = logging.getLogger("geowidget.enrich.lookup")

# GeoRecord attribute filled by each dataset
RECORD_FIELDS = {
    DatasetKind.ASN: "asn",
    DatasetKind.CITY: "place",
}


def get_summary(asn: Optional[AsnInfo], place: Optional[PlaceInfo]) -> str:
    """One-line description: "<CITY>,<REGION>/<COUNTRY>; <AS ORG> (<ASN>);"

    REGION is the top-level subdivision, e.g. the state rather than the county.
    """
    city = region = country = "-"
    if place is not None:
        city = place.city or "-"
        if place.subdivisions:
            region = place.subdivisions[0].code or "-"
        country = (place.country.code if place.country else None) or "-"
    organization, number = "-", "-"
    if asn is not None:
        organization = asn.organization or "-"
        number = str(asn.number)
    return f"{city},{region}/{country}; {organization} ({number});"


class LookupOrchestrator:
    """Query every dataset in the registry and degrade field group by field group"""

    def __init__(self, registry: DatabaseRegistry):
        self.registry = registry

    def _query(self, kind: DatasetKind, address: Address):
        handle = self.registry.handle_for(kind)
        if handle is None:
            return DatasetStatus.UNAVAILABLE, None
        try:
            found = handle.query(address)
        except DatasetQueryError:
            # a corrupt read only takes this dataset out of the answer
            return DatasetStatus.UNAVAILABLE, None
        if found is None:
            return DatasetStatus.MISS, None
        return DatasetStatus.HIT, found

    def resolve_record(self, address: Address) -> LookupOutcome:
        fields = {}
        datasets: Dict[DatasetKind, DatasetStatus] = {}

        for kind in self.registry.kinds():
            status, found = self._query(kind, address)
            datasets[kind] = status
            if found is not None:
                fields[RECORD_FIELDS[kind]] = found
            prometheus_metrics.increment_dataset_lookups(kind.value, datasets[kind].value)

        statuses = set(datasets.values())
        if DatasetStatus.HIT in statuses:
            outcome = OutcomeKind.RESOLVED
        elif DatasetStatus.MISS in statuses:
            outcome = OutcomeKind.NOT_FOUND
        else:
            outcome = OutcomeKind.UNAVAILABLE

        record = GeoRecord(**fields)
        summary = get_summary(record.asn, record.place) if outcome == OutcomeKind.RESOLVED else None

        prometheus_metrics.increment_lookups(outcome.value)
        logger.debug("resolved %s: %s", address, outcome.value, extra={
            "component": "enrich.lookup",
            "datasets": {kind.value: status.value for kind, status in datasets.items()},
        })
        return LookupOutcome(
            outcome=outcome,
            address=address,
            record=record,
            datasets=datasets,
            summary=summary,
        )
