"""
Registry of the database handles loaded at startup
"""

import logging
from typing import Dict, Mapping, Optional, Type

from ..errors import DatasetLoadError
from ..models import DatasetKind, HealthStatus
from ..services.prometheus_metrics import prometheus_metrics
from .asn import AsnDatabase
from .base import DatabaseHandle
from .geo import CityDatabase

logger = logging.getLogger("geowidget.enrich.registry")

HANDLE_TYPES: Dict[DatasetKind, Type[DatabaseHandle]] = {
    DatasetKind.ASN: AsnDatabase,
    DatasetKind.CITY: CityDatabase,
}


class DatabaseRegistry:
    """Mapping from dataset kind to an optional database handle.

    The key set is fixed at construction and a handle is either present for
    the whole process lifetime or never; there is no reload path.
    """

    def __init__(
        self,
        handles: Mapping[DatasetKind, Optional[DatabaseHandle]],
        paths: Optional[Mapping[DatasetKind, Optional[str]]] = None,
        errors: Optional[Mapping[DatasetKind, str]] = None,
    ):
        self._handles = dict(handles)
        self._paths = dict(paths or {})
        self._errors = dict(errors or {})
        for kind in self._handles:
            prometheus_metrics.set_dataset_loaded(kind.value, self._handles[kind] is not None)

    @classmethod
    def initialize(cls, paths: Mapping[DatasetKind, Optional[str]]) -> "DatabaseRegistry":
        """Open every configured dataset; one failure never blocks the others"""
        handles: Dict[DatasetKind, Optional[DatabaseHandle]] = {}
        errors: Dict[DatasetKind, str] = {}
        for kind in DatasetKind:
            path = paths.get(kind)
            handles[kind] = None
            if not path:
                errors[kind] = "not configured"
                logger.warning("%s database not configured", kind)
                continue
            try:
                handle = HANDLE_TYPES[kind].open(path)
            except DatasetLoadError as e:
                errors[kind] = e.reason
                logger.error("Failed to load %s database: %s", kind, e.reason, extra={
                    "component": "enrich.registry",
                    "event": "load_failed",
                    "db_path": path,
                })
                continue
            handles[kind] = handle
            logger.info("%s database loaded successfully", kind, extra={
                "component": "enrich.registry",
                "event": "loaded",
                "db_path": path,
                "database_type": handle.metadata()["database_type"],
            })
        return cls(handles, paths, errors)

    def kinds(self):
        return list(self._handles)

    def handle_for(self, kind: DatasetKind) -> Optional[DatabaseHandle]:
        return self._handles.get(kind)

    def load_error(self, kind: DatasetKind) -> Optional[str]:
        return self._errors.get(kind)

    def health(self, require_all: bool = False) -> HealthStatus:
        datasets = {kind: handle is not None for kind, handle in self._handles.items()}
        all_loaded = bool(datasets) and all(datasets.values())
        healthy = all_loaded if require_all else any(datasets.values())

        details = {}
        for kind, handle in self._handles.items():
            detail = {
                "loaded": handle is not None,
                "path": self._paths.get(kind),
                "error": self._errors.get(kind),
            }
            if handle is not None:
                meta = handle.metadata()
                detail.update(
                    database_type=meta["database_type"],
                    build_epoch=meta["build_epoch"],
                    ip_version=meta["ip_version"],
                )
            details[kind] = detail

        return HealthStatus(
            datasets=datasets,
            all_loaded=all_loaded,
            healthy=healthy,
            require_all=require_all,
            details=details,
        )

    def close(self):
        for kind, handle in self._handles.items():
            if handle is not None:
                handle.close()
                logger.debug("%s database closed", kind)
