"""
Base database handle class
"""

import logging
from abc import ABC, abstractmethod
from datetime import datetime, timezone
from typing import Any, Dict, Optional

import geoip2.database
import geoip2.errors
import maxminddb

from ..address import Address
from ..errors import DatasetLoadError, DatasetQueryError
from ..models import DatasetKind

logger = logging.getLogger("geowidget.enrich")


class DatabaseHandle(ABC):
    """Queryable, memory-mapped view of one MaxMind DB file.

    A handle is immutable once constructed and is shared by every request
    handler without locking.
    """

    kind: DatasetKind
    # substring the file's database_type metadata must contain
    database_type_marker: str

    def __init__(self, reader, path: Optional[str] = None):
        self._reader = reader
        self.path = path

    @classmethod
    def open(cls, path: str) -> "DatabaseHandle":
        """Map a database file and check that it serves this handle's kind"""
        try:
            reader = geoip2.database.Reader(path, mode=geoip2.database.MODE_MMAP)
        except Exception as e:
            raise DatasetLoadError(cls.kind, path, str(e) or e.__class__.__name__) from e

        database_type = reader.metadata().database_type
        if cls.database_type_marker not in database_type:
            reader.close()
            raise DatasetLoadError(
                cls.kind, path,
                f"database type {database_type!r} cannot serve {cls.kind} lookups",
            )
        return cls(reader, path)

    def query(self, address: Address):
        """Return this dataset's fields for an address, or None on a miss.

        Raises DatasetQueryError when the file cannot answer the lookup.
        """
        try:
            response = self._lookup(str(address))
        except geoip2.errors.AddressNotFoundError:
            return None
        except ValueError as e:
            # IPv6 address against an IPv4-only database
            logger.debug("%s lookup of %s skipped: %s", self.kind, address, e)
            return None
        except (maxminddb.InvalidDatabaseError, geoip2.errors.GeoIP2Error) as e:
            logger.error("%s lookup of %s failed: %s", self.kind, address, e, extra={
                "component": "enrich",
                "event": "query_failed",
                "db_path": self.path,
            })
            raise DatasetQueryError(self.kind, address, str(e) or e.__class__.__name__) from e
        return self._convert(response)

    @abstractmethod
    def _lookup(self, ip: str):
        """Run the format library's typed lookup"""

    @abstractmethod
    def _convert(self, response):
        """Map a format library response to this service's record fields"""

    def metadata(self) -> Dict[str, Any]:
        """Describe the underlying file"""
        meta = self._reader.metadata()
        return {
            "database_type": meta.database_type,
            "build_epoch": datetime.fromtimestamp(meta.build_epoch, tz=timezone.utc).isoformat(),
            "ip_version": meta.ip_version,
            "node_count": meta.node_count,
        }

    def close(self):
        self._reader.close()
