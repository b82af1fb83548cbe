"""
Error taxonomy for geowidget
"""

from typing import Optional


class GeoWidgetError(Exception):
    """Base class for service errors"""


class InvalidAddress(GeoWidgetError):
    """A string could not be parsed as an IPv4 or IPv6 address"""

    def __init__(self, raw: Optional[str], reason: str = "not a valid IPv4 or IPv6 address"):
        self.raw = raw
        self.reason = reason
        super().__init__(f"invalid address {raw!r}: {reason}")


class DatasetLoadError(GeoWidgetError):
    """A configured database file could not be opened or validated"""

    def __init__(self, kind, path: Optional[str], reason: str):
        self.kind = kind
        self.path = path
        self.reason = reason
        super().__init__(f"failed to load {kind} database from {path!r}: {reason}")


class ProxyTrustViolation(GeoWidgetError):
    """Forwarding headers were sent by a peer that is not an allow-listed proxy"""

    def __init__(self, peer: str, header: str):
        self.peer = peer
        self.header = header
        super().__init__(f"ignoring {header} from untrusted peer {peer}")


class DatasetQueryError(GeoWidgetError):
    """A loaded database could not answer one lookup"""

    def __init__(self, kind, address, reason: str):
        self.kind = kind
        self.address = address
        self.reason = reason
        super().__init__(f"{kind} lookup of {address} failed: {reason}")
