"""
Client address determination and proxy trust
"""
import ipaddress
import logging
from typing import Iterable, List, Optional

from .address import Address
from .errors import InvalidAddress, ProxyTrustViolation

logger = logging.getLogger("geowidget.security")

FORWARDED = "forwarded"
X_FORWARDED_FOR = "x-forwarded-for"


class TrustedProxies:
    """Allow-list of proxy addresses permitted to supply a forwarded client address.

    An empty allow-list trusts nobody, so only the transport peer is used.
    """

    def __init__(self, cidrs: Optional[Iterable[str]] = None):
        self.networks = []
        for cidr in cidrs or ():
            try:
                self.networks.append(ipaddress.ip_network(cidr.strip(), strict=False))
            except ValueError:
                logger.warning("ignoring invalid trusted proxy entry %r", cidr)

    def __bool__(self) -> bool:
        return bool(self.networks)

    def __contains__(self, address: Address) -> bool:
        return ip_in_cidrs(address, self.networks)


def ip_in_cidrs(address: Address, networks) -> bool:
    """Check if an address is in any of the provided networks"""
    if not networks:
        return False
    candidates = [address.value]
    # dual-stack sockets report IPv4 peers as ::ffff:a.b.c.d
    if address.ipv4_mapped is not None:
        candidates.append(address.ipv4_mapped)
    for network in networks:
        for ip_obj in candidates:
            if ip_obj.version == network.version and ip_obj in network:
                return True
    return False


def resolve_explicit(raw: str) -> Address:
    """Validate a caller-supplied address literal; no network trust is implied"""
    return Address.parse(raw)


def _strip_port(token: str) -> str:
    """Remove quotes, IPv6 brackets and a trailing port from a forwarded node"""
    token = token.strip().strip('"').strip()
    if token.startswith("["):
        end = token.find("]")
        return token[1:end] if end != -1 else token
    # a single colon means host:port; more than one is a bare IPv6 literal
    if token.count(":") == 1:
        return token.split(":", 1)[0]
    return token


def forwarded_for_chain(forwarded: Optional[str]) -> List[str]:
    """Return the for= nodes of an RFC 7239 Forwarded header, client first"""
    nodes = []
    if not forwarded:
        return nodes
    for element in forwarded.split(","):
        for pair in element.split(";"):
            name, sep, value = pair.partition("=")
            if sep and name.strip().lower() == "for":
                nodes.append(_strip_port(value))
    return nodes


def x_forwarded_for_chain(xff: Optional[str]) -> List[str]:
    """Return the entries of an X-Forwarded-For header, client first"""
    if not xff:
        return []
    return [_strip_port(part) for part in xff.split(",") if part.strip()]


def select_client_address(
    peer: Optional[str],
    forwarded: Optional[str],
    x_forwarded_for: Optional[str],
    trusted: TrustedProxies,
) -> Address:
    """Decide which address made the request.

    Forwarding headers are honoured only when the transport peer is an
    allow-listed proxy. ``Forwarded`` takes precedence over
    ``X-Forwarded-For``, and the left-most entry of the chosen chain is the
    original client. A left-most entry that is not an address (``unknown``,
    obfuscated identifiers) makes the header unusable and the peer is used.

    Raises InvalidAddress when the answer would be an unparsable peer.
    """
    peer_address = Address.parse(peer)

    header, chain = None, []
    if forwarded:
        header, chain = FORWARDED, forwarded_for_chain(forwarded)
    if not chain and x_forwarded_for:
        header, chain = X_FORWARDED_FOR, x_forwarded_for_chain(x_forwarded_for)
    if not chain:
        return peer_address

    if peer_address not in trusted:
        logger.debug(str(ProxyTrustViolation(str(peer_address), header)))
        return peer_address

    try:
        return Address.parse(chain[0])
    except InvalidAddress:
        logger.info("unusable %s client entry %r from proxy %s", header, chain[0], peer_address)
        return peer_address


def resolve_caller(request, trusted: TrustedProxies) -> Address:
    """Determine the address of the entity that made the request"""
    peer = request.client.host if request.client else None
    forwarded = ", ".join(request.headers.getlist(FORWARDED)) or None
    xff = ", ".join(request.headers.getlist(X_FORWARDED_FOR)) or None
    return select_client_address(peer, forwarded, xff, trusted)
