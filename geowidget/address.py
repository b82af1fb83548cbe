"""
Validated IP address values
"""

import ipaddress
from dataclasses import dataclass
from typing import Union

from .errors import InvalidAddress

IPAddress = Union[ipaddress.IPv4Address, ipaddress.IPv6Address]


@dataclass(frozen=True)
class Address:
    """An IPv4 or IPv6 address that has already been validated.

    Build instances with ``Address.parse``; every other component receives
    addresses through it so there is exactly one validation point.
    """

    value: IPAddress

    @classmethod
    def parse(cls, raw) -> "Address":
        if not isinstance(raw, str):
            raise InvalidAddress(raw, "address must be a string")
        if not raw:
            raise InvalidAddress(raw, "empty address")
        try:
            return cls(ipaddress.ip_address(raw))
        except ValueError as e:
            raise InvalidAddress(raw, str(e)) from e

    @property
    def version(self) -> int:
        return self.value.version

    @property
    def ipv4_mapped(self):
        """The embedded IPv4 address of an ::ffff:0:0/96 address, else None"""
        if self.value.version == 6:
            return self.value.ipv4_mapped
        return None

    def __str__(self) -> str:
        mapped = self.ipv4_mapped
        if mapped is not None:
            # keep the dotted tail whatever the interpreter's default form
            return f"::ffff:{mapped}"
        return str(self.value)
