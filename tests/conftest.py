# tests/conftest.py
from types import SimpleNamespace

import geoip2.errors
import pytest
from fastapi.testclient import TestClient

from geowidget.config import ServiceConfig
from geowidget.enrich.asn import AsnDatabase
from geowidget.enrich.geo import CityDatabase
from geowidget.enrich.registry import DatabaseRegistry
from geowidget.main import create_app
from geowidget.models import DatasetKind

TRUSTED_PROXY = "10.0.0.5"
CLIENT_PEER = "203.0.113.7"


def asn_response(number, organization, network):
    return SimpleNamespace(
        autonomous_system_number=number,
        autonomous_system_organization=organization,
        network=network,
    )


class Subdivisions(list):
    """List of subdivisions, largest first, like geoip2's records.Subdivisions"""

    @property
    def most_specific(self):
        return self[-1] if self else SimpleNamespace(iso_code=None, name=None)


def subdivision(code, name):
    return SimpleNamespace(iso_code=code, name=name)


def city_response(city=None, region=(None, None), subdivisions=None, country=(None, None),
                  continent=(None, None), latitude=None, longitude=None, accuracy_radius=None,
                  time_zone=None, postal=None):
    if subdivisions is None:
        subdivisions = [region] if region != (None, None) else []
    return SimpleNamespace(
        city=SimpleNamespace(name=city),
        subdivisions=Subdivisions(subdivision(*s) for s in subdivisions),
        country=SimpleNamespace(iso_code=country[0], name=country[1]),
        continent=SimpleNamespace(code=continent[0], name=continent[1]),
        location=SimpleNamespace(
            latitude=latitude,
            longitude=longitude,
            accuracy_radius=accuracy_radius,
            time_zone=time_zone,
        ),
        postal=SimpleNamespace(code=postal),
    )


ASN_RECORDS = {
    "8.8.8.8": asn_response(15169, "GOOGLE", "8.8.8.0/24"),
    "203.0.113.7": asn_response(64496, "EXAMPLE-NET", "203.0.113.0/24"),
    "2001:4860:4860::8888": asn_response(15169, "GOOGLE", "2001:4860::/32"),
}

CITY_RECORDS = {
    "8.8.8.8": city_response(
        city="Mountain View", region=("CA", "California"), country=("US", "United States"),
        continent=("NA", "North America"), latitude=37.386, longitude=-122.0838,
        accuracy_radius=1000, time_zone="America/Los_Angeles", postal="94035",
    ),
    "198.51.100.20": city_response(
        city="Krakow", region=("12", "Lesser Poland"), country=("PL", "Poland"),
        continent=("EU", "Europe"), latitude=50.0614, longitude=19.9366,
        accuracy_radius=20, time_zone="Europe/Warsaw",
    ),
    "81.2.69.160": city_response(
        city="London", subdivisions=[("ENG", "England"), ("WND", "Wandsworth")],
        country=("GB", "United Kingdom"), continent=("EU", "Europe"),
        latitude=51.5142, longitude=-0.0931, accuracy_radius=10, time_zone="Europe/London",
    ),
}


class FakeReader:
    """Stands in for geoip2.database.Reader over an in-memory table"""

    def __init__(self, records, database_type, ip_version=6):
        self.records = records
        self.database_type = database_type
        self.ip_version = ip_version
        self.closed = False

    def _get(self, ip):
        if self.ip_version == 4 and ":" in ip:
            raise ValueError(f"Error looking up {ip}. You attempted to look up an IPv6 address in an IPv4-only database.")
        try:
            return self.records[ip]
        except KeyError:
            raise geoip2.errors.AddressNotFoundError(f"The address {ip} is not in the database.")

    def asn(self, ip):
        return self._get(ip)

    def city(self, ip):
        return self._get(ip)

    def metadata(self):
        return SimpleNamespace(
            database_type=self.database_type,
            build_epoch=1760000000,
            ip_version=self.ip_version,
            node_count=len(self.records),
        )

    def close(self):
        self.closed = True


@pytest.fixture
def asn_handle():
    return AsnDatabase(FakeReader(ASN_RECORDS, "GeoLite2-ASN"), path="/data/GeoLite2-ASN.mmdb")


@pytest.fixture
def city_handle():
    return CityDatabase(FakeReader(CITY_RECORDS, "GeoLite2-City"), path="/data/GeoLite2-City.mmdb")


@pytest.fixture
def make_registry(asn_handle, city_handle):
    def _make(asn=True, city=True):
        handles = {
            DatasetKind.ASN: asn_handle if asn else None,
            DatasetKind.CITY: city_handle if city else None,
        }
        errors = {kind: "No such file or directory" for kind, handle in handles.items() if handle is None}
        paths = {DatasetKind.ASN: asn_handle.path, DatasetKind.CITY: city_handle.path}
        return DatabaseRegistry(handles, paths=paths, errors=errors)
    return _make


@pytest.fixture
def registry(make_registry):
    return make_registry()


def with_peer(app, host):
    """Present every HTTP request to the app as coming from host"""
    async def asgi(scope, receive, send):
        if scope["type"] == "http":
            scope = dict(scope, client=(host, 50000))
        await app(scope, receive, send)
    return asgi


@pytest.fixture
def make_client(make_registry):
    def _make(asn=True, city=True, require_all=False, peer=CLIENT_PEER, trusted_proxies=(TRUSTED_PROXY,)):
        config = ServiceConfig(trusted_proxies=list(trusted_proxies), require_all=require_all)
        app = create_app(config, registry=make_registry(asn=asn, city=city))
        return TestClient(with_peer(app, peer) if peer else app)
    return _make


@pytest.fixture
def client(make_client):
    return make_client()
