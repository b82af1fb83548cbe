from typing import Dict, List, Optional
from pydantic import BaseModel, Field

from ..models import DatasetKind, DatasetStatus, OutcomeKind


class NamedCode(BaseModel):
    code: Optional[str] = Field(None, description="ISO or continent code")
    name: Optional[str] = Field(None, description="English name")


class AsnInfo(BaseModel):
    number: int = Field(..., description="Autonomous system number")
    organization: Optional[str] = Field(None, description="Organization announcing the network")
    network: Optional[str] = Field(None, description="Network the address belongs to")


class PlaceInfo(BaseModel):
    continent: Optional[NamedCode] = None
    country: Optional[NamedCode] = None
    region: Optional[NamedCode] = Field(None, description="Most specific subdivision")
    subdivisions: Optional[List[NamedCode]] = Field(None, description="Subdivisions, largest first")
    city: Optional[str] = None
    latitude: Optional[float] = None
    longitude: Optional[float] = None
    accuracy_radius: Optional[int] = Field(None, description="Accuracy radius in kilometers")
    time_zone: Optional[str] = None
    postal_code: Optional[str] = None


class GeoRecord(BaseModel):
    asn: Optional[AsnInfo] = Field(None, description="Network ownership, null when not matched")
    place: Optional[PlaceInfo] = Field(None, description="Place data, null when not matched")


class LookupResponse(BaseModel):
    address: str
    version: int = Field(..., description="IP version, 4 or 6")
    outcome: OutcomeKind
    datasets: Dict[DatasetKind, DatasetStatus]
    asn: Optional[AsnInfo] = None
    place: Optional[PlaceInfo] = None
    summary: Optional[str] = Field(None, description="<CITY>,<REGION>/<COUNTRY>; <AS ORG> (<ASN>);")


class InvalidAddressResponse(BaseModel):
    outcome: OutcomeKind = OutcomeKind.INVALID_ADDRESS
    address: Optional[str] = None
    detail: str


class DatasetDetail(BaseModel):
    loaded: bool
    path: Optional[str] = None
    error: Optional[str] = None
    database_type: Optional[str] = None
    build_epoch: Optional[str] = None
    ip_version: Optional[int] = None


class HealthResponse(BaseModel):
    status: str = Field(..., description="ok or degraded")
    healthy: bool
    all_loaded: bool
    require_all: bool
    datasets: Dict[DatasetKind, bool]
    details: Dict[DatasetKind, DatasetDetail] = Field(default_factory=dict)


class PongResponse(BaseModel):
    ping: str = "pong"
