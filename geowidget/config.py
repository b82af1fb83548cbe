"""
Configuration module for geowidget
"""

import os
from dataclasses import dataclass, field
from typing import Dict, List, Optional

from .models import DatasetKind


def env_bool(key: str, default: bool = False) -> bool:
    """Get boolean value from environment variable"""
    value = os.getenv(key, str(default)).lower()
    return value in ("true", "1", "yes", "on")


def env_list(key: str, default: str = "") -> List[str]:
    """Get a comma separated list from an environment variable"""
    return [item.strip() for item in os.getenv(key, default).split(",") if item.strip()]


# Version information
API_VERSION = os.getenv("APP_VERSION", "0.1.0")

# Listener configuration
APP_HOST = os.getenv("APP_HOST", "0.0.0.0")
APP_PORT = int(os.getenv("APP_PORT", "8888"))

# GeoIP configuration
GEOIP_DB_ASN = os.getenv("GEOIP_DB_ASN", "GeoLite2-ASN.mmdb")
GEOIP_DB_CITY = os.getenv("GEOIP_DB_CITY", "GeoLite2-City.mmdb")

# Proxy trust: IPs or CIDRs allowed to supply a forwarded client address
TRUSTED_PROXIES = env_list("TRUSTED_PROXIES")

# Health policy
HEALTH_REQUIRE_ALL: bool = env_bool("HEALTH_REQUIRE_ALL", False)

# Logging configuration
LOG_LEVEL = os.getenv("LOG_LEVEL", "WARNING")
LOG_FORMAT = os.getenv("LOG_FORMAT", "text")
LOGGING_CONFIG = os.getenv("LOGGING_CONFIG", "LOGGING.yaml")
HTTP_LOG_EXCLUDE_PATHS = set(env_list("HTTP_LOG_EXCLUDE_PATHS", "/ping,/metrics/prometheus"))


@dataclass
class ServiceConfig:
    """Plain values consumed by the service core"""

    asn_database_file: Optional[str] = GEOIP_DB_ASN
    city_database_file: Optional[str] = GEOIP_DB_CITY
    trusted_proxies: List[str] = field(default_factory=list)
    require_all: bool = False
    host: str = APP_HOST
    port: int = APP_PORT
    verbose: bool = False
    debug: bool = False

    @classmethod
    def from_env(cls) -> "ServiceConfig":
        return cls(
            asn_database_file=os.getenv("GEOIP_DB_ASN", GEOIP_DB_ASN) or None,
            city_database_file=os.getenv("GEOIP_DB_CITY", GEOIP_DB_CITY) or None,
            trusted_proxies=env_list("TRUSTED_PROXIES"),
            require_all=env_bool("HEALTH_REQUIRE_ALL", HEALTH_REQUIRE_ALL),
            host=os.getenv("APP_HOST", APP_HOST),
            port=int(os.getenv("APP_PORT", str(APP_PORT))),
            verbose=env_bool("VERBOSE", False),
            debug=env_bool("DEBUG", False),
        )

    def dataset_paths(self) -> Dict[DatasetKind, Optional[str]]:
        return {
            DatasetKind.ASN: self.asn_database_file,
            DatasetKind.CITY: self.city_database_file,
        }

    @property
    def log_level(self) -> str:
        # --debug wins over --verbose; access logs are emitted at INFO
        if self.debug:
            return "DEBUG"
        if self.verbose:
            return "INFO"
        return LOG_LEVEL
