#!/usr/bin/env python3
"""
An API widget which provides geographic and network information for a given IP address.

Example:
    python -m geowidget --verbose --port 8893 \\
        --asn-database-file /var/db/GeoLite2-ASN.mmdb \\
        --city-database-file /var/db/GeoLite2-City.mmdb
"""

import argparse
import logging

import uvicorn

from .config import ServiceConfig
from .logging_config import setup_logging
from .main import create_app


def parse_args(argv=None) -> ServiceConfig:
    defaults = ServiceConfig.from_env()
    parser = argparse.ArgumentParser(prog="geowidget", description=__doc__.strip().splitlines()[0])
    parser.add_argument("-a", "--addr", default=defaults.host,
                        help="The IP address to listen for requests")
    parser.add_argument("-p", "--port", type=int, default=defaults.port,
                        help="The port number to listen for requests")
    parser.add_argument("--asn-database-file", default=defaults.asn_database_file,
                        help="File path to the ASN database")
    parser.add_argument("--city-database-file", default=defaults.city_database_file,
                        help="File path to the City database")
    parser.add_argument("--trusted-proxy", action="append", default=None, metavar="CIDR",
                        help="Proxy address or network allowed to set forwarding headers (repeatable)")
    parser.add_argument("--require-all", action="store_true", default=defaults.require_all,
                        help="Report unhealthy (503) unless every database is loaded")
    parser.add_argument("-v", "--verbose", action="store_true", default=defaults.verbose,
                        help="Increase log messaging to verbose")
    parser.add_argument("--debug", action="store_true", default=defaults.debug,
                        help="Increase log messaging to debug")
    args = parser.parse_args(argv)

    return ServiceConfig(
        asn_database_file=args.asn_database_file or None,
        city_database_file=args.city_database_file or None,
        trusted_proxies=args.trusted_proxy if args.trusted_proxy is not None else defaults.trusted_proxies,
        require_all=args.require_all,
        host=args.addr,
        port=args.port,
        verbose=args.verbose,
        debug=args.debug,
    )


def main(argv=None):
    config = parse_args(argv)
    setup_logging(log_level=config.log_level)
    logging.getLogger("geowidget").info("Starting geowidget on %s:%s", config.host, config.port)
    uvicorn.run(
        create_app(config),
        host=config.host,
        port=config.port,
        log_config=None,
        access_log=False,
    )


if __name__ == "__main__":
    main()
