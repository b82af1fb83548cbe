"""
geowidget - geographic and network information for IP addresses
"""

__version__ = "0.1.0"
