"""Routing and assignment engine for geotagged waste-pickup reports."""

__version__ = "0.1.0"
