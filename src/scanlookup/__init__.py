"""Barcode scan and product lookup service."""

__version__ = "0.1.0"
