"""Mista module for sending SMS through the Mista.io API."""

from .client import MistaClient, create_authorization_header

__all__ = [
    "MistaClient",
    "create_authorization_header",
]
