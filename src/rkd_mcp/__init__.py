"""
RKD MCP Server

A Model Context Protocol (MCP) server for the Refinitiv Knowledge Direct API.
Caches the RKD service token and forwards quote, time series, news and
chart requests with it.
"""

__version__ = "0.1.0"

from .auth import (
    AcquisitionError,
    Credential,
    CredentialAcquirer,
    ServiceIdentity,
    TokenCache,
)
from .client import DispatchError, RkdClient
from .config import Settings, settings
from .expiry import parse_expiry

__all__ = [
    "AcquisitionError",
    "Credential",
    "CredentialAcquirer",
    "ServiceIdentity",
    "TokenCache",
    "DispatchError",
    "RkdClient",
    "Settings",
    "settings",
    "parse_expiry",
]
