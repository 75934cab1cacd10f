"""vSAN Performance Manager SOAP plugin."""

from .client import VsanPerformanceClient
from .error_mapper import VsanErrorMapper
from .exceptions import (
    AuthenticationError,
    NotFoundError,
    ResponseParseError,
    ServerError,
    SoapFaultError,
    VsanAPIError,
)

__all__ = [
    "VsanPerformanceClient",
    "VsanErrorMapper",
    "VsanAPIError",
    "AuthenticationError",
    "NotFoundError",
    "ResponseParseError",
    "ServerError",
    "SoapFaultError",
]
