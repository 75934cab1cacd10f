"""
vSAN Error Mapper

Maps HTTP status codes and SOAP fault bodies to specific exception types,
providing context-rich error messages for debugging.
"""

from .exceptions import (
    AuthenticationError,
    NotFoundError,
    ServerError,
    SoapFaultError,
    VsanAPIError,
)
from .soap import extract_fault

# Fault types vCenter uses for a dead or missing session
_AUTH_FAULTS = ("NotAuthenticated", "InvalidLogin", "NoPermission")


class VsanErrorMapper:
    """Maps HTTP status codes and SOAP faults to appropriate exception types."""

    @staticmethod
    def map_error(status_code: int, body: str, endpoint: str) -> VsanAPIError:
        """
        Map a failed response to a specific exception with context.

        Args:
            status_code: HTTP status code
            body: Raw response body
            endpoint: Endpoint that was called

        Returns:
            Appropriate VsanAPIError subclass instance
        """
        fault = extract_fault(body)
        if fault is not None:
            fault_code, fault_string = fault
            if any(name in fault_code or name in fault_string for name in _AUTH_FAULTS):
                return AuthenticationError(
                    f"Session rejected by {endpoint}: {fault_string}",
                    status_code=status_code,
                    endpoint=endpoint,
                )
            return SoapFaultError(
                f"SOAP fault from {endpoint}: {fault_string}",
                fault_code=fault_code,
                status_code=status_code,
                endpoint=endpoint,
            )

        snippet = body.strip()[:200]
        if status_code in (401, 403):
            return AuthenticationError(
                f"Not authorized for {endpoint}: {snippet}",
                status_code=status_code,
                endpoint=endpoint,
            )
        if status_code == 404:
            return NotFoundError(
                f"vSAN endpoint not found at {endpoint}",
                status_code=status_code,
                endpoint=endpoint,
            )
        if status_code >= 500:
            return ServerError(
                f"Server error {status_code} for {endpoint}: {snippet}",
                status_code=status_code,
                endpoint=endpoint,
            )
        return VsanAPIError(
            f"Unexpected status {status_code} for {endpoint}: {snippet}",
            status_code=status_code,
            endpoint=endpoint,
        )
