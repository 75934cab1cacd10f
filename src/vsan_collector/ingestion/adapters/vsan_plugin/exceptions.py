"""
vSAN API Exception Hierarchy

Provides specific exception types for the failure modes of the vSAN
Performance Manager SOAP endpoint, so the decoder can report a precise cause
when it aborts a collection cycle.
"""


class VsanAPIError(Exception):
    """Base exception for all vSAN API errors."""

    def __init__(
        self, message: str, status_code: int | None = None, endpoint: str | None = None
    ):
        super().__init__(message)
        self.status_code = status_code
        self.endpoint = endpoint


class AuthenticationError(VsanAPIError):
    """401/403 or NotAuthenticated fault - session cookie missing or expired."""

    pass


class NotFoundError(VsanAPIError):
    """404 - vSAN health service path not available on this vCenter."""

    pass


class SoapFaultError(VsanAPIError):
    """The endpoint answered with a SOAP fault."""

    def __init__(self, message: str, fault_code: str | None = None, **kwargs):
        super().__init__(message, **kwargs)
        self.fault_code = fault_code


class ServerError(VsanAPIError):
    """500+ without a parseable fault body."""

    pass


class ResponseParseError(VsanAPIError):
    """Response body is not the expected SOAP document."""

    pass
