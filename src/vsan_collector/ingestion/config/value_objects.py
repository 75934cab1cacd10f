"""Configuration value objects for dependency injection.

Instead of injecting the global ConfigState, inject specific configuration
dataclasses into each component, built at the composition root.
"""

from dataclasses import dataclass

from vsan_collector.config.state import VCenterConfig


@dataclass(frozen=True)
class HttpClientConfig:
    """Configuration for HTTP client."""

    timeout: float = 60.0
    connect_timeout: float = 10.0
    verify_ssl: bool = True


@dataclass(frozen=True)
class VsanEndpointConfig:
    """Configuration for the vSAN SOAP endpoint."""

    endpoint: str
    soap_action: str = "urn:vsan"
    session_cookie: str = ""

    @classmethod
    def from_vcenter(cls, vcenter: VCenterConfig) -> "VsanEndpointConfig":
        return cls(
            endpoint=vcenter.endpoint,
            soap_action=vcenter.soap_action,
            session_cookie=vcenter.session_cookie,
        )
