"""Ports (structural interfaces) for the ingestion layer."""

from .data_ports import VsanPerformancePort
from .http import HttpResponse, IHttpClient

__all__ = ["HttpResponse", "IHttpClient", "VsanPerformancePort"]
