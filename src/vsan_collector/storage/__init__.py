"""Point sinks."""

from .sinks import InMemoryPointSink, LineProtocolSink, format_line_protocol

__all__ = ["InMemoryPointSink", "LineProtocolSink", "format_line_protocol"]
