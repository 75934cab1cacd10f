"""
vSAN performance collector.
Turns the columnar CSV-in-SOAP performance responses of the vSAN Performance
Manager into normalized measurement points.

Modules:
- ingestion: Remote querying (SOAP client, response decoder)
- transformation: Record transformer (CSV axis/series -> points)
- orchestration: Per-cluster collection workflow
- storage: Point sinks
- shared: Common models, enums, utilities
- infrastructure: Logging
- config: YAML + environment configuration
- cli: vsan-collect entry point
"""

__version__ = "0.1.0"
