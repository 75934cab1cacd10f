"""
SOAP codec for VsanPerformanceManager.VsanPerfQueryPerf.

Builds the request envelope and reads VsanPerfEntityMetricCSV items out of the
response. The response keeps its columnar CSV encoding; splitting it is the
transformer's job. A response item looks like:

    <returnval xsi:type="VsanPerfEntityMetricCSV">
      <entityRefId>cluster-domclient:5270dc4d-3594-cc26-b33d-f6be33ddb353</entityRefId>
      <sampleInfo>2017-06-14 23:10:00,2017-06-14 23:15:00</sampleInfo>
      <value>
        <metricId><label>iopsRead</label>...</metricId>
        <values>1,1</values>
      </value>
      ...
    </returnval>
"""

from datetime import datetime
from xml.etree import ElementTree
from xml.sax.saxutils import escape

from vsan_collector.common.utils.date_utils import to_soap_datetime
from vsan_collector.shared.models.entities import EntityRecord, MetricSeries

from .exceptions import ResponseParseError, SoapFaultError

VSAN_NAMESPACE = "urn:vsan"
PERFORMANCE_MANAGER_TYPE = "VsanPerformanceManager"
PERFORMANCE_MANAGER_VALUE = "vsan-performance-manager"

_ENVELOPE_TEMPLATE = (
    '<?xml version="1.0" encoding="UTF-8"?>'
    '<soapenv:Envelope xmlns:soapenv="http://schemas.xmlsoap.org/soap/envelope/"'
    ' xmlns:xsi="http://www.w3.org/2001/XMLSchema-instance">'
    "<soapenv:Body>"
    '<VsanPerfQueryPerf xmlns="{namespace}">'
    '<_this type="{manager_type}">{manager_value}</_this>'
    "<querySpecs>"
    "<entityRefId>{entity_ref_id}</entityRefId>"
    "<startTime>{start}</startTime>"
    "<endTime>{end}</endTime>"
    "</querySpecs>"
    '<cluster type="ClusterComputeResource">{cluster_moid}</cluster>'
    "</VsanPerfQueryPerf>"
    "</soapenv:Body>"
    "</soapenv:Envelope>"
)


def _local(tag: str) -> str:
    """Strip the {namespace} prefix ElementTree puts on tags."""
    return tag.rsplit("}", 1)[-1]


def _child(element: ElementTree.Element, name: str) -> ElementTree.Element | None:
    for child in element:
        if _local(child.tag) == name:
            return child
    return None


def _children(element: ElementTree.Element, name: str) -> list[ElementTree.Element]:
    return [child for child in element if _local(child.tag) == name]


def _text(element: ElementTree.Element | None) -> str:
    if element is None or element.text is None:
        return ""
    return element.text.strip()


def _find_body(root: ElementTree.Element) -> ElementTree.Element | None:
    if _local(root.tag) != "Envelope":
        return None
    return _child(root, "Body")


def build_query_envelope(
    entity_ref_id: str, start: datetime, end: datetime, cluster_moid: str
) -> str:
    """Build the VsanPerfQueryPerf request with a single query spec."""
    return _ENVELOPE_TEMPLATE.format(
        namespace=VSAN_NAMESPACE,
        manager_type=PERFORMANCE_MANAGER_TYPE,
        manager_value=PERFORMANCE_MANAGER_VALUE,
        entity_ref_id=escape(entity_ref_id),
        start=to_soap_datetime(start),
        end=to_soap_datetime(end),
        cluster_moid=escape(cluster_moid),
    )


def extract_fault(body: str) -> tuple[str, str] | None:
    """
    Return (fault_code, fault_string) when ``body`` is a SOAP fault.

    The fault code is suffixed with the detail type (e.g.
    ``ServerFaultCode:NotAuthenticatedFault``) when vCenter provides one.
    Bodies that are not XML yield None.
    """
    try:
        root = ElementTree.fromstring(body)
    except ElementTree.ParseError:
        return None

    body_el = _find_body(root)
    if body_el is None:
        return None
    fault = _child(body_el, "Fault")
    if fault is None:
        return None

    fault_code = _text(_child(fault, "faultcode"))
    detail = _child(fault, "detail")
    if detail is not None and len(detail):
        fault_code = f"{fault_code}:{_local(detail[0].tag)}"
    return fault_code, _text(_child(fault, "faultstring"))


def parse_entity_record(element: ElementTree.Element) -> EntityRecord:
    """Convert one returnval element into an EntityRecord."""
    series = []
    for value in _children(element, "value"):
        metric_id = _child(value, "metricId")
        label = _text(_child(metric_id, "label")) if metric_id is not None else ""
        series.append(MetricSeries(label=label, values=_text(_child(value, "values"))))
    return EntityRecord(
        entity_ref_id=_text(_child(element, "entityRefId")),
        sample_info=_text(_child(element, "sampleInfo")),
        series=series,
    )


def parse_query_response(body: str) -> list[EntityRecord]:
    """
    Parse a VsanPerfQueryPerfResponse into EntityRecords, in document order.

    Raises:
        SoapFaultError: If the body is a SOAP fault
        ResponseParseError: If the body is not a VsanPerfQueryPerf response
    """
    fault = extract_fault(body)
    if fault is not None:
        raise SoapFaultError(f"SOAP fault: {fault[1]}", fault_code=fault[0])

    try:
        root = ElementTree.fromstring(body)
    except ElementTree.ParseError as e:
        raise ResponseParseError(f"Malformed SOAP response: {e}") from e

    body_el = _find_body(root)
    if body_el is None:
        raise ResponseParseError("Response is not a SOAP envelope")

    response = _child(body_el, "VsanPerfQueryPerfResponse")
    if response is None:
        raise ResponseParseError("Missing VsanPerfQueryPerfResponse element")

    return [parse_entity_record(item) for item in _children(response, "returnval")]
