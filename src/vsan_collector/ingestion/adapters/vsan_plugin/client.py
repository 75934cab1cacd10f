from datetime import datetime

from vsan_collector.infrastructure.observability import get_ingestion_logger
from vsan_collector.ingestion.config.value_objects import VsanEndpointConfig
from vsan_collector.ingestion.ports.data_ports import VsanPerformancePort
from vsan_collector.ingestion.ports.http import IHttpClient
from vsan_collector.shared.models.entities import EntityRecord

from .error_mapper import VsanErrorMapper
from .soap import build_query_envelope, parse_query_response

SESSION_COOKIE_NAME = "vmware_soap_session"


class VsanPerformanceClient(VsanPerformancePort):
    """Async SOAP client for the vSAN Performance Manager.

    Single Responsibility: Send one VsanPerfQueryPerf request per call and
    turn the answer into EntityRecords.

    Does NOT:
    - Establish or refresh the vCenter session (cookie is injected)
    - Retry failed requests
    """

    def __init__(self, config: VsanEndpointConfig, http_client: IHttpClient):
        """Initialize client with injected transport.

        Args:
            config: Endpoint URL, SOAPAction and session cookie
            http_client: HTTP client implementation (e.g., AiohttpClient)
        """
        self.config = config
        self.http_client = http_client
        self.log = get_ingestion_logger("vsan-client", endpoint=config.endpoint)

    def _headers(self) -> dict[str, str]:
        headers = {
            "Content-Type": "text/xml; charset=utf-8",
            "SOAPAction": self.config.soap_action,
        }
        if self.config.session_cookie:
            headers["Cookie"] = f"{SESSION_COOKIE_NAME}={self.config.session_cookie}"
        return headers

    async def query_perf(
        self,
        entity_ref_id: str,
        start: datetime,
        end: datetime,
        cluster_moid: str,
    ) -> list[EntityRecord]:
        """Run VsanPerfQueryPerf for one entity filter.

        Raises:
            VsanAPIError subclasses for HTTP errors, SOAP faults and
            malformed responses; aiohttp.ClientError for transport failures
        """
        envelope = build_query_envelope(entity_ref_id, start, end, cluster_moid)
        self.log.debug(
            "vsan_query_sent", entity_ref_id=entity_ref_id, cluster=cluster_moid
        )

        response = await self.http_client.post(
            self.config.endpoint, data=envelope, headers=self._headers()
        )

        if response.status_code != 200:
            raise VsanErrorMapper.map_error(
                response.status_code, response.body, self.config.endpoint
            )

        return parse_query_response(response.body)
