"""
Tests for AiohttpClient against a local aiohttp test server.
"""

import pytest
from aiohttp import web
from aiohttp.test_utils import TestServer

from vsan_collector.ingestion.config.value_objects import HttpClientConfig
from vsan_collector.ingestion.connectors.aiohttp_client import AiohttpClient


async def _echo(request: web.Request) -> web.Response:
    body = await request.text()
    return web.Response(
        text=f"<echo>{body}</echo>",
        status=500 if "fault" in body else 200,
        headers={"X-SOAPAction": request.headers.get("SOAPAction", "")},
        content_type="text/xml",
    )


@pytest.fixture
def app():
    application = web.Application()
    application.router.add_post("/vsanHealth", _echo)
    return application


class TestAiohttpClient:
    @pytest.mark.asyncio
    async def test_post_returns_text_response(self, app):
        async with TestServer(app) as server:
            url = str(server.make_url("/vsanHealth"))
            async with AiohttpClient(HttpClientConfig(timeout=5)) as client:
                response = await client.post(
                    url, data="<query/>", headers={"SOAPAction": "urn:vsan"}
                )

        assert response.status_code == 200
        assert response.body == "<echo><query/></echo>"
        assert response.headers["X-SOAPAction"] == "urn:vsan"
        assert response.url == url

    @pytest.mark.asyncio
    async def test_error_status_is_returned_not_raised(self, app):
        async with TestServer(app) as server:
            async with AiohttpClient() as client:
                response = await client.post(
                    str(server.make_url("/vsanHealth")), data="<fault/>"
                )

        assert response.status_code == 500

    @pytest.mark.asyncio
    async def test_close_resets_session(self):
        client = AiohttpClient()
        await client._get_session()

        await client.close()

        assert client._session is None
