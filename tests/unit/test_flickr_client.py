"""
Unit tests for the Flickr REST client
"""

import pytest
import httpx
from ingestion.enrichment.flickr_client import FlickrClient
from schemas.flickr import LicensesPayload
from core.exceptions import DecodeError, TransportError

API_URL = "https://api.flickr.test/services/rest/"


def make_client(handler):
    http_client = httpx.AsyncClient(transport=httpx.MockTransport(handler))
    return http_client, FlickrClient(http_client, api_key="test_key", api_url=API_URL)


class TestFlickrClient:
    """Test request building and failure classification"""
    
    @pytest.mark.asyncio
    async def test_call_sends_key_and_format(self):
        seen = {}
        
        def handler(request):
            seen.update(dict(request.url.params))
            return httpx.Response(200, json={"stat": "ok", "value": 1})
        
        http_client, client = make_client(handler)
        async with http_client:
            data = await client.call("flickr.test.echo", lat=1.5, place_id=None)
        
        assert data["value"] == 1
        assert seen["method"] == "flickr.test.echo"
        assert seen["api_key"] == "test_key"
        assert seen["format"] == "json"
        assert seen["nojsoncallback"] == "1"
        assert seen["lat"] == "1.5"
        assert "place_id" not in seen
    
    @pytest.mark.asyncio
    async def test_http_error_status_is_transport_error(self):
        http_client, client = make_client(lambda request: httpx.Response(502, text="bad gateway"))
        
        async with http_client:
            with pytest.raises(TransportError) as exc_info:
                await client.call("flickr.test.echo")
        
        assert exc_info.value.context["status_code"] == 502
    
    @pytest.mark.asyncio
    async def test_connection_error_is_transport_error(self):
        def handler(request):
            raise httpx.ConnectError("connection refused", request=request)
        
        http_client, client = make_client(handler)
        async with http_client:
            with pytest.raises(TransportError):
                await client.call("flickr.test.echo")
    
    @pytest.mark.asyncio
    async def test_stat_fail_is_transport_error(self):
        http_client, client = make_client(
            lambda request: httpx.Response(200, json={"stat": "fail", "code": 100, "message": "Invalid API Key"})
        )
        
        async with http_client:
            with pytest.raises(TransportError) as exc_info:
                await client.call("flickr.test.echo")
        
        assert exc_info.value.context["flickr_code"] == 100
        assert "Invalid API Key" in exc_info.value.message
    
    @pytest.mark.asyncio
    async def test_non_json_body_is_decode_error(self):
        http_client, client = make_client(lambda request: httpx.Response(200, text="jsonFlickrApi({})"))
        
        async with http_client:
            with pytest.raises(DecodeError):
                await client.call("flickr.test.echo")
    
    @pytest.mark.asyncio
    async def test_json_array_is_decode_error(self):
        http_client, client = make_client(lambda request: httpx.Response(200, json=[1, 2]))
        
        async with http_client:
            with pytest.raises(DecodeError):
                await client.call("flickr.test.echo")
    
    @pytest.mark.asyncio
    async def test_unexpected_shape_is_decode_error(self):
        http_client, client = make_client(lambda request: httpx.Response(200, json={"licenses": {}, "stat": "ok"}))
        
        async with http_client:
            with pytest.raises(DecodeError):
                await client.call_and_decode("flickr.photos.licenses.getInfo", LicensesPayload)
    
    @pytest.mark.asyncio
    async def test_call_and_decode(self, licenses_payload):
        http_client, client = make_client(lambda request: httpx.Response(200, json=licenses_payload))
        
        async with http_client:
            payload = await client.call_and_decode("flickr.photos.licenses.getInfo", LicensesPayload)
        
        assert len(payload.licenses.license) == 4
        assert payload.licenses.license[1].id == 4
