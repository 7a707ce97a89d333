"""
Transport core tests: request construction, response classification and
diagnostics, all against an in-process MockTransport.
"""

import json

import httpx
import pytest

from ss12000.adapters.transport import Transport
from ss12000.core.config import ClientConfig
from ss12000.core.errors import (
    ApiError,
    DecodeError,
    RequestTimeoutError,
    TransportError,
    UnknownError,
)

from conftest import BASE_URL, TOKEN


def make_transport(recorder, diagnostics, *, base_url=BASE_URL, token=TOKEN, timeout=30.0):
    config = ClientConfig.build(base_url, token, timeout_seconds=timeout)
    return Transport(config, transport=httpx.MockTransport(recorder.handler), diagnostics=diagnostics)


class TestRequestConstruction:
    async def test_default_headers(self, recorder, diagnostics):
        async with make_transport(recorder, diagnostics) as transport:
            await transport.invoke("GET", "/organisations")

        headers = recorder.last.headers
        assert headers["Accept"] == "application/json"
        assert headers["Content-Type"] == "application/json"
        assert headers["Authorization"] == f"Bearer {TOKEN}"
        assert headers["User-Agent"].startswith("ss12000-client/")

    async def test_no_authorization_header_without_token(self, recorder, diagnostics):
        async with make_transport(recorder, diagnostics, token=None) as transport:
            await transport.invoke("GET", "/organisations")
        assert "Authorization" not in recorder.last.headers

    async def test_url_joins_base_and_path(self, recorder, diagnostics):
        async with make_transport(recorder, diagnostics, base_url=BASE_URL + "/") as transport:
            await transport.invoke("GET", "/persons", [("limit", "2")])
        assert str(recorder.last.url) == f"{BASE_URL}/persons?limit=2"

    async def test_body_is_json_encoded_verbatim(self, recorder, diagnostics):
        body = {"ids": ["a", "b"], "civicNos": [{"value": "200001011234"}]}
        async with make_transport(recorder, diagnostics) as transport:
            await transport.invoke("POST", "/persons/lookup", None, body)
        assert recorder.last.method == "POST"
        assert json.loads(recorder.last.content) == body

    async def test_get_sends_no_body(self, recorder, diagnostics):
        async with make_transport(recorder, diagnostics) as transport:
            await transport.invoke("GET", "/rooms")
        assert recorder.last.content == b""


class TestResponseHandling:
    async def test_decodes_json(self, recorder, diagnostics):
        recorder.queue(httpx.Response(200, json={"data": [{"id": "1"}], "pageToken": "next"}))
        async with make_transport(recorder, diagnostics) as transport:
            assert await transport.invoke("GET", "/rooms") == {"data": [{"id": "1"}], "pageToken": "next"}

    async def test_204_returns_none_without_decoding(self, recorder, diagnostics):
        """Malformed bytes on a 204 must not raise DecodeError."""
        recorder.queue(httpx.Response(204, content=b"{not json"))
        async with make_transport(recorder, diagnostics) as transport:
            assert await transport.invoke("DELETE", "/attendances/x") is None
        assert diagnostics.names("error") == []

    async def test_empty_2xx_body_returns_none(self, recorder, diagnostics):
        recorder.queue(httpx.Response(202, content=b""))
        async with make_transport(recorder, diagnostics) as transport:
            assert await transport.invoke("POST", "/attendances", None, {"id": "x"}) is None

    async def test_malformed_json_raises_decode_error(self, recorder, diagnostics):
        recorder.queue(httpx.Response(200, content=b"<html>oops</html>"))
        async with make_transport(recorder, diagnostics) as transport:
            with pytest.raises(DecodeError) as excinfo:
                await transport.invoke("GET", "/rooms")
        assert excinfo.value.body == "<html>oops</html>"
        assert diagnostics.names("error") == ["DecodeError"]

    async def test_404_raises_api_error_with_body(self, recorder, diagnostics):
        recorder.queue(httpx.Response(404, json={"message": "not found"}))
        async with make_transport(recorder, diagnostics) as transport:
            with pytest.raises(ApiError) as excinfo:
                await transport.invoke("GET", "/persons/missing")

        error = excinfo.value
        assert error.status_code == 404
        assert json.loads(error.body) == {"message": "not found"}
        assert error.payload == {"message": "not found"}
        assert error.context["method"] == "GET"
        assert error.context["url"] == f"{BASE_URL}/persons/missing"

    async def test_api_error_with_non_json_body(self, recorder, diagnostics):
        recorder.queue(httpx.Response(500, text="Internal Server Error"))
        async with make_transport(recorder, diagnostics) as transport:
            with pytest.raises(ApiError) as excinfo:
                await transport.invoke("GET", "/groups")
        assert excinfo.value.status_code == 500
        assert excinfo.value.body == "Internal Server Error"
        assert excinfo.value.payload is None

    async def test_invoke_void_discards_body(self, recorder, diagnostics):
        recorder.queue(httpx.Response(200, content=b"not json at all"))
        async with make_transport(recorder, diagnostics) as transport:
            assert await transport.invoke_void("POST", "/attendanceEvents", None, {"a": 1}) is None

    async def test_invoke_void_raises_api_error(self, recorder, diagnostics):
        recorder.queue(httpx.Response(409, json={"message": "conflict"}))
        async with make_transport(recorder, diagnostics) as transport:
            with pytest.raises(ApiError) as excinfo:
                await transport.invoke_void("DELETE", "/attendances/1")
        assert excinfo.value.status_code == 409


class TestFailureClassification:
    async def test_timeout_is_request_timeout_error(self, recorder, diagnostics):
        def timeout(request):
            raise httpx.ReadTimeout("timed out", request=request)

        recorder.queue(timeout)
        async with make_transport(recorder, diagnostics, timeout=1.5) as transport:
            with pytest.raises(RequestTimeoutError) as excinfo:
                await transport.invoke("GET", "/activities")
        assert isinstance(excinfo.value, TransportError)
        assert excinfo.value.context["timeout_seconds"] == 1.5
        assert isinstance(excinfo.value.__cause__, httpx.ReadTimeout)

    async def test_connection_failure_is_transport_error(self, recorder, diagnostics):
        def refused(request):
            raise httpx.ConnectError("connection refused", request=request)

        recorder.queue(refused)
        async with make_transport(recorder, diagnostics) as transport:
            with pytest.raises(TransportError) as excinfo:
                await transport.invoke("GET", "/activities")
        assert not isinstance(excinfo.value, RequestTimeoutError)

    async def test_unexpected_failure_is_unknown_error(self, recorder, diagnostics):
        def boom(request):
            raise RuntimeError("boom")

        recorder.queue(boom)
        async with make_transport(recorder, diagnostics) as transport:
            with pytest.raises(UnknownError) as excinfo:
                await transport.invoke("GET", "/activities")
        assert isinstance(excinfo.value.__cause__, RuntimeError)

    async def test_no_internal_retry(self, recorder, diagnostics):
        recorder.queue(httpx.Response(503, text="busy"), httpx.Response(200, json={}))
        async with make_transport(recorder, diagnostics) as transport:
            with pytest.raises(ApiError):
                await transport.invoke("GET", "/grades")
        assert len(recorder.requests) == 1


class TestDiagnostics:
    def test_secure_configuration_emits_nothing(self, recorder, diagnostics):
        make_transport(recorder, diagnostics)
        assert diagnostics.events == []

    def test_http_base_url_warns(self, recorder, diagnostics):
        make_transport(recorder, diagnostics, base_url="http://localhost:8080/v2.0")
        assert diagnostics.names("warning") == ["insecure_base_url"]

    def test_missing_token_warns(self, recorder, diagnostics):
        make_transport(recorder, diagnostics, token=None)
        assert diagnostics.names("warning") == ["missing_auth_token"]

    async def test_failure_is_reported_once_with_method_url_and_body(self, recorder, diagnostics):
        recorder.queue(httpx.Response(400, json={"message": "bad filter"}))
        async with make_transport(recorder, diagnostics) as transport:
            with pytest.raises(ApiError):
                await transport.invoke("GET", "/persons", [("bogus", "1")])

        assert len(diagnostics.events) == 1
        level, event, message, context = diagnostics.events[0]
        assert (level, event) == ("error", "ApiError")
        assert context["method"] == "GET"
        assert context["url"] == f"{BASE_URL}/persons?bogus=1"
        assert "bad filter" in context["body"]
        assert "bad filter" in message

    async def test_broken_sink_does_not_change_outcome(self, recorder):
        class BrokenSink:
            def warning(self, event, message, **context):
                raise RuntimeError("sink down")

            def error(self, event, message, **context):
                raise RuntimeError("sink down")

        recorder.queue(httpx.Response(200, json={"ok": True}), httpx.Response(404, json={}))
        config = ClientConfig.build("http://insecure.example.se", None)
        transport = Transport(config, transport=httpx.MockTransport(recorder.handler), diagnostics=BrokenSink())
        async with transport:
            assert await transport.invoke("GET", "/rooms") == {"ok": True}
            with pytest.raises(ApiError):
                await transport.invoke("GET", "/rooms/x")

    def test_default_sink_logs_warnings(self, recorder, caplog):
        config = ClientConfig.build("http://insecure.example.se", None)
        with caplog.at_level("WARNING", logger="ss12000"):
            Transport(config, transport=httpx.MockTransport(recorder.handler))
        messages = [record.getMessage() for record in caplog.records]
        assert any("HTTPS" in m for m in messages)
        assert any("token is missing" in m for m in messages)


class TestClientOwnership:
    async def test_caller_supplied_client_is_not_closed(self, recorder, diagnostics):
        http_client = httpx.AsyncClient(transport=httpx.MockTransport(recorder.handler))
        config = ClientConfig.build(BASE_URL, TOKEN)
        async with Transport(config, http_client=http_client, diagnostics=diagnostics) as transport:
            await transport.invoke("GET", "/rooms")
        assert not http_client.is_closed
        await http_client.aclose()

    async def test_caller_supplied_client_gets_configured_headers_and_timeout(self, recorder, diagnostics):
        http_client = httpx.AsyncClient(
            transport=httpx.MockTransport(recorder.handler),
            timeout=httpx.Timeout(2.0),
            headers={"Accept": "*/*", "X-Trace": "kept"},
        )
        config = ClientConfig.build(BASE_URL, "secret", timeout_seconds=7.5)
        async with Transport(config, http_client=http_client, diagnostics=diagnostics) as transport:
            await transport.invoke("GET", "/rooms")

        request = recorder.last
        assert request.headers["Authorization"] == "Bearer secret"
        assert request.headers["Accept"] == "application/json"
        assert request.headers["Content-Type"] == "application/json"
        assert request.headers["X-Trace"] == "kept"
        assert request.extensions["timeout"]["read"] == 7.5
        await http_client.aclose()

    async def test_timeout_message_reports_configured_timeout(self, recorder, diagnostics):
        def timeout(request):
            raise httpx.ReadTimeout("timed out", request=request)

        recorder.queue(timeout)
        http_client = httpx.AsyncClient(transport=httpx.MockTransport(recorder.handler), timeout=httpx.Timeout(2.0))
        config = ClientConfig.build(BASE_URL, TOKEN, timeout_seconds=7.5)
        async with Transport(config, http_client=http_client, diagnostics=diagnostics) as transport:
            with pytest.raises(RequestTimeoutError) as excinfo:
                await transport.invoke("GET", "/rooms")
        assert "7.5s" in excinfo.value.message
        await http_client.aclose()
