"""
Integration tests for the CSB client against a local gateway stub.

The stub recomputes the signature from the received query string, form body
and headers, the way the CSB gateway does, and rejects mismatches.
"""

import json
import threading
from http.server import BaseHTTPRequestHandler, ThreadingHTTPServer
from urllib.parse import parse_qsl, urlsplit

import pytest

from csb_client import (
    CSBClient,
    CSBServiceError,
    ContentKind,
    API_NAME_KEY,
    VERSION_KEY,
    ACCESS_KEY,
    TIMESTAMP_KEY,
    SIGNATURE_KEY,
    canonicalize,
    compute_signature,
)


ACCESS = "integration-ak"
SECRET = "integration-sk"
SIGNED_FIELDS = (API_NAME_KEY, VERSION_KEY, ACCESS_KEY, TIMESTAMP_KEY)


class GatewayHandler(BaseHTTPRequestHandler):
    """Minimal CSB gateway that only checks signatures."""

    def log_message(self, format, *args):
        pass

    def _params(self):
        params = dict(parse_qsl(urlsplit(self.path).query, keep_blank_values=True))
        length = int(self.headers.get('Content-Length') or 0)
        body = self.rfile.read(length) if length else b""
        if self.headers.get('Content-Type', '').startswith('application/x-www-form-urlencoded'):
            params.update(parse_qsl(body.decode('utf-8'), keep_blank_values=True))
        for key in SIGNED_FIELDS:
            params[key] = self.headers.get(key, "")
        return params, body

    def _reply(self, status, content_type, payload):
        self.send_response(status)
        self.send_header('Content-Type', content_type)
        self.send_header('Content-Length', str(len(payload)))
        self.end_headers()
        self.wfile.write(payload)

    def _handle(self):
        params, body = self._params()
        expected = compute_signature(canonicalize(params), SECRET)

        if self.headers.get(ACCESS_KEY) != ACCESS or self.headers.get(SIGNATURE_KEY) != expected:
            self._reply(
                403,
                'text/xml',
                b"<Error><Message>signature mismatch</Message>"
                b"<RequestId>req-403</RequestId></Error>",
            )
            return

        api_name = params[API_NAME_KEY]
        if api_name == "xml":
            self._reply(200, 'text/xml', b"<Result><Api>xml</Api></Result>")
        elif api_name == "plain":
            self._reply(200, 'text/plain', b"pong")
        elif api_name == "greeting":
            self._reply(200, 'text/plain', "你好 café".encode('utf-8'))
        else:
            echo = {k: v for k, v in params.items() if not k.startswith('_api_')}
            payload = json.dumps({
                "method": self.command,
                "params": echo,
                "body": body.decode('utf-8'),
            }).encode('utf-8')
            self._reply(200, 'application/json;charset=UTF-8', payload)

    do_GET = _handle
    do_POST = _handle


class TestIntegration:
    """Integration tests with a local signature-checking gateway."""

    @pytest.fixture(scope="class")
    def gateway_url(self):
        """Start the gateway stub on a free port."""
        server = ThreadingHTTPServer(("127.0.0.1", 0), GatewayHandler)
        thread = threading.Thread(target=server.serve_forever, daemon=True)
        thread.start()

        yield f"http://127.0.0.1:{server.server_address[1]}/CSB"

        server.shutdown()
        server.server_close()

    @pytest.fixture
    def client(self, gateway_url):
        """Create authenticated CSB client."""
        with CSBClient(gateway_url, ACCESS, SECRET, timeout=5) as client:
            yield client

    def test_get_with_query(self, client):
        """Test signed GET with query parameters."""
        response = client.get("echo", "1.0", query_params={"foo": "bar", "B": "2"})

        assert response.status_code == 200
        assert response.kind is ContentKind.JSON
        assert response.data["method"] == "GET"
        assert response.data["params"] == {"foo": "bar", "B": "2"}

    def test_post_with_form(self, client):
        """Test signed POST with query and form parameters."""
        response = client.post(
            "echo", "1.0",
            query_params={"q": "1"},
            form_params={"name": "csb client", "q": "form"},
        )

        assert response.data["method"] == "POST"
        assert response.data["params"] == {"q": "form", "name": "csb client"}

    def test_post_with_json_body(self, client):
        """Test signed POST with an explicit body."""
        response = client.post(
            "echo", "1.0",
            content_type="application/json",
            query_params={"id": "7"},
            body=json.dumps({"hello": "world"}),
        )

        assert response.data["params"] == {"id": "7"}
        assert json.loads(response.data["body"]) == {"hello": "world"}

    def test_xml_response(self, client):
        """Test XML responses are decoded."""
        response = client.get("xml", "1.0")

        assert response.kind is ContentKind.XML
        assert response.data.findtext("Api") == "xml"

    def test_plain_response(self, client):
        """Test plain text responses."""
        response = client.get("plain", "1.0")

        assert response.data == "pong"

    def test_plain_utf8_response_without_charset(self, client):
        """Test non-ASCII text with no declared charset decodes as UTF-8."""
        response = client.get("greeting", "1.0")

        assert response.kind is ContentKind.PLAIN
        assert response.data == "你好 café"

    def test_wrong_secret_rejected(self, gateway_url):
        """Test the gateway rejects a signature made with the wrong key."""
        with CSBClient(gateway_url, ACCESS, "wrong-secret") as client:
            with pytest.raises(CSBServiceError) as exc_info:
                client.get("echo", "1.0")

        assert exc_info.value.status_code == 403
        assert exc_info.value.message == "signature mismatch"
        assert exc_info.value.request_id == "req-403"
