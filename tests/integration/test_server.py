"""
Integration tests: a real server on a real socket.
"""

import logging
import socket
import threading
import time

import pytest

from minihttp import HTTPServer
from minihttp.core import SocketServer
from minihttp.http import HTTPResponse, HeaderMap


def split_response(raw: bytes):
    """Split raw response bytes into (status line, header lines, body)."""
    head, _, body = raw.partition(b"\r\n\r\n")
    status_line, *header_lines = head.decode("utf-8").split("\r\n")
    return status_line, header_lines, body


class TestStaticServer:

    def test_get(self, test_server):
        raw = test_server.send(b"GET / HTTP/1.1\r\nHost: localhost\r\n\r\n")
        status_line, headers, body = split_response(raw)

        assert status_line == "HTTP/1.1 200 OK"
        assert headers == [
            "content-type: text/html; charset=utf-8",
            "server: minihttp/0.1",
            "content-length: 12",
        ]
        assert body == b"<p>hello</p>"

    def test_post_with_body(self, test_server):
        raw = test_server.send(
            b"POST /submit HTTP/1.1\r\nContent-Length: 5\r\n\r\nhello"
        )

        assert raw.startswith(b"HTTP/1.1 200 OK\r\n")
        assert raw.endswith(b"<p>hello</p>")

    def test_unknown_method(self, test_server):
        raw = test_server.send(b"DELETE /x HTTP/1.1\r\n\r\n")
        assert raw.startswith(b"HTTP/1.1 200 OK\r\n")

    def test_bare_lf_request(self, test_server):
        raw = test_server.send(b"GET / HTTP/1.1\nHost: x\n\n")
        assert raw.startswith(b"HTTP/1.1 200 OK\r\n")

    def test_request_without_blank_line(self, test_server):
        raw = test_server.send(b"GET / HTTP/1.1\r\nHost: x")
        assert raw.startswith(b"HTTP/1.1 200 OK\r\n")

    def test_invalid_start_line(self, test_server):
        raw = test_server.send(b"GET HTTP/1.1\r\nHost: x\r\n\r\n")
        status_line, headers, body = split_response(raw)

        assert status_line == "HTTP/1.1 400 Bad Request"
        assert f"content-length: {len(body)}" in headers
        assert b"start line" in body

    def test_malformed_header(self, test_server):
        raw = test_server.send(b"GET / HTTP/1.1\r\nno-colon-here\r\n\r\n")
        status_line, _, body = split_response(raw)

        assert status_line == "HTTP/1.1 400 Bad Request"
        assert b"no-colon-here" in body

    def test_empty_request_gets_no_response(self, test_server):
        assert test_server.send(b"") == b""

    def test_uri_too_long(self, test_server):
        raw = test_server.send(b"GET /" + b"a" * 3000 + b" HTTP/1.1\r\n\r\n")
        assert raw.startswith(b"HTTP/1.1 414 URI Too Long\r\n")

    def test_head_too_large_closes_connection(self, test_server):
        raw = test_server.send(b"GET / HTTP/1.1\r\nX-Big: " + b"a" * 70000 + b"\r\n\r\n")
        assert raw == b""

    def test_keeps_serving_after_errors(self, test_server):
        test_server.send(b"garbage\r\n\r\n")
        test_server.send(b"")
        test_server.send(b"GET / HTTP/1.1\r\nbad\r\n\r\n")

        raw = test_server.send(b"GET / HTTP/1.1\r\n\r\n")
        assert raw.startswith(b"HTTP/1.1 200 OK\r\n")

    def test_one_response_per_connection(self, test_server):
        raw = test_server.send(b"GET /a HTTP/1.1\r\n\r\nGET /b HTTP/1.1\r\n\r\n")
        assert raw.count(b"HTTP/1.1 200 OK") == 1

    def test_slow_client_does_not_block_others(self, test_server):
        stop = threading.Event()

        with socket.create_connection(("127.0.0.1", test_server.port), timeout=5.0) as slow:
            slow.sendall(b"GET / HTTP/1.1\r\n\r\n")

            def drip():
                while not stop.is_set():
                    try:
                        slow.send(b"x")
                    except OSError:
                        return
                    time.sleep(0.1)

            dripper = threading.Thread(target=drip, daemon=True)
            dripper.start()
            try:
                started = time.monotonic()
                raw = test_server.send(b"GET / HTTP/1.1\r\n\r\n")
                elapsed = time.monotonic() - started
            finally:
                stop.set()
                dripper.join(timeout=2.0)

        assert raw.startswith(b"HTTP/1.1 200 OK\r\n")
        assert elapsed < 3.0

    def test_missing_body_file(self, make_server, tmp_path):
        srv = make_server(body_file=str(tmp_path / "missing.html"))
        raw = srv.send(b"GET / HTTP/1.1\r\n\r\n")

        assert raw.startswith(b"HTTP/1.1 200 OK\r\n")
        assert raw.endswith(b"<p>Error while reading the file!</p>")


class TestCustomHandler:

    def test_echo(self, echo_server):
        raw = echo_server.send(
            b"GET /page?x=1 HTTP/1.1\r\nReferer: /home\r\n\r\n"
        )
        status_line, headers, body = split_response(raw)

        assert status_line == "HTTP/1.1 200 OK"
        assert "X-Method: GET" in headers
        assert body == b"/page?x=1 /home"

    def test_echo_without_referer(self, echo_server):
        raw = echo_server.send(b"PUT /x HTTP/1.1\r\n\r\n")
        _, headers, body = split_response(raw)

        assert "X-Method: UNKNOWN" in headers
        assert body == b"/x -"

    def test_utf8_body(self, make_server):
        body = "grüße ✓"
        srv = make_server(handler=lambda request: HTTPResponse(body=body))

        _, headers, received = split_response(srv.send(b"GET / HTTP/1.1\r\n\r\n"))

        assert headers == [f"content-length: {len(body.encode('utf-8'))}"]
        assert received.decode("utf-8") == body

    def test_handler_error_closes_connection(self, make_server, caplog):
        def broken(request):
            raise RuntimeError("boom")

        srv = make_server(handler=broken)
        with caplog.at_level(logging.ERROR, logger="minihttp.server"):
            raw = srv.send(b"GET / HTTP/1.1\r\n\r\n")
        after = srv.send(b"GET / HTTP/1.1\r\n\r\n")

        assert raw == b""
        assert after == b""
        assert "Handler error" in caplog.text

    def test_unencodable_body_does_not_stop_server(self, make_server, caplog):
        def handler(request):
            if request.uri == "/boom":
                return HTTPResponse(body="\ud800")
            return HTTPResponse(body="fine")

        srv = make_server(handler=handler)
        with caplog.at_level(logging.ERROR, logger="minihttp.server"):
            broken = srv.send(b"GET /boom HTTP/1.1\r\n\r\n")
        after = srv.send(b"GET / HTTP/1.1\r\n\r\n")

        assert broken == b""
        assert srv.server.is_running
        assert after.endswith(b"\r\n\r\nfine")
        assert "Could not serialize response" in caplog.text

    def test_non_response_result_does_not_stop_server(self, make_server, caplog):
        def handler(request):
            if request.uri == "/none":
                return None
            return HTTPResponse(body="fine")

        srv = make_server(handler=handler)
        with caplog.at_level(logging.ERROR, logger="minihttp.server"):
            broken = srv.send(b"GET /none HTTP/1.1\r\n\r\n")
        after = srv.send(b"GET / HTTP/1.1\r\n\r\n")

        assert broken == b""
        assert after.endswith(b"\r\n\r\nfine")
        assert "NoneType" in caplog.text

    def test_duplicate_content_length_is_logged(self, make_server, caplog):
        def handler(request):
            return HTTPResponse(headers=HeaderMap.from_entries({"Content-Length": "99"}), body="hi")

        srv = make_server(handler=handler)
        with caplog.at_level(logging.WARNING, logger="minihttp.server"):
            raw = srv.send(b"GET / HTTP/1.1\r\n\r\n")

        assert raw == b"HTTP/1.1 200 OK\r\ncontent-length: 99\r\ncontent-length: 2\r\n\r\nhi"
        assert "Content-Length" in caplog.text


class TestLifecycle:

    def test_shutdown(self, make_server):
        srv = make_server()
        server = srv.server
        port = srv.port

        assert server.is_running
        srv.stop()

        assert server.wait_for_shutdown(timeout=5.0)
        assert not server.is_running
        with pytest.raises(OSError):
            socket.create_connection(("127.0.0.1", port), timeout=1.0)

    def test_address_in_use(self, test_server, config):
        config.port = test_server.port

        with pytest.raises(OSError):
            HTTPServer(config).run()

    def test_accept_loop_survives_connection_handler_error(self, config):
        calls = []

        def handle(conn):
            calls.append(conn.id)
            if len(calls) == 1:
                raise RuntimeError("boom")
            with conn:
                conn.read_head()
                conn.send_response(b"ok")

        def request() -> bytes:
            with socket.create_connection(("127.0.0.1", server.address[1]), timeout=5.0) as sock:
                sock.sendall(b"GET / HTTP/1.1\r\n\r\n")
                sock.shutdown(socket.SHUT_WR)
                chunks = []
                while True:
                    chunk = sock.recv(4096)
                    if not chunk:
                        break
                    chunks.append(chunk)
            return b"".join(chunks)

        server = SocketServer(config)
        thread = threading.Thread(target=server.start, args=(handle,), daemon=True)
        thread.start()
        assert server.wait_until_ready(timeout=5.0)
        try:
            first = request()
            second = request()
        finally:
            server.shutdown()
            thread.join(timeout=5.0)

        assert first == b""
        assert second == b"ok"
        assert len(calls) == 2
