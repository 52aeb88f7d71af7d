import gzip
import io
import zlib

import pytest

from sieger.httpwire import (
    ContentEncoding,
    HeaderInfo,
    HttpError,
    TransferEncoding,
    chunk_size,
    inflate,
    read_body,
    read_headers,
    tunnel_request,
    tunnel_response,
)


class _BrokenStream:
    def read(self, size=1):
        return b""

    def write(self, data):
        raise OSError("closed")


def test_tunnel_request_wire_bytes():
    stream = io.BytesIO()
    sent = tunnel_request(stream, "www.example.com", 443)
    expected = (b"CONNECT www.example.com:443 HTTP/1.0\r\n"
                b"User-agent: Proxy-User\r\n\r\n")
    assert sent == expected
    assert stream.getvalue() == expected


def test_tunnel_request_write_failure():
    with pytest.raises(HttpError):
        tunnel_request(_BrokenStream(), "www.example.com", 443)


def test_tunnel_response_reads_code():
    stream = io.BytesIO(b"HTTP/1.0 200 Connection established\r\nProxy-agent: x\r\n\r\n")
    assert tunnel_response(stream) == 200


def test_tunnel_response_without_status_keeps_default():
    assert tunnel_response(io.BytesIO(b"\r\n")) == 100


def test_tunnel_response_eof_raises():
    with pytest.raises(HttpError):
        tunnel_response(io.BytesIO(b"HTTP/1.0 200 OK\r\n"))


def test_read_headers_parses_fields_and_stops_at_blank_line():
    raw = (
        b"HTTP/1.1 302 Found\r\n"
        b"Content-Type: text/html\r\n"
        b"Content-Length: 12\r\n"
        b"Set-Cookie: a=b\r\n"
        b"Set-Cookie: c=d\r\n"
        b"Connection: Keep-Alive\r\n"
        b"Keep-Alive: timeout=5, max=100\r\n"
        b"Location: /next\r\n"
        b"ETag: \"abc\"\r\n"
        b"Last-Modified: Mon, 01 Jan 2024 00:00:00 GMT\r\n"
        b"\r\n"
        b"hello world!"
    )
    stream = io.BytesIO(raw)
    headers = read_headers(stream)
    assert headers.code == 302
    assert headers.protocol == "HTTP/1.1"
    assert headers.content_type == "text/html"
    assert headers.content_length == 12
    assert headers.cookies == ["a=b", "c=d"]
    assert headers.keepalive is True
    assert headers.keepalive_timeout == 5
    assert headers.keepalive_max == 100
    assert headers.location == "/next"
    assert headers.etag == '"abc"'
    assert headers.last_modified == "Mon, 01 Jan 2024 00:00:00 GMT"
    assert stream.read() == b"hello world!"


def test_read_headers_encodings():
    raw = (b"HTTP/1.1 200 OK\r\nContent-Encoding: gzip\r\n"
           b"Transfer-Encoding: chunked\r\n\r\n")
    headers = read_headers(io.BytesIO(raw))
    assert headers.content_encoding is ContentEncoding.GZIP
    assert headers.transfer_encoding is TransferEncoding.CHUNKED
    assert headers.content_length is None


def test_read_headers_eof_raises():
    with pytest.raises(HttpError):
        read_headers(io.BytesIO(b"HTTP/1.1 200 OK\r\nContent-Type: text/plain\r\n"))


def test_chunk_size_values():
    assert chunk_size(io.BytesIO(b"%x\r\n" % 300)) == 300
    assert chunk_size(io.BytesIO(b"0\r\n")) == 0
    assert chunk_size(io.BytesIO(b"0x%x\r\n" % 300)) == 300
    assert chunk_size(io.BytesIO(b"%x;ext=1\r\n" % 77)) == 77


def test_chunk_size_without_size():
    assert chunk_size(io.BytesIO(b"\r\n")) is None
    assert chunk_size(io.BytesIO(b"zz\r\n")) is None


def test_chunk_size_too_large_is_zero():
    assert chunk_size(io.BytesIO(b"f" * 40 + b"\r\n")) == 0


def test_chunk_size_eof_raises():
    with pytest.raises(HttpError):
        chunk_size(io.BytesIO(b""))


def test_read_body_content_length():
    stream = io.BytesIO(b"hello world!extra")
    nbytes, page = read_body(stream, HeaderInfo(content_length=12))
    assert (nbytes, page) == (12, b"hello world!")
    assert stream.read() == b"extra"


def test_read_body_zero_length_reads_nothing():
    stream = io.BytesIO(b"data")
    assert read_body(stream, HeaderInfo(content_length=0)) == (0, b"")
    assert stream.read() == b"data"


def test_read_body_chunked():
    raw = b"5\r\nhello\r\n7\r\n, world\r\n0\r\n\r\n"
    headers = HeaderInfo(transfer_encoding=TransferEncoding.CHUNKED)
    nbytes, page = read_body(io.BytesIO(raw), headers, chunked=True)
    assert page == b"hello, world"
    assert nbytes == len(page)


def test_read_body_chunked_disallowed_reads_raw():
    raw = b"5\r\nhello\r\n0\r\n\r\n"
    headers = HeaderInfo(transfer_encoding=TransferEncoding.CHUNKED)
    assert read_body(io.BytesIO(raw), headers, chunked=False) == (len(raw), raw)


def test_read_body_gzip_round_trip():
    text = b"some page content " * 50
    packed = gzip.compress(text)
    headers = HeaderInfo(content_encoding=ContentEncoding.GZIP)
    nbytes, page = read_body(io.BytesIO(packed), headers)
    assert nbytes == len(packed)
    assert page == text


def test_read_body_corrupt_gzip_falls_back_to_raw():
    headers = HeaderInfo(content_encoding=ContentEncoding.GZIP)
    assert read_body(io.BytesIO(b"not gzip"), headers) == (8, b"not gzip")


def test_inflate_deflate_round_trip():
    text = b"deflated body " * 20
    compressor = zlib.compressobj(wbits=-zlib.MAX_WBITS)
    packed = compressor.compress(text) + compressor.flush()
    assert inflate(packed, ContentEncoding.DEFLATE) == text
    assert inflate(packed, "deflate") == text


def test_inflate_invalid_data_raises():
    with pytest.raises(HttpError):
        inflate(b"garbage", ContentEncoding.GZIP)


def test_inflate_unsupported_encoding():
    with pytest.raises(ValueError):
        inflate(b"abc", ContentEncoding.NONE)