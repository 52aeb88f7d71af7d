"""HTTP wire reading: proxy tunnels, response headers and response bodies."""

from __future__ import annotations

import enum
import logging
import re
import zlib
from dataclasses import dataclass, field
from typing import Protocol

logger = logging.getLogger(__name__)

MAXFILE = 0x10000
MAX_INFLATED = MAXFILE * 6
_ULONG_MAX = 2**64 - 1
_TUNNEL_LIMIT = 255

_LEADING_INT = re.compile(r"\s*([+-]?\d+)")
_CHUNK_LINE = re.compile(rb"(?:0[xX](?=[0-9a-fA-F]))?([0-9a-fA-F]+)")
_KEEPALIVE_TIMEOUT = re.compile(r"timeout\s*=\s*(\d+)", re.IGNORECASE)
_KEEPALIVE_MAX = re.compile(r"max\s*=\s*(\d+)", re.IGNORECASE)


class HttpError(OSError):
    """Raised when a connection closes early or data cannot be decoded."""


class Stream(Protocol):
    def read(self, size: int = ...) -> bytes: ...

    def write(self, data: bytes) -> int | None: ...


class ContentEncoding(enum.Enum):
    """Body encodings the reader can undo."""

    NONE = "none"
    GZIP = "gzip"
    DEFLATE = "deflate"


class TransferEncoding(enum.Enum):
    """Transfer encodings the reader distinguishes."""

    NONE = "none"
    CHUNKED = "chunked"


@dataclass
class HeaderInfo:
    """What the response headers said about the response."""

    code: int = 0
    protocol: str = ""
    content_type: str | None = None
    content_encoding: ContentEncoding = ContentEncoding.NONE
    content_length: int | None = None
    transfer_encoding: TransferEncoding = TransferEncoding.NONE
    connection: str | None = None
    keepalive_timeout: int | None = None
    keepalive_max: int | None = None
    location: str | None = None
    last_modified: str | None = None
    etag: str | None = None
    expires: str | None = None
    www_authenticate: str | None = None
    proxy_authenticate: str | None = None
    cookies: list[str] = field(default_factory=list)

    @property
    def keepalive(self) -> bool:
        """True if the server asked to keep the connection open."""
        return self.connection is not None and "keep-alive" in self.connection.lower()


def _atoi(text: str) -> int:
    match = _LEADING_INT.match(text)
    return int(match.group(1)) if match else 0


def _read_line(stream: Stream) -> tuple[bytes, bool]:
    """Read up to and including a newline; report whether EOF ended the line."""
    line = bytearray()
    while True:
        char = stream.read(1)
        if not char:
            return bytes(line), True
        line += char
        if char == b"\n":
            return bytes(line), False


def _write_all(stream: Stream, data: bytes) -> None:
    try:
        written = stream.write(data)
        flush = getattr(stream, "flush", None)
        if flush is not None:
            flush()
    except OSError as exc:
        raise HttpError("HTTP: unable to write to socket.") from exc
    if written is not None and written != len(data):
        raise HttpError("HTTP: unable to write to socket.")


def tunnel_request(stream: Stream, host: str, port: int) -> bytes:
    """Ask a proxy to open a tunnel to ``host:port``; return the bytes sent."""
    request = (
        f"CONNECT {host}:{port} HTTP/1.0\r\n"
        "User-agent: Proxy-User\r\n"
        "\r\n"
    ).encode("latin-1")[:_TUNNEL_LIMIT]
    logger.debug("%s", request.decode("latin-1"))
    _write_all(stream, request)
    return request


def tunnel_response(stream: Stream) -> int:
    """Read the proxy's answer to a tunnel request and return its status code."""
    code = 100
    while True:
        raw, eof = _read_line(stream)
        if raw[:1] == b"\n" or raw[1:2] == b"\n":
            return code
        if eof:
            raise HttpError("proxy closed the connection before the tunnel opened")
        line = raw.decode("latin-1")
        if line[:4].lower() == "http":
            code = _atoi(line[9:])


def _content_encoding(value: str) -> ContentEncoding:
    lowered = value.lower()
    if "gzip" in lowered:
        return ContentEncoding.GZIP
    if "deflate" in lowered:
        return ContentEncoding.DEFLATE
    return ContentEncoding.NONE


def _apply_header(headers: HeaderInfo, line: str) -> None:
    if line[:4].lower() == "http":
        headers.protocol = line.split(" ", 1)[0]
        headers.code = _atoi(line[9:])
        return
    name, sep, value = line.partition(":")
    if not sep:
        return
    name = name.strip().lower()
    value = value.strip()
    if name == "content-type":
        headers.content_type = value
    elif name == "content-encoding":
        headers.content_encoding = _content_encoding(value)
    elif name == "content-length":
        headers.content_length = _atoi(value)
    elif name == "set-cookie":
        headers.cookies.append(value)
    elif name == "connection":
        headers.connection = value
    elif name == "keep-alive":
        timeout = _KEEPALIVE_TIMEOUT.search(value)
        maximum = _KEEPALIVE_MAX.search(value)
        if timeout:
            headers.keepalive_timeout = int(timeout.group(1))
        if maximum:
            headers.keepalive_max = int(maximum.group(1))
    elif name in ("location", "content-location"):
        headers.location = value
    elif name == "last-modified":
        headers.last_modified = value
    elif name == "etag":
        headers.etag = value
    elif name == "www-authenticate":
        headers.www_authenticate = value
    elif name == "proxy-authenticate":
        headers.proxy_authenticate = value
    elif name == "transfer-encoding":
        if "chunked" in value.lower():
            headers.transfer_encoding = TransferEncoding.CHUNKED
    elif name == "expires":
        headers.expires = value


def read_headers(stream: Stream) -> HeaderInfo:
    """Read response headers up to the blank line that ends them.

    Raises HttpError if the connection closes before the headers end.
    """
    headers = HeaderInfo()
    while True:
        raw, eof = _read_line(stream)
        if not eof and len(raw) <= 2:
            return headers
        line = raw.decode("latin-1").rstrip("\n")
        if line.endswith("\r"):
            line = line[:-1]
        logger.debug("%s", line)
        _apply_header(headers, line)
        if eof:
            raise HttpError("read error: connection closed while reading headers")


def chunk_size(stream: Stream) -> int | None:
    """Read a chunk-size line and return the size it gives.

    Returns None for a line that holds no size, such as the blank line
    after a chunk's data, and 0 for a size too large to hold. Raises
    HttpError if the connection has closed.
    """
    raw, _ = _read_line(stream)
    if not raw:
        raise HttpError("HTTP: unable to determine chunk size")
    if raw[:1] in (b"\n", b"\r"):
        return None
    match = _CHUNK_LINE.match(raw)
    if match is None:
        return None
    length = int(match.group(1), 16)
    if length > _ULONG_MAX:
        logger.warning("HTTP: invalid chunk line %s", raw.decode("latin-1").rstrip())
        return 0
    return length


def _read_exact(stream: Stream, length: int) -> bytes:
    body = bytearray()
    while len(body) < length:
        piece = stream.read(length - len(body))
        if not piece:
            break
        body += piece
    return bytes(body)


def _read_chunked(stream: Stream) -> bytes:
    body = bytearray()
    while True:
        try:
            size = chunk_size(stream)
        except HttpError:
            break
        if size == 0:
            _read_line(stream)
            break
        if size is None:
            continue
        remaining = size
        while remaining > 0:
            piece = stream.read(remaining)
            if not piece:
                return bytes(body)
            body += piece
            remaining -= len(piece)
    return bytes(body)


def _read_to_eof(stream: Stream) -> bytes:
    body = bytearray()
    while piece := stream.read(MAXFILE):
        body += piece
    return bytes(body)


def read_body(stream: Stream, headers: HeaderInfo,
              chunked: bool = False) -> tuple[int, bytes]:
    """Read a response body as ``headers`` describe it.

    A known length is read exactly; chunked data is decoded when
    ``chunked`` is allowed; otherwise the body runs to end of stream.
    Returns the number of bytes received and the page, inflated when
    the body is gzip or deflate encoded and inflating yields data.
    """
    length = headers.content_length
    if length == 0:
        return 0, b""
    if length is not None and length > 0:
        raw = _read_exact(stream, length)
    elif chunked and headers.transfer_encoding is TransferEncoding.CHUNKED:
        raw = _read_chunked(stream)
    else:
        raw = _read_to_eof(stream)

    page = raw
    if headers.content_encoding is not ContentEncoding.NONE:
        try:
            inflated = inflate(raw, headers.content_encoding)
        except HttpError as exc:
            logger.error("%s", exc)
            inflated = b""
        if inflated:
            page = inflated
    return len(raw), page


def inflate(data: bytes, encoding: ContentEncoding | str) -> bytes:
    """Undo gzip or deflate encoding, keeping at most MAX_INFLATED bytes.

    Raises ValueError for an encoding it cannot undo and HttpError for
    data that is not validly encoded.
    """
    kind = ContentEncoding(encoding)
    if kind is ContentEncoding.GZIP:
        wbits = zlib.MAX_WBITS + 32
    elif kind is ContentEncoding.DEFLATE:
        wbits = -zlib.MAX_WBITS
    else:
        raise ValueError(f"cannot inflate {kind.value} data")
    try:
        return zlib.decompressobj(wbits).decompress(data, MAX_INFLATED)
    except zlib.error as exc:
        raise HttpError(f"unable to inflate {kind.value} data: {exc}") from exc