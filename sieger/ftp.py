"""FTP control-connection client used to time transfers."""

from __future__ import annotations

import logging
import os
import re
import threading
from typing import BinaryIO, Protocol, TextIO

logger = logging.getLogger(__name__)

ANONYMOUS_USER = "anonymous"
ANONYMOUS_ADDRESS = "anonymous@example.com"

_SIZE_REPLY = re.compile(rb"\s*([+-]?\d+)\s+([+-]?\d+)")
_LEADING_INT = re.compile(rb"\s*([+-]?\d+)")


class FtpError(OSError):
    """Raised when the server or a connection fails outright."""


class Stream(Protocol):
    def read(self, size: int = ...) -> bytes: ...

    def write(self, data: bytes) -> int | None: ...


def _okay(code: int) -> bool:
    return 100 <= code <= 299


def _atoi(raw: bytes) -> int:
    match = _LEADING_INT.match(raw)
    return int(match.group(1)) if match else 0


def _chomp(raw: bytes) -> str:
    return raw.decode("latin-1").rstrip("\r\n")


def _write_all(stream: Stream, data: bytes) -> bool:
    try:
        written = stream.write(data)
        flush = getattr(stream, "flush", None)
        if flush is not None:
            flush()
    except OSError:
        return False
    return written is None or written == len(data)


def unique_name(filename: str, ident: int) -> str:
    """Return ``filename`` with ``-ident`` inserted before its extension."""
    stem, _, extension = filename.partition(".")
    name = f"{stem}-{abs(ident)}.{extension}"
    return name[: len(filename) + 16]


class FtpSession:
    """One FTP control connection and the state of its last reply."""

    def __init__(self, stream: Stream, quiet: bool = False) -> None:
        self.stream = stream
        self.quiet = quiet
        self.code = 0
        self.last_line = b""
        self.host = ""
        self.port = 0
        self.size_reply: int | None = None

    def _read_line(self) -> tuple[bytes, bool]:
        """Read up to a newline; return the line and whether EOF ended it."""
        line = bytearray()
        while True:
            char = self.stream.read(1)
            if not char:
                return bytes(line), True
            line += char
            if char == b"\n":
                return bytes(line), False

    def response(self) -> int:
        """Read a complete, possibly multi-line, reply and return its code."""
        code = 120
        while True:
            while True:
                line, eof = self._read_line()
                count = len(line) - (0 if eof else 1)
                fourth = line[3:4]
                if line[:1].isdigit() and fourth != b"-":
                    break
                if count == 0 and eof:
                    break
            self.last_line = line
            code = _atoi(line[:3])
            done = line[3:4] == b" "
            if not line and eof:
                code = 421
                done = True
            if done:
                break
        if code > 499 and not self.quiet:
            print(_chomp(self.last_line))
        return code

    def request(self, command: str) -> int:
        """Send ``command`` and return the reply code (500 if it cannot be sent)."""
        wire = f"{command}\r\n".encode("latin-1")
        logger.debug("%s", command)
        if not _write_all(self.stream, wire):
            logger.error("FTP: unable to write to socket.")
            self.code = 500
            return self.code
        self.code = self.response()
        return self.code

    def login(self, username: str | None = None, password: str | None = None) -> bool:
        """Read the greeting and log in, anonymously if no user is given."""
        code = self.response()
        if not _okay(code):
            self.code = code
            if code == 421:
                raise FtpError("FTP: Server responded: 421 - Service unavailable")
            raise FtpError(f"FTP: Server responded: {code}")
        user = username if username is not None else ANONYMOUS_USER
        code = self.request(f"USER {user}"[:127])
        if code != 331 and _okay(code):
            return True
        secret = password if password is not None else ANONYMOUS_ADDRESS
        code = self.request(f"PASS {secret}"[:127 + 5])
        return 200 <= code <= 299

    def pasv(self) -> bool:
        """Enter passive mode and record the data host and port."""
        if not _okay(self.request("PASV")):
            return False
        text = self.last_line
        pos = 4
        while pos < len(text) and not text[pos:pos + 1].isdigit():
            pos += 1
        if pos >= len(text):
            return False
        addr = [0] * 6
        for index in range(6):
            while pos < len(text) and text[pos:pos + 1].isdigit():
                addr[index] = (text[pos] - 0x30 + 10 * addr[index]) & 0xFF
                pos += 1
            if text[pos:pos + 1] == b",":
                pos += 1
            elif index < 5:
                return False
        self.host = ".".join(str(octet) for octet in addr[:4])
        self.port = (addr[4] << 8) + addr[5]
        return True

    def cwd(self, path: str) -> bool:
        """Change the working directory."""
        return _okay(self.request(f"CWD {path}"))

    def ascii(self) -> bool:
        """Switch to ASCII transfer type."""
        return _okay(self.request("TYPE A"))

    def binary(self) -> bool:
        """Switch to binary transfer type."""
        return _okay(self.request("TYPE I"))

    def quit(self) -> bool:
        """End the session."""
        return _okay(self.request("QUIT"))

    def size(self, path: str) -> int | None:
        """Return the size the server reports for ``path``, or None."""
        if not self.binary():
            return None
        if not _okay(self.request(f"SIZE {path}")):
            return None
        match = _SIZE_REPLY.match(self.last_line)
        if match is None:
            return None
        self.size_reply = int(match.group(2))
        return self.size_reply

    def stor(self, filename: str, unique: bool = True, ident: int | None = None) -> bool:
        """Announce an upload, optionally under a per-thread unique name."""
        if unique:
            target = unique_name(filename, threading.get_ident() if ident is None else ident)
        else:
            target = filename
        return _okay(self.request(f"STOR {target}"))

    def retr(self, path: str) -> bool:
        """Announce a download of ``path``."""
        return _okay(self.request(f"RETR {path}"))

    def list(self, target: str, data: Stream | None = None,
             out: TextIO | None = None) -> bytes:
        """Request a listing and drain it from the data connection."""
        self.code = self.request(f"LIST {target}")
        listing = bytearray()
        if self.code == 150:
            if data is None:
                raise FtpError(f"unable to read from socket: {self.host}:{self.port}")
            while chunk := data.read(1):
                listing += chunk
                if out is not None:
                    out.write(chunk.decode("latin-1"))
        return bytes(listing)


def put(data: Stream, payload: bytes) -> int:
    """Send ``payload`` over the data connection and return its length."""
    if not _write_all(data, payload):
        raise FtpError("unable to write to socket.")
    return len(payload)


def get(data: Stream, size: int, dest: str | os.PathLike[str] | BinaryIO | None = None) -> bytes:
    """Read up to ``size`` bytes; optionally save them, zero-padded to ``size``."""
    received = bytearray()
    while len(received) < size:
        chunk = data.read(size - len(received))
        if not chunk:
            break
        received += chunk
    if dest is not None:
        padded = bytes(received).ljust(size, b"\0")
        if hasattr(dest, "write"):
            dest.write(padded)
        else:
            with open(dest, "wb") as handle:
                handle.write(padded)
    return bytes(received)