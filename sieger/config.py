"""Run-time settings shared by the command line, the resource file and the workers."""

from __future__ import annotations

import enum
from dataclasses import dataclass, field

MAXREPS = 10301062
HEADER_LIMIT = 2048


class ConfigError(ValueError):
    """Raised when a setting is malformed or out of bounds."""


class Method(enum.Enum):
    """HTTP request methods the tool knows how to send."""

    GET = "GET"
    HEAD = "HEAD"
    POST = "POST"
    PUT = "PUT"


@dataclass
class Config:
    """Every setting that governs a run.

    The values start out empty; the resource file and the command line
    fill them in before any worker starts.
    """

    logging: bool = False
    shlog: bool = False
    limit: int = 0
    url: str | None = None
    logfile: str = ""
    verbose: bool = False
    quiet: bool = False
    parser: bool = False
    csv: bool = False
    fullurl: bool = False
    display: bool = False
    show_config: bool = False
    color: bool = False
    cusers: int = 0
    delay: float = 0.0
    timeout: int = 0
    bench: bool = False
    internet: bool = False
    timestamp: bool = False
    time: int = 0
    secs: int = 0
    reps: int = 0
    file: str = ""
    length: int = 0
    nomap: list[str] = field(default_factory=list)
    debug: bool = False
    chunked: bool = False
    unique: bool = False
    get: bool = False
    print_page: bool = False
    mark: bool = False
    markstr: str | None = None
    protocol: bool = False
    uagent: str = ""
    encoding: str = ""
    conttype: str = ""
    bids: int = 0
    proxy_required: bool = False
    proxy_host: str | None = None
    proxy_port: int = 0
    credentials: list[tuple[str, str]] = field(default_factory=list)
    keepalive: bool = False
    signaled: int = 0
    extra: str = ""
    login: bool = False
    login_urls: list[str] = field(default_factory=list)
    failures: int = 0
    failed: int = 0
    escape: bool = False
    expire: bool = False
    follow: bool = False
    zero_ok: bool = False
    spinner: bool = False
    cache: bool = False
    rc: str = ""
    ssl_timeout: int = 0
    ssl_cert: str | None = None
    ssl_key: str | None = None
    ssl_ciphers: str | None = None
    method: Method = Method.GET
    json_output: bool = False

    def add_header(self, header: str, limit: int = HEADER_LIMIT) -> None:
        """Append an extra request header, terminated by CRLF.

        Raises ConfigError if the header has no colon or if the headers
        collected so far would grow past ``limit``.
        """
        if ":" not in header:
            raise ConfigError("no ':' in http-header")
        if len(header) + len(self.extra) + 3 > limit:
            raise ConfigError("header is too large")
        self.extra += header + "\r\n"