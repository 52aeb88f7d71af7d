# sieger

`sieger` is a library of building blocks for putting web and FTP servers
under load: reading HTTP responses off a socket, driving an FTP control
connection, loading request bodies from files, holding run settings, and
appending run statistics to a comma-separated transaction log.

## Installation

```
pip install .
```

To run the test suite:

```
pip install ".[test]"
pytest
```

## Modules

- `sieger.hashtable` – `HashTable`, a string-keyed chained table bucketed
  with the 32-bit FNV-1a hash (`fnv_32a`). The first value stored under a
  key is kept; later `add` calls for the same key are ignored. The table
  doubles once a quarter full. An optional destroyer set with
  `set_destroyer` is called on values as `remove` or `destroy` drops them.
- `sieger.translog` – the transaction log. `create_logfile` writes the
  header row, `format_log_entry` builds one row of statistics,
  `write_to_log` appends a row (creating the file first if needed) and
  `mark_log_file` appends a `**** message ****` marker line. Failures to
  create or write the log raise `LogError`.
- `sieger.config` – `Config`, a dataclass of every run setting, and
  `Method` (`GET`, `HEAD`, `POST`, `PUT`). `Config.add_header` appends an
  extra request header terminated by CRLF and raises `ConfigError` if the
  header has no colon or the collected headers would exceed the limit
  (2048 characters by default).
- `sieger.ftp` – `FtpSession`, a client for an FTP control connection over
  any object with `read` and `write`: `login` (anonymous when no user is
  given), `pasv` (records the data `host` and `port`), `cwd`, `ascii`,
  `binary`, `size`, `stor` (optionally under a per-thread name made by
  `unique_name`), `retr`, `list` and `quit`. Each command returns whether
  the reply code was 1xx or 2xx and leaves the code in `code`. The module
  functions `put` and `get` send and receive data-connection payloads.
- `sieger.load` – `get_content_type` and `is_ascii` map a file extension to
  a MIME type and to whether the file is sent as trimmed text;
  `load_file` reads a request body into a `PostData`, and `write_file`
  saves downloaded data.
- `sieger.httpwire` – `tunnel_request` and `tunnel_response` for a proxy
  `CONNECT` tunnel, `read_headers` which parses response headers into a
  `HeaderInfo`, `chunk_size` and `read_body` for fixed-length, chunked or
  read-to-close bodies, and `inflate` for gzip and deflate content.
  A connection closing early raises `HttpError`.

## Examples

```python
import io

from sieger.config import Config
from sieger.hashtable import HashTable
from sieger.httpwire import read_body, read_headers
from sieger.load import get_content_type, is_ascii
from sieger.translog import mark_log_file

table = HashTable(16)
table.add("Homer", "D'oh!")
assert "Homer" in table
assert table.get("Homer") == "D'oh!"

assert get_content_type("report.json") == "application/json"
assert is_ascii("notes.txt")

config = Config()
config.add_header("X-Run: baseline")
assert config.extra == "X-Run: baseline\r\n"

stream = io.BytesIO(b"HTTP/1.1 200 OK\r\nContent-Length: 5\r\n\r\nhello")
headers = read_headers(stream)
assert headers.code == 200
assert read_body(stream, headers) == (5, b"hello")

mark_log_file("transactions.log", "baseline run")
```

## What it does not do

There is no command to run. The package does not spawn simulated users,
time a run, read a resource file of settings, or parse command-line
options; `Config` only holds settings that the caller fills in. It also
does not build or send HTTP requests, manage cookies, authentication or
caching, or open sockets itself: the FTP and HTTP readers work on streams
the caller supplies.