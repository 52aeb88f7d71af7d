"""Loading request bodies from files and saving downloaded data."""

from __future__ import annotations

import os
from dataclasses import dataclass
from typing import NamedTuple

DEFAULT_CONTENT_TYPE = "application/x-www-form-urlencoded"


class _ContentType(NamedTuple):
    ascii: bool
    mime: str


_TYPES: dict[str, _ContentType] = {
    "ai": _ContentType(False, "application/postscript"),
    "aif": _ContentType(False, "audio/x-aiff"),
    "aifc": _ContentType(False, "audio/x-aiff"),
    "aiff": _ContentType(False, "audio/x-aiff"),
    "asc": _ContentType(True, "text/plain"),
    "au": _ContentType(False, "audio/basic"),
    "avi": _ContentType(False, "video/x-msvideo"),
    "bcpio": _ContentType(False, "application/x-bcpio"),
    "bin": _ContentType(False, "application/octet-stream"),
    "c": _ContentType(True, "text/plain"),
    "cc": _ContentType(True, "text/plain"),
    "ccad": _ContentType(False, "application/clariscad"),
    "cdf": _ContentType(False, "application/x-netcdf"),
    "class": _ContentType(False, "application/octet-stream"),
    "cpio": _ContentType(False, "application/x-cpio"),
    "cpt": _ContentType(False, "application/mac-compactpro"),
    "csh": _ContentType(False, "application/x-csh"),
    "css": _ContentType(True, "text/css"),
    "csv": _ContentType(True, "text/csv"),
    "dcr": _ContentType(False, "application/x-director"),
    "dir": _ContentType(False, "application/x-director"),
    "dms": _ContentType(False, "application/octet-stream"),
    "doc": _ContentType(False, "application/msword"),
    "drw": _ContentType(False, "application/drafting"),
    "dvi": _ContentType(False, "application/x-dvi"),
    "dwg": _ContentType(False, "application/acad"),
    "dxf": _ContentType(False, "application/dxf"),
    "dxr": _ContentType(False, "application/x-director"),
    "eps": _ContentType(False, "application/postscript"),
    "etx": _ContentType(True, "text/x-setext"),
    "exe": _ContentType(False, "application/octet-stream"),
    "ez": _ContentType(False, "application/andrew-inset"),
    "f": _ContentType(True, "text/plain"),
    "f90": _ContentType(True, "text/plain"),
    "fli": _ContentType(False, "video/x-fli"),
    "gif": _ContentType(False, "image/gif"),
    "gtar": _ContentType(False, "application/x-gtar"),
    "gz": _ContentType(False, "application/x-gzip"),
    "h": _ContentType(True, "text/plain"),
    "hdf": _ContentType(False, "application/x-hdf"),
    "hh": _ContentType(True, "text/plain"),
    "hqx": _ContentType(False, "application/mac-binhex40"),
    "htm": _ContentType(True, "text/html"),
    "html": _ContentType(True, "text/html"),
    "ice": _ContentType(False, "x-conference/x-cooltalk"),
    "ico": _ContentType(False, "image/x-icon"),
    "ief": _ContentType(False, "image/ief"),
    "iges": _ContentType(False, "model/iges"),
    "igs": _ContentType(False, "model/iges"),
    "ips": _ContentType(False, "application/x-ipscript"),
    "ipx": _ContentType(False, "application/x-ipix"),
    "jpe": _ContentType(False, "image/jpeg"),
    "jpeg": _ContentType(False, "image/jpeg"),
    "jpg": _ContentType(False, "image/jpeg"),
    "js": _ContentType(False, "application/x-javascript"),
    "json": _ContentType(False, "application/json"),
    "kar": _ContentType(False, "audio/midi"),
    "latex": _ContentType(False, "application/x-latex"),
    "lha": _ContentType(False, "application/octet-stream"),
    "lsp": _ContentType(False, "application/x-lisp"),
    "lzh": _ContentType(False, "application/octet-stream"),
    "m": _ContentType(True, "text/plain"),
    "man": _ContentType(False, "application/x-troff-man"),
    "md": _ContentType(True, "text/x-markdown"),
    "me": _ContentType(False, "application/x-troff-me"),
    "mesh": _ContentType(False, "model/mesh"),
    "mid": _ContentType(False, "audio/midi"),
    "midi": _ContentType(False, "audio/midi"),
    "mif": _ContentType(False, "application/vnd.mif"),
    "mime": _ContentType(False, "www/mime"),
    "mov": _ContentType(False, "video/quicktime"),
    "movie": _ContentType(False, "video/x-sgi-movie"),
    "mp2": _ContentType(False, "audio/mpeg"),
    "mp3": _ContentType(False, "audio/mpeg"),
    "mpe": _ContentType(False, "video/mpeg"),
    "mpeg": _ContentType(False, "video/mpeg"),
    "mpg": _ContentType(False, "video/mpeg"),
    "mpga": _ContentType(False, "audio/mpeg"),
    "ms": _ContentType(False, "application/x-troff-ms"),
    "msh": _ContentType(False, "model/mesh"),
    "nc": _ContentType(False, "application/x-netcdf"),
    "oda": _ContentType(False, "application/oda"),
    "pbm": _ContentType(False, "image/x-portable-bitmap"),
    "pdb": _ContentType(False, "chemical/x-pdb"),
    "pdf": _ContentType(False, "application/pdf"),
    "pgm": _ContentType(False, "image/x-portable-graymap"),
    "pgn": _ContentType(False, "application/x-chess-pgn"),
    "png": _ContentType(False, "image/png"),
    "pnm": _ContentType(False, "image/x-portable-anymap"),
    "pot": _ContentType(False, "application/mspowerpoint"),
    "ppm": _ContentType(False, "image/x-portable-pixmap"),
    "pps": _ContentType(False, "application/mspowerpoint"),
    "ppt": _ContentType(False, "application/mspowerpoint"),
    "ppz": _ContentType(False, "application/mspowerpoint"),
    "pre": _ContentType(False, "application/x-freelance"),
    "proto": _ContentType(False, "application/x-protobuf"),
    "prt": _ContentType(False, "application/pro_eng"),
    "ps": _ContentType(False, "application/postscript"),
    "qt": _ContentType(False, "video/quicktime"),
    "ra": _ContentType(False, "audio/x-realaudio"),
    "ram": _ContentType(False, "audio/x-pn-realaudio"),
    "ras": _ContentType(False, "image/cmu-raster"),
    "rgb": _ContentType(False, "image/x-rgb"),
    "rm": _ContentType(False, "audio/x-pn-realaudio"),
    "roff": _ContentType(False, "application/x-troff"),
    "rpm": _ContentType(False, "audio/x-pn-realaudio-plugin"),
    "rtf": _ContentType(False, "text/rtf"),
    "rtx": _ContentType(False, "text/richtext"),
    "scm": _ContentType(False, "application/x-lotusscreencam"),
    "set": _ContentType(False, "application/set"),
    "sgm": _ContentType(True, "text/sgml"),
    "sgml": _ContentType(True, "text/sgml"),
    "sh": _ContentType(False, "application/x-sh"),
    "shar": _ContentType(False, "application/x-shar"),
    "silo": _ContentType(False, "model/mesh"),
    "sit": _ContentType(False, "application/x-stuffit"),
    "skd": _ContentType(False, "application/x-koan"),
    "skm": _ContentType(False, "application/x-koan"),
    "skp": _ContentType(False, "application/x-koan"),
    "skt": _ContentType(False, "application/x-koan"),
    "smi": _ContentType(False, "application/smil"),
    "smil": _ContentType(False, "application/smil"),
    "snd": _ContentType(False, "audio/basic"),
    "sol": _ContentType(False, "application/solids"),
    "spl": _ContentType(False, "application/x-futuresplash"),
    "src": _ContentType(False, "application/x-wais-source"),
    "step": _ContentType(False, "application/STEP"),
    "stl": _ContentType(False, "application/SLA"),
    "stp": _ContentType(False, "application/STEP"),
    "sv4cpio": _ContentType(False, "application/x-sv4cpio"),
    "sv4crc": _ContentType(False, "application/x-sv4crc"),
    "svg": _ContentType(True, "image/svg+xml"),
    "swf": _ContentType(False, "application/x-shockwave-flash"),
    "t": _ContentType(False, "application/x-troff"),
    "tar": _ContentType(False, "application/x-tar"),
    "tcl": _ContentType(False, "application/x-tcl"),
    "tex": _ContentType(False, "application/x-tex"),
    "texi": _ContentType(False, "application/x-texinfo"),
    "texinfo": _ContentType(False, "application/x-texinfo"),
    "tif": _ContentType(False, "image/tiff"),
    "tiff": _ContentType(False, "image/tiff"),
    "tr": _ContentType(False, "application/x-troff"),
    "tsi": _ContentType(False, "audio/TSP-audio"),
    "tsp": _ContentType(False, "application/dsptype"),
    "tsv": _ContentType(True, "text/tab-separated-values"),
    "txt": _ContentType(True, "text/plain"),
    "unv": _ContentType(False, "application/i-deas"),
    "ustar": _ContentType(False, "application/x-ustar"),
    "vcd": _ContentType(False, "application/x-cdlink"),
    "vda": _ContentType(False, "application/vda"),
    "viv": _ContentType(False, "video/vnd.vivo"),
    "vivo": _ContentType(False, "video/vnd.vivo"),
    "vrml": _ContentType(False, "model/vrml"),
    "wav": _ContentType(False, "audio/x-wav"),
    "wrl": _ContentType(False, "model/vrml"),
    "xbm": _ContentType(False, "image/x-xbitmap"),
    "xlc": _ContentType(False, "application/vnd.ms-excel"),
    "xll": _ContentType(False, "application/vnd.ms-excel"),
    "xlm": _ContentType(False, "application/vnd.ms-excel"),
    "xls": _ContentType(False, "application/vnd.ms-excel"),
    "xlw": _ContentType(False, "application/vnd.ms-excel"),
    "xml": _ContentType(True, "text/xml"),
    "xpm": _ContentType(False, "image/x-xpixmap"),
    "xwd": _ContentType(False, "image/x-xwindowdump"),
    "xyz": _ContentType(False, "chemical/x-pdb"),
    "yml": _ContentType(True, "application/x-yaml"),
    "zip": _ContentType(False, "application/zip"),
}

_DEFAULT = _ContentType(True, DEFAULT_CONTENT_TYPE)


@dataclass(frozen=True)
class PostData:
    """A request body together with the content type it is sent as."""

    content_type: str
    data: bytes

    def __len__(self) -> int:
        return len(self.data)


def get_file_extension(filename: str) -> str:
    """Return the text after the last dot, or "" if there is none or it leads."""
    dot = filename.rfind(".")
    if dot <= 0:
        return ""
    return filename[dot + 1:]


def _lookup(filename: str) -> _ContentType:
    return _TYPES.get(get_file_extension(filename).lower(), _DEFAULT)


def get_content_type(filename: str) -> str:
    """Return the MIME type for ``filename``'s extension, form-encoded if unknown."""
    return _lookup(filename).mime


def is_ascii(filename: str) -> bool:
    """Return True if files with this extension are sent as trimmed text."""
    return _lookup(filename).ascii


def load_file(filename: str, conttype: str | None = None) -> PostData | None:
    """Read a request body from ``filename``.

    Text files are cut at the first NUL and stripped of surrounding
    whitespace. ``conttype``, when not empty, overrides the type the
    extension implies. Returns None if nothing is left to send; raises
    OSError if the file cannot be read.
    """
    path = filename.strip()
    with open(path, "rb") as handle:
        data = handle.read()
    if is_ascii(path):
        data = data.split(b"\0", 1)[0].strip()
    if not data:
        return None
    content_type = conttype if conttype else get_content_type(path)
    return PostData(content_type, data)


def write_file(path: str | os.PathLike[str], data: bytes) -> None:
    """Write ``data`` to ``path``, replacing what was there."""
    with open(path, "wb") as handle:
        handle.write(data)