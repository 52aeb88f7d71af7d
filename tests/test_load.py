import pytest

from sieger.load import (
    DEFAULT_CONTENT_TYPE,
    PostData,
    get_content_type,
    get_file_extension,
    is_ascii,
    load_file,
    write_file,
)


@pytest.mark.parametrize(
    "name, expected",
    [
        ("page.html", "html"),
        ("archive.tar.gz", "gz"),
        ("noext", ""),
        (".hidden", ""),
        ("trailing.", ""),
    ],
)
def test_get_file_extension(name, expected):
    assert get_file_extension(name) == expected


@pytest.mark.parametrize(
    "name, expected",
    [
        ("index.html", "text/html"),
        ("picture.png", "image/png"),
        ("data.json", "application/json"),
        ("notes.txt", "text/plain"),
        ("PAGE.HTML", "text/html"),
    ],
)
def test_get_content_type_known(name, expected):
    assert get_content_type(name) == expected


def test_get_content_type_unknown_falls_back_to_default():
    assert get_content_type("thing.unknownext") == DEFAULT_CONTENT_TYPE
    assert get_content_type("noext") == "application/x-www-form-urlencoded"


def test_is_ascii():
    assert is_ascii("notes.txt") is True
    assert is_ascii("picture.png") is False
    assert is_ascii("thing.unknownext") is True
    assert is_ascii("drawing.svg") is True


def test_load_text_file_is_trimmed(tmp_path):
    path = tmp_path / "body.txt"
    path.write_bytes(b"  \n name=value&x=1 \n\n")
    post = load_file(str(path))
    assert post == PostData("text/plain", b"name=value&x=1")
    assert len(post) == len(b"name=value&x=1")


def test_load_text_file_stops_at_nul(tmp_path):
    path = tmp_path / "body.txt"
    path.write_bytes(b"before\0after")
    assert load_file(str(path)).data == b"before"


def test_load_binary_file_kept_verbatim(tmp_path):
    path = tmp_path / "blob.png"
    payload = b"\x00 \x89PNG \n"
    path.write_bytes(payload)
    post = load_file(str(path))
    assert post.data == payload
    assert post.content_type == "image/png"


def test_load_file_content_type_override(tmp_path):
    path = tmp_path / "body.json"
    path.write_bytes(b'{"a": 1}')
    post = load_file(str(path), conttype="text/x-custom")
    assert post.content_type == "text/x-custom"


def test_load_file_strips_filename(tmp_path):
    path = tmp_path / "body.xml"
    path.write_bytes(b"<a/>")
    post = load_file(f"  {path}  ")
    assert post.content_type == "text/xml"


def test_load_empty_text_file_returns_none(tmp_path):
    path = tmp_path / "blank.txt"
    path.write_bytes(b"   \n\t ")
    assert load_file(str(path)) is None


def test_load_missing_file_raises(tmp_path):
    with pytest.raises(OSError):
        load_file(str(tmp_path / "missing.txt"))


def test_write_then_load_round_trip(tmp_path):
    path = tmp_path / "out.bin"
    payload = bytes(range(256))
    write_file(path, payload)
    assert path.read_bytes() == payload
    assert load_file(str(path)).data == payload


def test_write_file_replaces_content(tmp_path):
    path = tmp_path / "out.dat"
    write_file(path, b"long original content")
    write_file(path, b"short")
    assert path.read_bytes() == b"short"


def test_write_file_into_missing_directory_raises(tmp_path):
    with pytest.raises(OSError):
        write_file(tmp_path / "nope" / "file.bin", b"x")