import pytest

from sieger.config import Config, ConfigError, Method


def test_add_header_appends_crlf():
    config = Config()
    config.add_header("X-Test: yes")
    assert config.extra == "X-Test: yes\r\n"


def test_add_header_accumulates_in_order():
    config = Config()
    config.add_header("A: 1")
    config.add_header("B: 2")
    assert config.extra == "A: 1\r\nB: 2\r\n"


def test_add_header_without_colon_is_rejected():
    config = Config()
    with pytest.raises(ConfigError):
        config.add_header("no colon here")
    assert config.extra == ""


def test_add_header_limit_boundary():
    config = Config()
    header = "a:bcdef"
    config.add_header(header, limit=len(header) + 3)
    assert config.extra == header + "\r\n"


def test_add_header_over_limit_is_rejected():
    config = Config()
    header = "a:bcdefg"
    with pytest.raises(ConfigError):
        config.add_header(header, limit=len(header) + 2)
    assert config.extra == ""


def test_config_error_is_value_error():
    config = Config()
    with pytest.raises(ValueError):
        config.add_header("broken")


def test_lists_are_not_shared_between_instances():
    first = Config()
    second = Config()
    first.nomap.append("ads.example.com")
    first.login_urls.append("http://example.com/login")
    assert second.nomap == []
    assert second.login_urls == []


def test_method_round_trip_by_value():
    assert Method("HEAD") is Method.HEAD
    assert Config().method is Method.GET