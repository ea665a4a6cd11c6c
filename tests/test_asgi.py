"""Tests for wren._internal.asgi — typed ASGI definitions."""

import pytest

from wren._internal.asgi import HTTPScope


def _make_scope(**overrides: object) -> dict[str, object]:
    """Build a minimal valid ASGI HTTP scope dict."""
    base: dict[str, object] = {
        "type": "http",
        "asgi": {"version": "3.0"},
        "http_version": "1.1",
        "method": "GET",
        "path": "/",
        "raw_path": b"/",
        "query_string": b"",
        "root_path": "",
        "headers": [],
        "server": ("localhost", 8000),
        "client": ("127.0.0.1", 54321),
    }
    base.update(overrides)
    return base


class TestHTTPScope:
    def test_from_scope_basic(self) -> None:
        scope = _make_scope(method="POST", path="/users/42", raw_path=b"/users/42")
        parsed = HTTPScope.from_scope(scope)

        assert parsed.method == "POST"
        assert parsed.path == "/users/42"
        assert parsed.target == "/users/42"

    def test_target_prefers_raw_path(self) -> None:
        scope = _make_scope(path="/greet/Jürgen", raw_path=b"/greet/J%C3%BCrgen")
        parsed = HTTPScope.from_scope(scope)

        assert parsed.target == "/greet/J%C3%BCrgen"

    def test_defaults_for_missing_keys(self) -> None:
        minimal: dict[str, object] = {
            "type": "http",
            "asgi": {"version": "3.0"},
            "method": "GET",
            "path": "/about",
        }
        parsed = HTTPScope.from_scope(minimal)

        assert parsed.raw_path == b""
        assert parsed.target == "/about"

    def test_raw_path_none_falls_back_to_path(self) -> None:
        parsed = HTTPScope.from_scope(_make_scope(path="/x", raw_path=None))
        assert parsed.target == "/x"

    def test_frozen(self) -> None:
        parsed = HTTPScope.from_scope(_make_scope())

        with pytest.raises(AttributeError):
            parsed.method = "POST"  # type: ignore[misc]

    def test_unescaped_utf8_raw_path_falls_back_to_path(self) -> None:
        scope = _make_scope(path="/café", raw_path=b"/caf\xc3\xa9")
        parsed = HTTPScope.from_scope(scope)

        assert parsed.target == "/café"
