"""Tests for module path encoding."""

import pytest

from registry.goproxy.encoding import encode_path, last_path_segment


class TestEncodePath:
    """Tests for the case-escaping wire encoding."""

    @pytest.mark.parametrize(
        "path,expected",
        [
            ("golang.org/x/tools", "golang.org/x/tools"),
            ("github.com/BurntSushi/toml", "github.com/!burnt!sushi/toml"),
            ("github.com/Azure/azure-sdk-for-go", "github.com/!azure/azure-sdk-for-go"),
            ("ALL", "!a!l!l"),
            ("", ""),
        ],
    )
    def test_encodes(self, path, expected):
        assert encode_path(path) == expected

    def test_lowercase_input_is_unchanged(self):
        """Paths without uppercase letters encode to themselves, repeatedly."""
        path = "example.com/a/b.c/v2"
        assert encode_path(path) == path
        assert encode_path(encode_path(path)) == path

    def test_non_ascii_passes_through(self):
        """Only ASCII uppercase is escaped; other letters are untouched."""
        assert encode_path("example.com/Ünïcode") == "example.com/Ünïcode"


class TestLastPathSegment:
    """Tests for last path segment extraction."""

    @pytest.mark.parametrize(
        "module,expected",
        [
            ("golang.org/x/tools", "tools"),
            ("github.com/user/repo", "repo"),
            ("single", "single"),
            ("a/b/c/d", "d"),
        ],
    )
    def test_last_segment(self, module, expected):
        assert last_path_segment(module) == expected
