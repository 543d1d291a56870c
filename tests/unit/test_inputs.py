"""Unit tests for buildcache.utils.inputs."""

from __future__ import annotations

from pathlib import Path

import pytest

from buildcache.utils.inputs import is_exact_key_match, parse_cache_paths, split_multiline


class TestIsExactKeyMatch:
    def test_none_cache_key(self) -> None:
        assert is_exact_key_match("linux-rust", None) is False

    def test_empty_cache_key(self) -> None:
        assert is_exact_key_match("linux-rust", "") is False

    def test_different_keys(self) -> None:
        assert is_exact_key_match("linux-rust", "linux-") is False

    def test_different_accents(self) -> None:
        assert is_exact_key_match("linux-áccent", "linux-accent") is False

    def test_same_key(self) -> None:
        assert is_exact_key_match("linux-rust", "linux-rust") is True

    def test_different_casing(self) -> None:
        assert is_exact_key_match("linux-rust", "LINUX-RUST") is True

    def test_composed_and_decomposed_accents_match(self) -> None:
        assert is_exact_key_match("linux-caf\u00e9", "linux-cafe\u0301") is True
        assert is_exact_key_match("LINUX-CAFE\u0301", "linux-caf\u00e9") is True

    def test_decomposed_accent_still_differs_from_bare_letter(self) -> None:
        assert is_exact_key_match("linux-cafe\u0301", "linux-cafe") is False


class TestSplitMultiline:
    def test_none_and_empty(self) -> None:
        assert split_multiline(None) == []
        assert split_multiline("") == []

    def test_trims_and_drops_blank_lines(self) -> None:
        assert split_multiline("  a \n\n b\n   \n") == ["a", "b"]

    def test_normalises_negation_spacing(self) -> None:
        assert split_multiline("!   node_modules/.cache\nsrc") == ["!node_modules/.cache", "src"]


class TestParseCachePaths:
    def test_empty_input(self) -> None:
        assert parse_cache_paths(None) == []
        assert parse_cache_paths([]) == []

    def test_drops_comments_and_blanks(self) -> None:
        assert parse_cache_paths(["# comment", "", "/abs/path"]) == ["/abs/path"]

    def test_expands_home(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("HOME", "/home/ci")
        assert parse_cache_paths(["~/.npm"]) == ["/home/ci/.npm"]

    def test_home_fallback(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.delenv("HOME", raising=False)
        assert parse_cache_paths(["~/.cargo"]) == ["/home/runner/.cargo"]

    def test_resolves_relative_paths(
        self, monkeypatch: pytest.MonkeyPatch, tmp_path: Path
    ) -> None:
        monkeypatch.chdir(tmp_path)
        assert parse_cache_paths(["dist"]) == [str((tmp_path / "dist").resolve())]

    def test_keeps_absolute_paths(self) -> None:
        assert parse_cache_paths(["/var/cache/x"]) == ["/var/cache/x"]

    def test_repeated_paths_kept_once_in_first_order(
        self, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        monkeypatch.setenv("HOME", "/home/ci")
        lines = ["/work/b", "~/.npm", "/work/b", "/home/ci/.npm", "/work/a"]

        assert parse_cache_paths(lines) == ["/work/b", "/home/ci/.npm", "/work/a"]
