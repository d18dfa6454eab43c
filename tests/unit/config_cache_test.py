"""Tests for .jshintrc loading and the stat-keyed config cache."""

from __future__ import annotations

import os
from collections.abc import Iterator
from pathlib import Path
from typing import IO, Any
from unittest.mock import patch

import pytest

from jshint_mode.core import config as config_module
from jshint_mode.core.config import ConfigCache, ConfigError, StatSnapshot, parse_config, strip_comments


class TestStripComments:
    def test_removes_line_comments(self) -> None:
        assert strip_comments('{"a": 1} // trailing').strip() == '{"a": 1}'

    def test_removes_multiline_block_comments(self) -> None:
        text = '/* header\n spans lines */{"a": /* inline */ 1}'
        assert strip_comments(text) == '{"a":  1}'

    def test_block_comments_are_non_greedy(self) -> None:
        text = '/* one */{"a": 1}/* two */'
        assert strip_comments(text) == '{"a": 1}'

    def test_none_is_empty(self) -> None:
        assert strip_comments(None) == ""  # type: ignore[arg-type]


class TestParseConfig:
    def test_parses_commented_json(self) -> None:
        text = """
        {
            // enforce strict equality
            "eqeqeq": true,
            /* relaxed */ "asi": false
        }
        """
        assert parse_config(text) == {"eqeqeq": True, "asi": False}

    def test_rejects_malformed_json(self) -> None:
        with pytest.raises(ConfigError, match="invalid JSON"):
            parse_config('{"eqeqeq": }')

    def test_rejects_non_object(self) -> None:
        with pytest.raises(ConfigError, match="expected a JSON object"):
            parse_config("[1, 2]")


class TestConfigCache:
    def test_no_path_returns_empty_config(self, config_cache: ConfigCache) -> None:
        with patch.object(config_module, "open", create=True) as mock_open:
            assert config_cache.get(None) == {}
            assert config_cache.get("") == {}
        mock_open.assert_not_called()
        assert len(config_cache) == 0

    def test_loads_config_file(self, tmp_path: Path, config_cache: ConfigCache) -> None:
        rc = tmp_path / ".jshintrc"
        rc.write_text('{"eqeqeq": true} // comment', encoding="utf-8")

        assert config_cache.get(str(rc)) == {"eqeqeq": True}
        assert str(rc) in config_cache

    def test_unchanged_file_is_not_reparsed(self, tmp_path: Path, config_cache: ConfigCache) -> None:
        rc = tmp_path / ".jshintrc"
        rc.write_text('{"curly": true}', encoding="utf-8")

        with patch.object(config_module, "parse_config", wraps=parse_config) as spy:
            first = config_cache.get(str(rc))
            second = config_cache.get(str(rc))

        assert spy.call_count == 1
        assert second is first

    def test_changed_size_triggers_reload(self, tmp_path: Path, config_cache: ConfigCache) -> None:
        rc = tmp_path / ".jshintrc"
        rc.write_text('{"curly": true}', encoding="utf-8")
        assert config_cache.get(str(rc)) == {"curly": True}

        rc.write_text('{"curly": false, "maxlen": 80}', encoding="utf-8")
        assert config_cache.get(str(rc)) == {"curly": False, "maxlen": 80}

    def test_changed_mtime_triggers_reload(self, tmp_path: Path, config_cache: ConfigCache) -> None:
        rc = tmp_path / ".jshintrc"
        rc.write_text('{"asi": true}', encoding="utf-8")
        config_cache.get(str(rc))
        stat = rc.stat()

        # Same size, different content, mtime moved forward.
        rc.write_text('{"bsi": true}', encoding="utf-8")
        os.utime(rc, ns=(stat.st_atime_ns, stat.st_mtime_ns + 2_000_000_000))

        assert config_cache.get(str(rc)) == {"bsi": True}

    def test_missing_file_returns_previous_config(self, tmp_path: Path, config_cache: ConfigCache) -> None:
        rc = tmp_path / ".jshintrc"
        rc.write_text('{"evil": true}', encoding="utf-8")
        assert config_cache.get(str(rc)) == {"evil": True}

        rc.unlink()
        assert config_cache.get(str(rc)) == {"evil": True}

    def test_missing_file_without_history_is_empty(self, tmp_path: Path, config_cache: ConfigCache) -> None:
        assert config_cache.get(str(tmp_path / "nope.jshintrc")) == {}

    def test_malformed_file_keeps_previous_config(self, tmp_path: Path, config_cache: ConfigCache) -> None:
        rc = tmp_path / ".jshintrc"
        rc.write_text('{"debug": true}', encoding="utf-8")
        assert config_cache.get(str(rc)) == {"debug": True}

        rc.write_text('{"debug": true,, broken', encoding="utf-8")
        assert config_cache.get(str(rc)) == {"debug": True}

    def test_malformed_file_is_not_reparsed_until_it_changes(
        self, tmp_path: Path, config_cache: ConfigCache
    ) -> None:
        rc = tmp_path / ".jshintrc"
        rc.write_text("not json", encoding="utf-8")

        with patch.object(config_module, "parse_config", wraps=parse_config) as spy:
            assert config_cache.get(str(rc)) == {}
            assert config_cache.get(str(rc)) == {}
        assert spy.call_count == 1

        rc.write_text('{"plusplus": true}', encoding="utf-8")
        assert config_cache.get(str(rc)) == {"plusplus": True}

    def test_failed_load_logs_warning(
        self, tmp_path: Path, config_cache: ConfigCache, caplog: pytest.LogCaptureFixture
    ) -> None:
        missing = tmp_path / "missing.jshintrc"
        with caplog.at_level("WARNING", logger="jshint_mode.core.config"):
            config_cache.get(str(missing))
        assert "Could not load jshintrc" in caplog.text

    def test_fresh_load_logs_path(
        self, tmp_path: Path, config_cache: ConfigCache, caplog: pytest.LogCaptureFixture
    ) -> None:
        rc = tmp_path / ".jshintrc"
        rc.write_text("{}", encoding="utf-8")
        with caplog.at_level("INFO", logger="jshint_mode.core.config"):
            config_cache.get(str(rc))
        assert f"Loading jshintrc: {rc}" in caplog.text

    def test_clear_forgets_entries(self, tmp_path: Path, config_cache: ConfigCache) -> None:
        rc = tmp_path / ".jshintrc"
        rc.write_text("{}", encoding="utf-8")
        config_cache.get(str(rc))
        config_cache.clear()
        assert len(config_cache) == 0


class TestFileHandleIsClosed:
    @pytest.fixture
    def handles(self) -> Iterator[list[IO[str]]]:
        opened: list[IO[str]] = []

        def _open(*args: Any, **kwargs: Any) -> IO[str]:
            fh = open(*args, **kwargs)  # noqa: SIM115
            opened.append(fh)
            return fh

        with patch.object(config_module, "open", _open, create=True):
            yield opened

    def test_after_load(self, tmp_path: Path, config_cache: ConfigCache, handles: list[IO[str]]) -> None:
        rc = tmp_path / ".jshintrc"
        rc.write_text('{"curly": true}', encoding="utf-8")

        config_cache.get(str(rc))

        assert len(handles) == 1
        assert handles[0].closed

    def test_after_unchanged_stat(self, tmp_path: Path, config_cache: ConfigCache, handles: list[IO[str]]) -> None:
        rc = tmp_path / ".jshintrc"
        rc.write_text('{"curly": true}', encoding="utf-8")

        config_cache.get(str(rc))
        config_cache.get(str(rc))

        assert len(handles) == 2
        assert all(fh.closed for fh in handles)

    def test_after_malformed_json(self, tmp_path: Path, config_cache: ConfigCache, handles: list[IO[str]]) -> None:
        rc = tmp_path / ".jshintrc"
        rc.write_text("{broken", encoding="utf-8")

        assert config_cache.get(str(rc)) == {}

        assert len(handles) == 1
        assert handles[0].closed

    def test_after_fstat_failure(self, tmp_path: Path, config_cache: ConfigCache, handles: list[IO[str]]) -> None:
        rc = tmp_path / ".jshintrc"
        rc.write_text('{"curly": true}', encoding="utf-8")

        with patch.object(config_module.os, "fstat", side_effect=OSError(5, "I/O error")):
            assert config_cache.get(str(rc)) == {}

        assert len(handles) == 1
        assert handles[0].closed


def test_stat_snapshot_uses_nanosecond_mtime(tmp_path: Path) -> None:
    target = tmp_path / "f"
    target.write_text("x", encoding="utf-8")
    st = target.stat()
    snapshot = StatSnapshot.from_stat(st)
    assert snapshot == StatSnapshot(st.st_dev, st.st_ino, st.st_size, st.st_mtime_ns)
