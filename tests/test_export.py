"""Tests for write_mapping()/read_mapping() and the tenacity retry on path writes."""

from __future__ import annotations

import io
import logging
from pathlib import Path
from typing import Any

import pytest

from config_normalizer.config import OutputFormat
from config_normalizer.export import read_mapping, write_mapping

MAPPING = {"global.cluster": "ISPN", "cache.default.owners": "2"}


def _flaky_write(failures: int) -> tuple[Any, list[Path]]:
    """Return a Path.write_bytes replacement failing the first ``failures`` calls."""
    original = Path.write_bytes
    calls: list[Path] = []

    def write_bytes(self: Path, data: bytes) -> int:
        calls.append(self)
        if len(calls) <= failures:
            raise OSError(f"disk busy ({len(calls)})")
        return original(self, data)

    return write_bytes, calls


class TestWriteMapping:
    def test_writes_standard_file(self, tmp_path: Path) -> None:
        target = tmp_path / "out.properties"
        write_mapping(MAPPING, target, OutputFormat.STANDARD)
        assert target.read_bytes() == b"cache.default.owners=2\nglobal.cluster=ISPN\n"

    def test_writes_xml_file_from_str_path(self, tmp_path: Path) -> None:
        target = tmp_path / "out.xml"
        write_mapping(MAPPING, str(target), "xml")
        assert b'<entry key="global.cluster">ISPN</entry>' in target.read_bytes()

    def test_writes_to_stream(self) -> None:
        stream = io.BytesIO()
        write_mapping({"a": "1"}, stream, "standard")
        assert stream.getvalue() == b"a=1\n"

    def test_invalid_attempts(self, tmp_path: Path) -> None:
        with pytest.raises(ValueError, match="attempts must be >= 1"):
            write_mapping(MAPPING, tmp_path / "x", attempts=0)

    def test_encoding_error_leaves_no_file(self, tmp_path: Path) -> None:
        target = tmp_path / "bad.properties"
        with pytest.raises(TypeError):
            write_mapping({"a": 1}, target)  # type: ignore[dict-item]
        assert not target.exists()

    def test_single_attempt_propagates_oserror(
        self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        write_bytes, calls = _flaky_write(failures=1)
        monkeypatch.setattr(Path, "write_bytes", write_bytes)
        with pytest.raises(OSError, match="disk busy"):
            write_mapping(MAPPING, tmp_path / "out.properties")
        assert len(calls) == 1

    def test_retries_until_success(
        self,
        tmp_path: Path,
        monkeypatch: pytest.MonkeyPatch,
        caplog: pytest.LogCaptureFixture,
    ) -> None:
        write_bytes, calls = _flaky_write(failures=2)
        monkeypatch.setattr(Path, "write_bytes", write_bytes)
        target = tmp_path / "out.properties"
        with caplog.at_level(logging.WARNING, logger="config_normalizer.export"):
            write_mapping(MAPPING, target, attempts=3)
        assert len(calls) == 3
        assert target.read_bytes().startswith(b"cache.default.owners=2")
        retries = [r for r in caplog.records if r.levelno == logging.WARNING]
        assert len(retries) == 2

    def test_last_error_reraised_after_attempts(
        self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        write_bytes, calls = _flaky_write(failures=5)
        monkeypatch.setattr(Path, "write_bytes", write_bytes)
        with pytest.raises(OSError, match=r"disk busy \(2\)"):
            write_mapping(MAPPING, tmp_path / "out.properties", attempts=2)
        assert len(calls) == 2

    def test_stream_is_written_once(self) -> None:
        class BrokenStream(io.BytesIO):
            writes = 0

            def write(self, data: Any) -> int:
                type(self).writes += 1
                raise OSError("pipe closed")

        with pytest.raises(OSError, match="pipe closed"):
            write_mapping(MAPPING, BrokenStream(), attempts=5)
        assert BrokenStream.writes == 1


class TestReadMapping:
    @pytest.mark.parametrize("fmt", list(OutputFormat))
    def test_reads_back_written_file(self, tmp_path: Path, fmt: OutputFormat) -> None:
        target = tmp_path / f"snapshot.{fmt}"
        write_mapping(MAPPING, target, fmt)
        assert read_mapping(target, fmt) == MAPPING

    def test_reads_stream(self) -> None:
        assert read_mapping(io.BytesIO(b"a=1\n")) == {"a": "1"}

    def test_missing_file(self, tmp_path: Path) -> None:
        with pytest.raises(FileNotFoundError):
            read_mapping(tmp_path / "absent.properties")
