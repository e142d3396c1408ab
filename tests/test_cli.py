"""Tests for the config-normalizer command line tool."""

from __future__ import annotations

import sys
import textwrap
import uuid
from collections.abc import Iterator
from pathlib import Path

import pytest

from config_normalizer import ConfigNormalizer, SourceLoadError, __version__, loads
from config_normalizer.cli import build_parser, load_source, main

SETTINGS = textwrap.dedent(
    """
    from dataclasses import dataclass, field

    from config_normalizer import configurable


    @dataclass
    class Eviction:
        strategy: str = "NONE"


    @dataclass
    class Cache:
        owners: int = 2
        eviction: Eviction = field(default_factory=Eviction)


    @dataclass
    class Global:
        cluster_name: str = "ISPN"


    @dataclass
    class UDP:
        name: str = "UDP"
        mcast_port: int = configurable(default=46655)


    class Source:
        def __init__(self, transport=True):
            self._transport = transport

        def global_configuration(self):
            return Global()

        def default_configuration(self):
            return Cache()

        def named_configurations(self):
            return {"orders": Cache(owners=3, eviction=Eviction("LRU"))}

        def transport_stack(self):
            return [UDP()] if self._transport else None


    class Holder:
        SOURCE = Source()


    SOURCE = Source()
    NOT_A_SOURCE = 42


    def build():
        return Source()


    def build_local():
        return Source(transport=False)


    def broken():
        raise RuntimeError("boom")


    class Unstarted(Source):
        def global_configuration(self):
            raise RuntimeError("manager not started")
    """
)


@pytest.fixture
def settings(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Iterator[str]:
    """Write a settings module into a plugin directory and return its name."""
    name = f"settings_{uuid.uuid4().hex}"
    (tmp_path / f"{name}.py").write_text(SETTINGS)
    monkeypatch.setattr(sys, "path", list(sys.path))
    yield name
    sys.modules.pop(name, None)


@pytest.fixture
def plugin_dir(settings: str, tmp_path: Path) -> list[str]:
    return ["-j", str(tmp_path)]


class TestLoadSource:
    @pytest.fixture(autouse=True)
    def _on_path(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch, settings: str) -> None:
        monkeypatch.syspath_prepend(str(tmp_path))

    @pytest.mark.parametrize("attribute", ["SOURCE", "Source", "build", "Holder.SOURCE"])
    def test_resolves_source(self, settings: str, attribute: str) -> None:
        source = load_source(f"{settings}:{attribute}")
        assert source.named_configurations()["orders"].owners == 3

    @pytest.mark.parametrize("reference", ["no_colon", ":SOURCE", "module:"])
    def test_malformed_reference(self, reference: str) -> None:
        with pytest.raises(SourceLoadError, match="module:attribute"):
            load_source(reference)

    def test_missing_module(self) -> None:
        with pytest.raises(SourceLoadError, match="Could not import"):
            load_source("no_such_settings_module:SOURCE")

    def test_missing_attribute(self, settings: str) -> None:
        with pytest.raises(SourceLoadError, match="has no attribute"):
            load_source(f"{settings}:MISSING")

    def test_factory_failure(self, settings: str) -> None:
        with pytest.raises(SourceLoadError, match="boom") as exc_info:
            load_source(f"{settings}:broken")
        assert isinstance(exc_info.value.__cause__, RuntimeError)

    def test_not_a_source(self, settings: str) -> None:
        with pytest.raises(SourceLoadError, match="not a configuration source"):
            load_source(f"{settings}:NOT_A_SOURCE")


class TestParser:
    def test_defaults(self) -> None:
        args = build_parser().parse_args(["pkg:SOURCE"])
        assert args.format == "xml"
        assert args.output_type is None
        assert args.prefix == ""
        assert args.plugin_dir == []
        assert args.retries == 1

    def test_plugin_dir_repeatable(self) -> None:
        args = build_parser().parse_args(["-j", "a", "-j", "b", "pkg:SOURCE"])
        assert args.plugin_dir == ["a", "b"]

    def test_unknown_format_rejected(self) -> None:
        with pytest.raises(SystemExit) as exc_info:
            build_parser().parse_args(["-f", "json", "pkg:SOURCE"])
        assert exc_info.value.code == 2

    def test_version(self, capsys: pytest.CaptureFixture[str]) -> None:
        with pytest.raises(SystemExit) as exc_info:
            main(["--version"])
        assert exc_info.value.code == 0
        assert __version__ in capsys.readouterr().out


class TestMain:
    def test_xml_to_stdout_by_default(
        self,
        settings: str,
        plugin_dir: list[str],
        capsysbinary: pytest.CaptureFixture[bytes],
    ) -> None:
        assert main([*plugin_dir, f"{settings}:SOURCE"]) == 0
        out = capsysbinary.readouterr().out
        assert out.startswith(b"<?xml")
        props = loads(out, "xml")
        assert props["global.cluster_name"] == "ISPN"
        assert props["cache.___defaultcache.owners"] == "2"
        assert props["cache.orders.eviction.strategy"] == "LRU"
        assert props["jgroups.UDP.mcast_port"] == "46655"

    def test_standard_to_file(
        self, settings: str, plugin_dir: list[str], tmp_path: Path
    ) -> None:
        target = tmp_path / "out.properties"
        code = main([*plugin_dir, "-f", "standard", "-o", str(target), f"{settings}:build"])
        assert code == 0
        assert b"global.cluster_name=ISPN\n" in target.read_bytes()

    def test_output_matches_library(
        self, settings: str, plugin_dir: list[str], tmp_path: Path
    ) -> None:
        target = tmp_path / "out.properties"
        main([*plugin_dir, "-f", "standard", "-o", str(target), f"{settings}:SOURCE"])
        expected = ConfigNormalizer().normalize_source(load_source(f"{settings}:SOURCE"))
        assert loads(target.read_bytes()) == expected.properties

    def test_cache_option_implies_cache_type(
        self,
        settings: str,
        plugin_dir: list[str],
        capsysbinary: pytest.CaptureFixture[bytes],
    ) -> None:
        assert main([*plugin_dir, "-f", "standard", "-c", "orders", f"{settings}:SOURCE"]) == 0
        props = loads(capsysbinary.readouterr().out)
        assert props == {"owners": "3", "eviction.strategy": "LRU"}

    def test_cache_type_defaults_to_default_cache(
        self,
        settings: str,
        plugin_dir: list[str],
        capsysbinary: pytest.CaptureFixture[bytes],
    ) -> None:
        main([*plugin_dir, "-f", "standard", "-t", "cache", "-p", "before", f"{settings}:SOURCE"])
        props = loads(capsysbinary.readouterr().out)
        assert props == {"before.owners": "2", "before.eviction.strategy": "NONE"}

    @pytest.mark.parametrize(
        ("output_type", "expected"),
        [
            ("global", {"cluster_name": "ISPN"}),
            ("jgroups", {"UDP.mcast_port": "46655"}),
        ],
    )
    def test_single_section(
        self,
        settings: str,
        plugin_dir: list[str],
        capsysbinary: pytest.CaptureFixture[bytes],
        output_type: str,
        expected: dict[str, str],
    ) -> None:
        main([*plugin_dir, "-f", "standard", "-t", output_type, f"{settings}:SOURCE"])
        assert loads(capsysbinary.readouterr().out) == expected

    def test_unknown_cache_fails(
        self,
        settings: str,
        plugin_dir: list[str],
        capsysbinary: pytest.CaptureFixture[bytes],
    ) -> None:
        assert main([*plugin_dir, "-c", "invoices", f"{settings}:SOURCE"]) == 1
        captured = capsysbinary.readouterr()
        assert captured.out == b""
        assert b"ERROR: Cache 'invoices' not found" in captured.err

    def test_missing_transport_fails(
        self,
        settings: str,
        plugin_dir: list[str],
        capsysbinary: pytest.CaptureFixture[bytes],
    ) -> None:
        assert main([*plugin_dir, "-t", "jgroups", f"{settings}:build_local"]) == 1
        assert b"no transport protocol stack" in capsysbinary.readouterr().err

    def test_failing_source_method_fails(
        self,
        settings: str,
        plugin_dir: list[str],
        capsysbinary: pytest.CaptureFixture[bytes],
    ) -> None:
        assert main([*plugin_dir, "-t", "global", f"{settings}:Unstarted"]) == 1
        captured = capsysbinary.readouterr()
        assert captured.out == b""
        assert b"ERROR: Configuration source global_configuration() failed" in captured.err
        assert b"manager not started" in captured.err

    def test_bad_source_fails(self, capsysbinary: pytest.CaptureFixture[bytes]) -> None:
        assert main(["no_such_settings_module:SOURCE"]) == 1
        assert b"ERROR: Could not import" in capsysbinary.readouterr().err

    def test_unwritable_output_fails(
        self, settings: str, plugin_dir: list[str], tmp_path: Path
    ) -> None:
        target = tmp_path / "missing" / "out.xml"
        assert main([*plugin_dir, "-o", str(target), f"{settings}:SOURCE"]) == 1
        assert not target.exists()

    def test_cache_with_other_type_is_usage_error(self) -> None:
        with pytest.raises(SystemExit) as exc_info:
            main(["-c", "orders", "-t", "global", "pkg:SOURCE"])
        assert exc_info.value.code == 2

    def test_retries_must_be_positive(self) -> None:
        with pytest.raises(SystemExit) as exc_info:
            main(["--retries", "0", "pkg:SOURCE"])
        assert exc_info.value.code == 2
