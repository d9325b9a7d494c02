"""Tests for _loader.py — candidate parsing and first-success loading."""

import logging
from importlib.resources import files

import pytest

from propvault.config._loader import (
    NO_SOURCE,
    SourceLoader,
    SourceLocation,
    parse_candidates,
)


@pytest.fixture
def workdir(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    return tmp_path


class TestSourceLocation:
    def test_filesystem_path(self):
        location = SourceLocation.parse("config/application.properties")
        assert location.bundled is False
        assert location.path == "config/application.properties"

    def test_classpath_reference(self):
        location = SourceLocation.parse("classpath:application.properties")
        assert location.bundled is True
        assert location.path == "application.properties"
        assert str(location) == "classpath:application.properties"

    def test_classpath_leading_slash_dropped(self):
        assert SourceLocation.parse("classpath:/conf/app.properties").path == "conf/app.properties"


class TestParseCandidates:
    def test_order_preserved(self):
        candidates = parse_candidates("classpath:a.properties,b.properties")
        assert [c.raw for c in candidates] == ["classpath:a.properties", "b.properties"]

    def test_whitespace_and_empty_entries_dropped(self):
        assert [c.raw for c in parse_candidates(" a , ,b, ")] == ["a", "b"]

    def test_empty_string(self):
        assert parse_candidates("") == []


class TestFilesystem:
    def test_first_existing_candidate_wins(self, workdir):
        (workdir / "real.properties").write_text("a=1\nb=2\n")
        loaded = SourceLoader().load("missing.properties,real.properties")
        assert loaded.source == "real.properties"
        assert dict(loaded.properties) == {"a": "1", "b": "2"}
        assert loaded.found

    def test_no_merging_across_files(self, workdir):
        (workdir / "first.properties").write_text("a=first\n")
        (workdir / "second.properties").write_text("a=second\nb=2\n")
        loaded = SourceLoader().load("first.properties,second.properties")
        assert dict(loaded.properties) == {"a": "first"}

    def test_absolute_path(self, tmp_path):
        path = tmp_path / "abs.properties"
        path.write_text("x=y\n")
        assert SourceLoader().load(str(path)).properties["x"] == "y"

    def test_unparseable_candidate_skipped(self, workdir):
        (workdir / "broken.properties").write_text("a=\\u12\n")
        (workdir / "good.properties").write_text("a=ok\n")
        loaded = SourceLoader().load("broken.properties,good.properties")
        assert loaded.source == "good.properties"

    def test_latin1_file_decoded(self, workdir):
        (workdir / "latin1.properties").write_bytes(b"greeting=caf\xe9\nport=8080\n")
        loaded = SourceLoader().load("latin1.properties")
        assert loaded.source == "latin1.properties"
        assert dict(loaded.properties) == {"greeting": "café", "port": "8080"}

    def test_utf8_file_decoded(self, workdir):
        (workdir / "utf8.properties").write_bytes("greeting=café\n".encode("utf-8"))
        assert SourceLoader().load("utf8.properties").properties["greeting"] == "café"

    def test_directory_candidate_skipped(self, workdir):
        (workdir / "adir").mkdir()
        assert SourceLoader().load("adir").source == NO_SOURCE

    def test_properties_are_read_only(self, workdir):
        (workdir / "real.properties").write_text("a=1\n")
        loaded = SourceLoader().load("real.properties")
        with pytest.raises(TypeError):
            loaded.properties["a"] = "2"  # type: ignore[index]


class TestBundledResources:
    def test_found_under_resource_root(self, tmp_path):
        (tmp_path / "application.properties").write_text("bundled=yes\n")
        loaded = SourceLoader(resource_roots=[tmp_path]).load("classpath:application.properties")
        assert loaded.source == "classpath:application.properties"
        assert loaded.properties["bundled"] == "yes"

    def test_latin1_resource_decoded(self, tmp_path):
        (tmp_path / "app.properties").write_bytes(b"name=na\xefve\n")
        loaded = SourceLoader(resource_roots=[tmp_path]).load("classpath:app.properties")
        assert loaded.properties["name"] == "naïve"

    def test_nested_resource(self, tmp_path):
        (tmp_path / "conf").mkdir()
        (tmp_path / "conf" / "app.properties").write_text("nested=yes\n")
        loaded = SourceLoader(resource_roots=[str(tmp_path)]).load("classpath:conf/app.properties")
        assert loaded.properties["nested"] == "yes"

    def test_roots_searched_in_order(self, tmp_path):
        first, second = tmp_path / "first", tmp_path / "second"
        first.mkdir()
        second.mkdir()
        (second / "app.properties").write_text("root=second\n")
        loaded = SourceLoader(resource_roots=[first, second]).load("classpath:app.properties")
        assert loaded.properties["root"] == "second"

    def test_traversable_root(self):
        root = files("propvault.config")
        loaded = SourceLoader(resource_roots=[root]).load("classpath:does-not-exist.properties")
        assert loaded.source == NO_SOURCE

    def test_missing_resource_falls_through_to_file(self, tmp_path, monkeypatch):
        monkeypatch.chdir(tmp_path)
        (tmp_path / "config").mkdir()
        (tmp_path / "config" / "application.properties").write_text("from=file\n")
        loader = SourceLoader(resource_roots=[tmp_path / "empty-root"])
        loaded = loader.load("classpath:application.properties,config/application.properties")
        assert loaded.source == "config/application.properties"

    def test_defaults_to_sys_path(self, tmp_path, monkeypatch):
        (tmp_path / "onpath.properties").write_text("a=1\n")
        monkeypatch.syspath_prepend(str(tmp_path))
        loaded = SourceLoader().load("classpath:onpath.properties")
        assert dict(loaded.properties) == {"a": "1"}


class TestExhausted:
    def test_all_missing_returns_empty(self, workdir):
        loaded = SourceLoader().load("nope.properties,classpath:nope.properties")
        assert dict(loaded.properties) == {}
        assert loaded.source == NO_SOURCE
        assert not loaded.found

    def test_empty_candidate_string(self, tmp_path):
        loaded = SourceLoader(resource_roots=[tmp_path]).load("")
        assert loaded.source == NO_SOURCE
        assert dict(loaded.properties) == {}


class TestLogging:
    def test_missing_candidate_logged_at_info(self, workdir, caplog):
        (workdir / "real.properties").write_text("a=1\n")
        with caplog.at_level(logging.INFO, logger="propvault.config._loader"):
            SourceLoader().load("missing.properties,real.properties")
        messages = [(r.levelno, r.getMessage()) for r in caplog.records]
        assert (logging.INFO, "Trying to load properties from missing.properties") in messages
        assert any(
            level == logging.INFO and msg.startswith("Could not open input stream for missing")
            for level, msg in messages
        )
        assert (logging.INFO, "Loaded 1 property from real.properties") in messages
        assert not any(level >= logging.WARNING for level, _ in messages)

    def test_traceback_at_debug(self, workdir, caplog):
        with caplog.at_level(logging.DEBUG, logger="propvault.config._loader"):
            SourceLoader().load("missing.properties")
        debug = [r for r in caplog.records if r.levelno == logging.DEBUG]
        assert debug and debug[0].exc_info is not None

    def test_exhausted_logged_at_warning(self, workdir, caplog):
        with caplog.at_level(logging.INFO, logger="propvault.config._loader"):
            SourceLoader().load("missing.properties")
        warnings = [r for r in caplog.records if r.levelno == logging.WARNING]
        assert len(warnings) == 1
        assert "missing.properties" in warnings[0].getMessage()
