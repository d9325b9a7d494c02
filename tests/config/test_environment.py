"""Tests for _environment.py and _process_adapter.py."""

from propvault.config._environment import Environment, FakeEnvironment
from propvault.config._process_adapter import (
    ProcessEnvironment,
    clear_property,
    get_property,
    property_names,
    set_property,
)


class TestFakeEnvironment:
    def test_reads(self):
        env = FakeEnvironment(env={"A": "1"}, properties={"a": "2"})
        assert env.get_env("A") == "1"
        assert env.get_property("a") == "2"
        assert env.get_env("a") is None

    def test_mutation_helpers(self):
        env = FakeEnvironment()
        env.set_env("A", "1")
        env.set_property("a", "2")
        assert (env.get_env("A"), env.get_property("a")) == ("1", "2")
        env.unset_env("A")
        env.unset_property("a")
        assert (env.get_env("A"), env.get_property("a")) == (None, None)

    def test_copies_input(self):
        source = {"A": "1"}
        env = FakeEnvironment(env=source)
        source["A"] = "changed"
        assert env.get_env("A") == "1"

    def test_satisfies_protocol(self):
        assert isinstance(FakeEnvironment(), Environment)


class TestProcessProperties:
    def test_set_get_clear(self):
        assert set_property("app.name", "demo") is None
        assert get_property("app.name") == "demo"
        assert "app.name" in property_names()
        assert set_property("app.name", "other") == "demo"
        assert clear_property("app.name") == "other"
        assert get_property("app.name") is None

    def test_clear_missing(self):
        assert clear_property("never.set") is None


class TestProcessEnvironment:
    def test_reads_os_environ(self, monkeypatch):
        monkeypatch.setenv("PROPVAULT_TEST_VAR", "value")
        assert ProcessEnvironment().get_env("PROPVAULT_TEST_VAR") == "value"

    def test_reads_property_store(self):
        set_property("app.mode", "test")
        assert ProcessEnvironment().get_property("app.mode") == "test"

    def test_satisfies_protocol(self):
        assert isinstance(ProcessEnvironment(), Environment)
