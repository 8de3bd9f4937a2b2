"""Tests for the module-level functions backed by the default strainer."""

import pytest

import dataknobs_strain as strain
from dataknobs_strain import ForceMode, Outcome, SchemeNotFoundError


@pytest.fixture
def registered():
    """Register schemes in the default registry and remove them afterwards."""
    names = []

    def _register(name, scheme):
        assert strain.register(name, scheme)
        names.append(name)

    yield _register
    for name in names:
        strain.unregister(name)


class TestDefaultStrainer:
    """Test the process-wide strainer."""

    def test_builtin_filters_available(self):
        for name in ("string", "integer", "null", "array_of", "mixed"):
            assert strain.default_strainer.registry.has(name)
        assert strain.default_strainer.default_force == ForceMode.SANITIZE

    def test_sanitize(self):
        data = {"name": 123, "age": "7", "extra": "x"}
        assert strain.sanitize(data, {"name": "string", "age": "integer"}) == {"name": "123", "age": 7}

    def test_complete_and_truncate(self):
        scheme = {"a": ["null", "string"], "b": ["null", "integer"]}
        assert strain.complete({"a": "x", "c": 1}, scheme) == {"a": "x", "c": 1, "b": None}
        assert strain.truncate({"a": "x", "c": 1}, scheme) == {"a": "x"}

    def test_validate(self):
        outcome = strain.validate({"age": "x"}, {"age": "integer"})
        assert isinstance(outcome, Outcome)
        assert not outcome
        assert list(outcome.error_paths()) == ["age"]

    def test_run_with_force(self):
        outcome = strain.run({"a": 1, "b": 2}, {"a": "integer"}, "truncate")
        assert outcome.valid
        assert outcome.data == {"a": 1}

    def test_register_and_lookup(self, registered):
        registered("package_test_username", ["string", {"length": (3, 20)}])

        assert strain.lookup("package_test_username") is not None
        assert strain.validate({"name": "bob"}, {"name": "package_test_username"}).valid
        assert not strain.validate({"name": "b"}, {"name": "package_test_username"}).valid

    def test_unregister(self):
        assert strain.register("package_test_temp", "string")
        assert strain.unregister("package_test_temp")
        assert not strain.unregister("package_test_temp")
        with pytest.raises(SchemeNotFoundError):
            strain.lookup("package_test_temp")

    def test_unknown_name_is_fatal(self):
        with pytest.raises(SchemeNotFoundError):
            strain.validate({"email": "a@b.c"}, {"email": ["string", "UserExists"]})


def test_version():
    """Test that version is defined."""
    assert isinstance(strain.__version__, str)
    assert strain.__version__ == "0.1.0"
