"""Tests for the Coercer."""

from datetime import datetime

from dataknobs_strain.coercer import Coercer, CoercionResult


class TestCoercer:
    """Test type coercion with real values."""

    def setup_method(self):
        self.coercer = Coercer()

    def test_string_coercion(self):
        """Test coercing to string."""
        assert self.coercer.coerce(123, str).value == "123"
        assert self.coercer.coerce(45.6, str).value == "45.6"
        assert self.coercer.coerce(True, str).value == "True"

        result = self.coercer.coerce([1, 2], str)
        assert not result.valid
        assert "Cannot coerce list to str" in result.error

    def test_integer_coercion(self):
        """Test coercing to integer."""
        assert self.coercer.coerce("123", int).value == 123
        assert self.coercer.coerce(" 7 ", int).value == 7
        assert self.coercer.coerce("0b101", int).value == 5
        assert self.coercer.coerce("0o17", int).value == 15
        assert self.coercer.coerce("true", int).value == 1
        assert self.coercer.coerce(45.0, int).value == 45

        result = self.coercer.coerce(45.7, int)
        assert not result.valid
        assert "losslessly" in result.error

    def test_bool_is_coerced_to_int(self):
        """Test that bools become plain ints."""
        result = self.coercer.coerce(False, int)
        assert result.valid
        assert result.value == 0
        assert type(result.value) is int

    def test_float_coercion(self):
        """Test coercing to float."""
        assert self.coercer.coerce("123.45", float).value == 123.45
        assert self.coercer.coerce(123, float).value == 123.0
        assert self.coercer.coerce("false", float).value == 0.0
        assert not self.coercer.coerce("abc", float).valid

    def test_boolean_coercion(self):
        """Test coercing to boolean."""
        for text in ("true", "1", "yes", "Y", "on"):
            assert self.coercer.coerce(text, bool).value is True
        for text in ("false", "0", "no", "N", "off", ""):
            assert self.coercer.coerce(text, bool).value is False
        assert self.coercer.coerce(1, bool).value is True
        assert not self.coercer.coerce("maybe", bool).valid

    def test_datetime_coercion(self):
        """Test coercing to datetime."""
        assert self.coercer.coerce("2024-01-15 10:30:00", datetime).value == datetime(2024, 1, 15, 10, 30)
        assert self.coercer.coerce("15/01/2024", datetime).value == datetime(2024, 1, 15)
        assert self.coercer.coerce("2024-01-15T10:30:00+02:00", datetime).valid
        assert self.coercer.coerce(0, datetime).value == datetime.fromtimestamp(0)
        assert not self.coercer.coerce([2024], datetime).valid

    def test_container_coercion(self):
        """Test coercing to dict and list."""
        assert self.coercer.coerce('{"a": 1}', dict).value == {"a": 1}
        assert self.coercer.coerce([("a", 1)], dict).value == {"a": 1}
        assert not self.coercer.coerce("[1, 2]", dict).valid
        assert self.coercer.coerce("[1, 2]", list).value == [1, 2]
        assert self.coercer.coerce("a, b", list).value == ["a", "b"]
        assert self.coercer.coerce("3", list).value == [3]
        assert self.coercer.coerce((1, 2), list).value == [1, 2]

    def test_none_is_never_coerced(self):
        """Test that None fails for every type."""
        for target in (str, int, float, bool, datetime):
            result = self.coercer.coerce(None, target)
            assert not result.valid
            assert result.value is None

    def test_already_correct_type(self):
        """Test that values of the target type are returned as-is."""
        value = {"a": 1}
        assert self.coercer.coerce(value, dict).value is value

    def test_result_truthiness(self):
        """Test CoercionResult truthiness."""
        assert CoercionResult.success(1)
        assert not CoercionResult.failure(1, "error")
