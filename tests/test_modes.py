"""Tests for ForceMode."""

import pytest

from dataknobs_strain import ConfigurationError, ForceMode


class TestForceMode:
    """Test the force mode bits and parsing."""

    @pytest.mark.parametrize(
        "mode,adds,removes",
        [
            (ForceMode.NOCHANGE, False, False),
            (ForceMode.COMPLETE, True, False),
            (ForceMode.TRUNCATE, False, True),
            (ForceMode.SANITIZE, True, True),
        ],
    )
    def test_bits(self, mode, adds, removes):
        assert mode.adds_missing is adds
        assert mode.removes_extra is removes

    def test_sanitize_combines_bits(self):
        assert ForceMode.SANITIZE == ForceMode.COMPLETE | ForceMode.TRUNCATE
        assert ForceMode.SANITIZE.value == 3

    @pytest.mark.parametrize(
        "value,expected",
        [
            ("sanitize", ForceMode.SANITIZE),
            ("COMPLETE", ForceMode.COMPLETE),
            (" truncate ", ForceMode.TRUNCATE),
            ("nochange", ForceMode.NOCHANGE),
            (0, ForceMode.NOCHANGE),
            (1, ForceMode.COMPLETE),
            (2, ForceMode.TRUNCATE),
            (3, ForceMode.SANITIZE),
            (ForceMode.TRUNCATE, ForceMode.TRUNCATE),
        ],
    )
    def test_parse(self, value, expected):
        assert ForceMode.parse(value) == expected

    @pytest.mark.parametrize("value", ["everything", 4, -1, True, None, 1.5])
    def test_parse_rejects(self, value):
        with pytest.raises(ConfigurationError) as exc_info:
            ForceMode.parse(value)
        assert exc_info.value.context["value"] == value
