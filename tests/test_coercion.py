"""Tests for type coercion.

Only two kinds are supported: base-10 integers and text.  Everything
else must be reported as unsupported rather than silently ignored.
"""

from typing import Any

import pytest

from py_envbind.coercion import FieldKind, coerce, kind_of


class TestFieldKind:
    """Verify the closed set of kinds."""

    def test_values(self) -> None:
        """FieldKind should have integer and text members."""
        expected_count = 2
        assert len(FieldKind) == expected_count
        assert FieldKind.INTEGER == "integer"
        assert FieldKind.TEXT == "text"


class TestKindOf:
    """Verify mapping type hints onto kinds."""

    def test_int(self) -> None:
        """Int should map to INTEGER."""
        assert kind_of(int) is FieldKind.INTEGER

    def test_str(self) -> None:
        """Str should map to TEXT."""
        assert kind_of(str) is FieldKind.TEXT

    @pytest.mark.parametrize("annotation", [bool, float, bytes, list[int], "int", None])
    def test_unsupported(self, annotation: Any) -> None:  # noqa: ANN401
        """Anything else, bool included, should be unsupported."""
        assert kind_of(annotation) is None


class TestCoerceInteger:
    """Verify base-10 integer conversion."""

    def test_plain(self) -> None:
        """A run of digits should parse."""
        expected_port = 8080
        assert coerce(FieldKind.INTEGER, "8080") == expected_port

    def test_signed(self) -> None:
        """A leading sign should be accepted."""
        expected_negative = -1
        expected_positive = 42
        assert coerce(FieldKind.INTEGER, "-1") == expected_negative
        assert coerce(FieldKind.INTEGER, "+42") == expected_positive

    def test_leading_zeros_are_decimal(self) -> None:
        """Leading zeros should not switch to octal."""
        expected = 10
        assert coerce(FieldKind.INTEGER, "010") == expected

    @pytest.mark.parametrize("text", ["abc", "", " 80", "80 ", "1_000", "0x1F", "1.5", "+", "٣"])
    def test_rejects(self, text: str) -> None:
        """Anything but an optionally signed run of ASCII digits should fail."""
        with pytest.raises(ValueError, match="base 10 integer"):
            coerce(FieldKind.INTEGER, text)


class TestCoerceText:
    """Verify text conversion."""

    @pytest.mark.parametrize("text", ["localhost", "", "  spaced  ", "a=b"])
    def test_verbatim(self, text: str) -> None:
        """Text should be returned unchanged."""
        assert coerce(FieldKind.TEXT, text) == text
