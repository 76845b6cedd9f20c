"""Tests for typed-input parsing.

The shell and web API accept free text.  These helpers turn it into
engine arguments and flag inputs large enough to need confirmation.
"""

import pytest

from py_paging.memory.policies import PolicyKind
from py_paging.references import (
    MAX_FRAMES_WITHOUT_WARNING,
    MAX_REFERENCES_WITHOUT_WARNING,
    ReferenceInputError,
    input_warnings,
    parse_frame_count,
    parse_policy,
    parse_reference_string,
    validate_references,
)


class TestParseReferenceString:
    """Verify reference string parsing."""

    def test_splits_on_whitespace(self) -> None:
        """Tokens may be separated by any run of whitespace."""
        assert parse_reference_string(" 7 0  1\t2 ") == ("7", "0", "1", "2")

    def test_letters_and_digits(self) -> None:
        """Single letters (either case) and digits are valid pages."""
        assert parse_reference_string("A b 3") == ("A", "b", "3")

    @pytest.mark.parametrize("text", ["", "   ", "\n"])
    def test_blank_rejected(self, text: str) -> None:
        """Blank input should ask for a reference string."""
        with pytest.raises(ReferenceInputError, match="Please enter"):
            parse_reference_string(text)

    def test_invalid_tokens_listed(self) -> None:
        """Multi-character or symbol tokens are rejected and listed."""
        with pytest.raises(ReferenceInputError, match="Invalid items: AB, #"):
            parse_reference_string("A AB C #")

    def test_is_value_error(self) -> None:
        """Input errors are ValueErrors."""
        assert issubclass(ReferenceInputError, ValueError)


class TestValidateReferences:
    """Verify validation of pre-split tokens."""

    def test_valid_list(self) -> None:
        """A list of single characters passes through as a tuple."""
        assert validate_references(["A", "1"]) == ("A", "1")

    def test_empty_list_rejected(self) -> None:
        """An empty list is rejected."""
        with pytest.raises(ReferenceInputError):
            validate_references([])

    def test_non_string_rejected(self) -> None:
        """Non-string items (e.g. JSON numbers) are rejected."""
        with pytest.raises(ReferenceInputError, match="Invalid items: 7"):
            validate_references(["A", 7])  # pyright: ignore[reportArgumentType]


class TestParseFrameCount:
    """Verify frame count parsing."""

    def test_valid(self) -> None:
        """Numeric strings and ints are accepted."""
        expected = 4
        assert parse_frame_count("4") == expected
        assert parse_frame_count(expected) == expected

    @pytest.mark.parametrize("text", ["0", "-2"])
    def test_below_one_rejected(self, text: str) -> None:
        """Fewer than one frame is rejected."""
        with pytest.raises(ReferenceInputError, match="at least 1"):
            parse_frame_count(text)

    def test_not_a_number(self) -> None:
        """Non-numeric text is rejected."""
        with pytest.raises(ReferenceInputError, match="whole number"):
            parse_frame_count("three")


class TestParsePolicy:
    """Verify policy name parsing."""

    def test_valid(self) -> None:
        """Names parse case-insensitively."""
        assert parse_policy("lru") is PolicyKind.LRU

    def test_unknown(self) -> None:
        """Unknown names raise ReferenceInputError."""
        with pytest.raises(ReferenceInputError, match="Unknown policy"):
            parse_policy("clock")


class TestInputWarnings:
    """Verify the oversized-input warnings."""

    def test_normal_input_has_no_warnings(self) -> None:
        """Typical inputs need no confirmation."""
        assert input_warnings(["A"] * MAX_REFERENCES_WITHOUT_WARNING, 3) == []

    def test_long_reference_string(self) -> None:
        """More than the reference ceiling should warn."""
        warnings = input_warnings(["A"] * (MAX_REFERENCES_WITHOUT_WARNING + 1), 3)
        assert len(warnings) == 1
        assert "performance" in warnings[0]

    def test_many_frames(self) -> None:
        """More than the frame ceiling should warn."""
        warnings = input_warnings(["A"], MAX_FRAMES_WITHOUT_WARNING + 1)
        assert len(warnings) == 1
        assert "visualization" in warnings[0]

    def test_both(self) -> None:
        """Both ceilings exceeded gives two warnings."""
        expected = 2
        refs = ["A"] * (MAX_REFERENCES_WITHOUT_WARNING + 1)
        assert len(input_warnings(refs, MAX_FRAMES_WITHOUT_WARNING + 1)) == expected
