"""
MIT License

Copyright (c) 2025 Sébastien Gachoud

Permission is hereby granted, free of charge, to any person obtaining a copy
of this software and associated documentation files (the "Software"), to deal
in the Software without restriction, including without limitation the rights
to use, copy, modify, merge, publish, distribute, sublicense, and/or sell
copies of the Software, and to permit persons to whom the Software is
furnished to do so, subject to the following conditions:

The above copyright notice and this permission notice shall be included in all
copies or substantial portions of the Software.

THE SOFTWARE IS PROVIDED "AS IS", WITHOUT WARRANTY OF ANY KIND, EXPRESS OR
IMPLIED, INCLUDING BUT NOT LIMITED TO THE WARRANTIES OF MERCHANTABILITY,
FITNESS FOR A PARTICULAR PURPOSE AND NONINFRINGEMENT. IN NO EVENT SHALL THE
AUTHORS OR COPYRIGHT HOLDERS BE LIABLE FOR ANY CLAIM, DAMAGES OR OTHER
LIABILITY, WHETHER IN AN ACTION OF CONTRACT, TORT OR OTHERWISE, ARISING FROM,
OUT OF OR IN CONNECTION WITH THE SOFTWARE OR THE USE OR OTHER DEALINGS IN THE
SOFTWARE.

-------------------------------------------------------------------------------

Author: Sébastien Gachoud
Created: 2025-08-05
Description: Tests for TracedException and the cause chain helpers.
🦙
"""

__author__ = "Sébastien Gachoud"
__license__ = "MIT"

from unittest.mock import MagicMock, patch

import pytest

from errorgen import ErrorRecord
from errorgen.abstract.exceptions import (
    TracedException,
    cause_of,
    format_exception,
    iter_causes,
)


class TestFormatException:
    """Test cases for the format_exception function."""

    def test_format_exception_with_simple_exception(self):
        """Test formatting a simple exception with traceback."""
        try:
            raise ValueError("Test error message")
        except ValueError as e:
            result = format_exception(e)

            assert "ValueError: Test error message" in result
            assert "Traceback" in result
            assert "test_format_exception_with_simple_exception" in result

    def test_format_exception_with_no_traceback(self):
        """Test formatting an exception that has no traceback."""
        result = format_exception(ValueError("No traceback"))

        assert "ValueError: No traceback" in result

    def test_format_exception_with_exception_chain(self):
        """Test formatting an exception with a cause chain."""
        try:
            try:
                raise ValueError("Original error")
            except ValueError as e:
                raise RuntimeError("Chained error") from e
        except RuntimeError as e:
            result = format_exception(e)

            assert "RuntimeError: Chained error" in result
            assert "ValueError: Original error" in result

    @patch("traceback.format_exception")
    def test_format_exception_calls_traceback_format_exception(self, mock_format: MagicMock):
        """Test that format_exception properly calls traceback.format_exception."""
        mock_format.return_value = ["Mocked traceback"]

        try:
            raise ValueError("Test")
        except ValueError as e:
            result = format_exception(e)

            mock_format.assert_called_once_with(type(e), e, e.__traceback__)
            assert result == "Mocked traceback"


class TestTracedException:
    """Test cases for the TracedException class."""

    def test_traced_exception_can_be_raised(self):
        """Test that TracedException can be raised and caught."""
        with pytest.raises(TracedException, match="Test message"):
            raise TracedException("Test message")

    def test_traceback_format_vs_format_exception(self):
        """Test that traceback_format produces the same result as format_exception."""
        try:
            raise TracedException("Consistency test")
        except TracedException as e:
            assert format_exception(e) == e.traceback_format()
            assert "TracedException: Consistency test" in e.traceback_format()

    def test_traced_exception_nested_calls(self):
        """Test TracedException in nested function calls."""

        def level2():
            raise TracedException("Deep error")

        def level1():
            level2()

        try:
            level1()
        except TracedException as e:
            result = e.traceback_format()

            assert "level1" in result
            assert "level2" in result

    def test_causes_follow_explicit_chaining(self):
        """Test that causes() lists the __cause__ chain, nearest first."""
        root = KeyError("root")
        middle = ValueError("middle")
        middle.__cause__ = root
        top = TracedException("top")
        top.__cause__ = middle

        assert top.causes() == [middle, root]

    def test_causes_empty_without_cause(self):
        """Test that an exception without cause has an empty chain."""
        assert not TracedException("alone").causes()


# =============================================================================
# Cause Chain Helpers Tests
# =============================================================================


class TestCauseChain:
    """Test cases for cause_of and iter_causes."""

    def test_source_method_has_priority(self):
        """Test that a source() method is preferred over __cause__."""

        class WithSource(Exception):
            """Test"""

            def source(self):
                return "leaf"

        e = WithSource()
        e.__cause__ = ValueError()

        assert cause_of(e) == "leaf"

    def test_empty_source_falls_back_to_dunder_cause(self):
        """Test that __cause__ is used when source() gives None."""

        class NoSource(Exception):
            """Test"""

            def source(self):
                return None

        e = NoSource()
        down = ConnectionError("down")
        e.__cause__ = down

        assert cause_of(e) is down

    def test_generated_error_raised_from(self):
        """Test that a generated error without cause reports the error it was raised from."""

        class Plain(ErrorRecord, message="plain {_0}"):
            _0: int

        down = ConnectionError("down")
        try:
            raise Plain(1) from down
        except Plain as e:
            assert e.source() is None
            assert e.causes() == [down]

    def test_cause_of_falls_back_to_dunder_cause(self):
        """Test that __cause__ is used without a source() method."""
        inner = ValueError()
        outer = RuntimeError()
        outer.__cause__ = inner

        assert cause_of(outer) is inner
        assert cause_of(inner) is None

    def test_iteration_stops_at_non_exception_leaf(self):
        """Test that a leaf cause that is not an exception ends the chain."""

        class Wrapper(Exception):
            """Test"""

            def __init__(self, inner):
                super().__init__(inner)
                self.inner = inner

            def source(self):
                return self.inner

        inner = Wrapper("leaf")

        assert list(iter_causes(Wrapper(inner))) == [inner, "leaf"]

    def test_cycles_are_cut(self):
        """Test that a cyclic chain is walked once."""
        a = ValueError("a")
        b = ValueError("b")
        a.__cause__ = b
        b.__cause__ = a

        assert list(iter_causes(a)) == [b]
