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
Created: 2025-08-02
Description: Tests for the compiler of message templates.
🦙
"""

__author__ = "Sébastien Gachoud"
__license__ = "MIT"

from types import SimpleNamespace
from typing import Annotated

import pytest

from errorgen.generation import (
    FieldShape,
    LiteralText,
    PlaceholderKind,
    PlaceholderRef,
    TemplateSyntaxError,
    UnresolvedFieldReference,
    compile_template,
)


NAMED = FieldShape.named({"response_code": int, "url": str})
POSITIONAL = FieldShape.positional(float, str)
UNIT = FieldShape.unit()


# =============================================================================
# Well-formed Templates Tests
# =============================================================================


class TestCompileTemplate:
    """Test compilation of well-formed templates."""

    def test_self_named_placeholder(self):
        """Test that {self.<name>} resolves to the named field."""
        compiled = compile_template(
            "The server returned code {self.response_code}.", NAMED, "HttpError"
        )

        assert compiled.segments[0] == LiteralText("The server returned code ")
        ref = compiled.segments[1]
        assert isinstance(ref, PlaceholderRef)
        assert ref.kind is PlaceholderKind.SELF_NAMED
        assert ref.field == NAMED.by_name("response_code")
        assert compiled.segments[2] == LiteralText(".")

    def test_positional_placeholder(self):
        """Test that {_<i>} resolves to the i-th positional field."""
        compiled = compile_template("Expected '42' but got {_0}.", POSITIONAL, "InvalidValue")

        (ref,) = compiled.placeholders
        assert ref.kind is PlaceholderKind.POSITIONAL
        assert ref.field.index == 0
        assert ref.annotation is float

    def test_bare_shorthand_on_named_shape(self):
        """Test that {<name>} is shorthand for {self.<name>}."""
        compiled = compile_template("fetching {url}", NAMED, "FetchError")

        (ref,) = compiled.placeholders
        assert ref.kind is PlaceholderKind.BARE
        assert ref.target == "url"

    def test_underscore_digit_name_on_named_shape(self):
        """Test that {_<i>} names a field of a named shape literally."""
        shape = FieldShape.named({"_1": int})

        (ref,) = compile_template("{_1}", shape, "Odd").placeholders

        assert ref.kind is PlaceholderKind.BARE
        assert ref.field.name == "_1"

    def test_escaped_braces(self):
        """Test that doubled braces are literal braces."""
        compiled = compile_template("{{literal}} {_1}}}", POSITIONAL, "Braces")

        assert compiled.segments == (
            LiteralText("{literal} "),
            compiled.placeholders[0],
            LiteralText("}"),
        )

    def test_template_without_placeholders(self):
        """Test that a plain template is one literal run."""
        compiled = compile_template("Timed out.", UNIT, "Timeout")

        assert compiled.segments == (LiteralText("Timed out."),)

    def test_empty_template(self):
        """Test that an empty template has no segments."""
        assert not compile_template("", UNIT, "Empty").segments

    def test_render_follows_segments(self):
        """Test the reference evaluation of a compiled template."""
        compiled = compile_template("{_1}: {_0}", POSITIONAL, "Pair")

        assert compiled.render(SimpleNamespace(_0=3.14, _1="pi")) == "pi: 3.14"

    def test_compilation_is_cached(self):
        """Test that compiling twice returns the same object."""
        first = compile_template("{self.url}", NAMED, "Cached")

        assert compile_template("{self.url}", NAMED, "Cached") is first

    def test_unhashable_shape_is_compiled(self):
        """Test that a shape whose annotations cannot be hashed is compiled without the cache."""
        shape = FieldShape.named({"delay": Annotated[int, {"unit": "ms"}]})

        first = compile_template("after {delay}", shape, "Uncached")

        assert first.render(SimpleNamespace(delay=5)) == "after 5"
        assert compile_template("after {delay}", shape, "Uncached") == first

    def test_references(self):
        """Test that references() tells which fields are used."""
        compiled = compile_template("{self.url}", NAMED, "Refs")

        assert compiled.references(NAMED.by_name("url"))
        assert not compiled.references(NAMED.by_name("response_code"))


# =============================================================================
# Malformed Templates Tests
# =============================================================================


class TestTemplateSyntaxErrors:
    """Test that malformed delimiters are rejected."""

    @pytest.mark.parametrize(
        "template, position",
        [
            ("Missing {self.foo", 8),
            ("a {b {c} d", 2),
            ("stray } brace", 6),
            ("empty {} placeholder", 6),
            ("{self.}", 0),
            ("{not a field}", 0),
            ("{self.url:>10}", 0),
        ],
    )
    def test_syntax_error_position(self, template: str, position: int):
        """Test that the error names the item and the offending position."""
        with pytest.raises(TemplateSyntaxError) as info:
            compile_template(template, NAMED, "Broken")

        assert info.value.item == "Broken"
        assert info.value.position == position
        assert info.value.template == template
        assert str(info.value).startswith("Broken: ")

    def test_unterminated_placeholder_reports_body(self):
        """Test that an unterminated placeholder reports what was read."""
        with pytest.raises(TemplateSyntaxError, match="unterminated placeholder") as info:
            compile_template("Missing {self.foo", NAMED, "Broken")

        assert info.value.placeholder == "self.foo"


class TestUnresolvedFieldReferences:
    """Test that placeholders must name fields of the shape."""

    def test_missing_named_field(self):
        """Test a self-named placeholder naming no field."""
        with pytest.raises(UnresolvedFieldReference) as info:
            compile_template("Value {self.missing}", NAMED, "HttpError")

        assert info.value.item == "HttpError"
        assert info.value.placeholder == "self.missing"
        assert info.value.field == "missing"

    def test_positional_index_out_of_range(self):
        """Test a positional placeholder past the last field."""
        with pytest.raises(UnresolvedFieldReference, match="no positional field 2"):
            compile_template("{_2}", POSITIONAL, "Pair")

    def test_named_reference_on_positional_shape(self):
        """Test that positional shapes have no named fields."""
        with pytest.raises(UnresolvedFieldReference):
            compile_template("{self.url}", POSITIONAL, "Pair")

    def test_any_reference_on_unit_shape(self):
        """Test that unit shapes have no fields at all."""
        with pytest.raises(UnresolvedFieldReference):
            compile_template("{_0}", UNIT, "Timeout")
