"""
Unit tests for the CSV tokenizer (desa_profile.tokenizer).

Covers quoting, escaped quotes, embedded delimiters and newlines, CRLF
handling, blank-line rows and graceful handling of malformed input.
"""

from __future__ import annotations

import pytest

from desa_profile.tokenizer import tokenize


class TestBasicSplitting:
    """Plain, unquoted CSV."""

    def test_two_rows_without_trailing_newline(self):
        assert tokenize("a,b,c\n1,2,3") == (("a", "b", "c"), ("1", "2", "3"))

    def test_trailing_newline_adds_no_row(self):
        assert tokenize("a,b\n") == (("a", "b"),)

    def test_empty_input(self):
        assert tokenize("") == ()

    def test_trailing_comma_keeps_empty_field(self):
        assert tokenize("a,") == (("a", ""),)

    def test_only_commas(self):
        assert tokenize(",,\n") == (("", "", ""),)

    def test_rows_may_differ_in_length(self):
        assert tokenize("a\nb,c,d\n") == (("a",), ("b", "c", "d"))

    def test_fields_are_not_trimmed(self):
        assert tokenize(" a , b \n") == ((" a ", " b "),)


class TestLineEndings:
    """CR handling and blank lines."""

    def test_crlf_same_as_lf(self):
        assert tokenize("a,b\r\nc,d\r\n") == (("a", "b"), ("c", "d"))

    def test_bare_cr_is_dropped(self):
        assert tokenize("a\rb,c") == (("ab", "c"),)

    def test_blank_line_becomes_single_empty_field(self):
        assert tokenize("a\n\nb") == (("a",), ("",), ("b",))

    def test_blank_crlf_line_becomes_single_empty_field(self):
        assert tokenize("a\r\n\r\nb\r\n") == (("a",), ("",), ("b",))

    def test_leading_blank_lines_keep_row_numbering(self):
        grid = tokenize("\n\nx")
        assert grid == (("",), ("",), ("x",))
        assert grid[2][0] == "x"

    def test_only_cr_yields_no_rows(self):
        assert tokenize("\r") == ()


class TestQuoting:
    """Quoted regions and escaped quotes."""

    def test_comma_and_newline_inside_quotes(self):
        assert tokenize('"a,b\nc",d\n') == (("a,b\nc", "d"),)

    def test_escaped_quote(self):
        assert tokenize('"he said ""hi""",x') == (('he said "hi"', "x"),)

    def test_crlf_inside_quotes_is_kept(self):
        assert tokenize('"a\r\nb",c') == (("a\r\nb", "c"),)

    def test_empty_quoted_field_between_others(self):
        assert tokenize('a,"",b') == (("a", "", "b"),)

    def test_quote_in_middle_of_field_is_literal(self):
        assert tokenize('5" pipe,x\n') == (('5" pipe', "x"),)

    def test_text_after_closing_quote_is_appended(self):
        assert tokenize('"ab"cd,e') == (("abcd", "e"),)

    def test_quoted_field_only_quotes(self):
        assert tokenize('""""') == (('"',),)


class TestMalformedInput:
    """The tokenizer never raises."""

    def test_unterminated_quote_runs_to_end(self):
        assert tokenize('a,"b,c\nd') == (("a", "b,c\nd"),)

    def test_unterminated_quote_after_escaped_quote(self):
        assert tokenize('"x""') == (('x"',),)

    @pytest.mark.parametrize(
        "text",
        ['"', '""', '"""', ',"', '\n"\n', 'a"b"c', '"\r', "\r\n\r\n"],
    )
    def test_never_raises(self, text):
        grid = tokenize(text)
        assert isinstance(grid, tuple)
        assert all(isinstance(row, tuple) for row in grid)


class TestSampleSheet:
    """Shape of the shared sample sheet."""

    def test_row_count_includes_blank_line(self, sample_grid):
        assert len(sample_grid) == 16
        assert sample_grid[9] == ("",)

    def test_embedded_newline_stays_in_one_field(self, sample_grid):
        assert sample_grid[5][4] == "Utara: Selat Madura\nSelatan: Desa Kilensari"

    def test_quoted_comma_in_description(self, sample_grid):
        assert sample_grid[1][0] == "Desa Kampangar terletak di pesisir, Kabupaten Situbondo."
        assert len(sample_grid[1]) == 12
