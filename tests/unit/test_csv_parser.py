"""
Unit tests for the CSV line splitter and document parser
"""

import pytest
from ingestion.csv_parser import split_csv_line, parse_csv


class TestSplitCSVLine:
    """Test quote-aware field splitting"""

    def test_simple_fields(self):
        assert split_csv_line("a,b,c") == ["a", "b", "c"]

    def test_empty_line_yields_one_empty_field(self):
        assert split_csv_line("") == [""]

    def test_comma_inside_quotes_is_data(self):
        assert split_csv_line('"a,b",c') == ["a,b", "c"]

    def test_doubled_quote_is_not_unescaped(self):
        # Every quote toggles state; "" collapses to nothing
        assert split_csv_line('a,"b""c",d') == ["a", "bc", "d"]

    def test_fields_are_stripped(self):
        assert split_csv_line("  a ,\tb  , c\r") == ["a", "b", "c"]

    def test_quoted_whitespace_is_stripped_too(self):
        assert split_csv_line('" padded ",x') == ["padded", "x"]

    def test_only_quotes(self):
        assert split_csv_line('""""') == [""]

    def test_unbalanced_quote_swallows_rest_of_line(self):
        assert split_csv_line('"a,b,c') == ["a,b,c"]

    def test_trailing_comma_adds_empty_field(self):
        assert split_csv_line("a,b,") == ["a", "b", ""]

    def test_consecutive_commas(self):
        assert split_csv_line(",,") == ["", "", ""]

    def test_splitter_is_memoryless(self):
        split_csv_line('"unterminated')
        assert split_csv_line("x,y") == ["x", "y"]


class TestParseCSV:
    """Test header-keyed document parsing"""

    def test_ragged_row_padded_with_empty_string(self):
        records, count = parse_csv("h1,h2\n1,2\n3")

        assert records == [{"h1": "1", "h2": "2"}, {"h1": "3", "h2": ""}]
        assert count == 2

    def test_empty_input(self):
        assert parse_csv("") == ([], 0)

    def test_whitespace_only_input(self):
        assert parse_csv("  \n\t\n   ") == ([], 0)

    def test_header_only_with_trailing_newline(self):
        assert parse_csv("h1,h2\n") == ([], 0)

    def test_extra_values_dropped(self):
        records, count = parse_csv("a,b\n1,2,3,4")

        assert records == [{"a": "1", "b": "2"}]
        assert count == 1

    def test_blank_lines_skipped(self):
        text = "\n\nname,age\n\nAlice,30\n   \nBob,25\n\n"
        records, count = parse_csv(text)

        assert count == 2
        assert records[0] == {"name": "Alice", "age": "30"}
        assert records[1] == {"name": "Bob", "age": "25"}

    def test_crlf_line_endings(self):
        records, count = parse_csv("name,age\r\nAlice,30\r\nBob,25\r\n")

        assert count == 2
        assert list(records[0].keys()) == ["name", "age"]
        assert records[1] == {"name": "Bob", "age": "25"}

    def test_header_order_preserved(self):
        records, _ = parse_csv("z,a,m\n1,2,3")

        assert list(records[0].keys()) == ["z", "a", "m"]

    def test_values_are_never_coerced(self):
        records, _ = parse_csv("n,flag,amount\n007,true,1e3")

        assert records == [{"n": "007", "flag": "true", "amount": "1e3"}]

    def test_duplicate_headers_last_value_wins(self):
        records, count = parse_csv("a,a,b\n1,2,3")

        assert count == 1
        assert records == [{"a": "2", "b": "3"}]
        assert list(records[0].keys()) == ["a", "b"]

    def test_quoted_values(self):
        records, _ = parse_csv('city,note\n"Portland, OR","said ""hi"""')

        assert records == [{"city": "Portland, OR", "note": "said hi"}]

    @pytest.mark.parametrize("data_lines", [0, 1, 5, 250])
    def test_count_is_non_blank_lines_minus_header(self, data_lines):
        lines = ["id,value"] + [f"{i},v{i}" for i in range(data_lines)]
        text = "\n\n".join(lines) + "\n"

        records, count = parse_csv(text)

        assert count == data_lines
        assert len(records) == count
