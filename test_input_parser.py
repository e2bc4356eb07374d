import pytest

from input_parser import (
    InconsistentShapeError,
    InputDecodeError,
    InvalidJsonError,
    MalformedCsvError,
    NotAnArrayError,
    ParseError,
    UnterminatedQuoteError,
    parse,
)
from table_model import InputFormat, TableModel


# --- CSV ---


def test_csv_with_header():
    table = parse("name,age\nAlice,30\nBob,25", InputFormat.CSV, True)
    assert table.headers == ["name", "age"]
    assert table.rows == [["Alice", "30"], ["Bob", "25"]]


def test_csv_without_header():
    table = parse("Alice,30\nBob,25", InputFormat.CSV, False)
    assert table.headers is None
    assert table.rows == [["Alice", "30"], ["Bob", "25"]]


@pytest.mark.parametrize("has_header", [True, False])
def test_csv_empty_input_is_an_empty_table(has_header):
    table = parse("", InputFormat.CSV, has_header)
    assert table.headers is None
    assert table.rows == []
    assert table.column_count == 0


def test_csv_header_only():
    table = parse("item\n", InputFormat.CSV, True)
    assert table.headers == ["item"]
    assert table.rows == []


def test_csv_quoted_fields_with_commas_and_newlines():
    raw = 'name,bio\nAlice,"likes cats, dogs"\nBob,"line1\nline2"'
    table = parse(raw, InputFormat.CSV, True)
    assert table.rows == [["Alice", "likes cats, dogs"], ["Bob", "line1\nline2"]]


def test_csv_doubled_quote_is_literal():
    table = parse('quote\n"say ""hi"""\n', InputFormat.CSV, True)
    assert table.rows == [['say "hi"']]


def test_csv_ragged_rows_are_kept_as_written():
    table = parse("a,b,c\n1,2\n3,4,5,6", InputFormat.CSV, True)
    assert table.headers == ["a", "b", "c"]
    assert table.rows == [["1", "2"], ["3", "4", "5", "6"]]
    assert table.column_count == 3


def test_csv_crlf_and_blank_lines():
    table = parse("a,b\r\n\r\n1,2\r\n\r\n3,4\r\n", InputFormat.CSV, True)
    assert table.headers == ["a", "b"]
    assert table.rows == [["1", "2"], ["3", "4"]]


def test_csv_unterminated_quote_raises():
    with pytest.raises(UnterminatedQuoteError) as info:
        parse('a,b\n1,"oops\n2,3\n', InputFormat.CSV, True)
    assert isinstance(info.value, ParseError)


def test_csv_very_long_field_is_accepted():
    long_text = "x" * 200_000
    table = parse("a,b\n1," + long_text + "\n", InputFormat.CSV, True)
    assert table.rows == [["1", long_text]]


def test_csv_text_after_closing_quote_raises():
    with pytest.raises(MalformedCsvError):
        parse('a\n"x"y\n', InputFormat.CSV, True)


def test_bytes_input_with_bom_is_decoded():
    table = parse("\ufeffname\nZoë\n".encode("utf-8"), "csv", True)
    assert table.headers == ["name"]
    assert table.rows == [["Zoë"]]


def test_undecodable_bytes_raise_parse_error():
    with pytest.raises(InputDecodeError):
        parse(b"a,b\n\xff\xfe\n", InputFormat.CSV, True)


# --- JSON ---


def test_json_array_of_objects_matches_csv_table():
    from_json = parse(
        '[{"name":"Alice","age":30},{"name":"Bob","age":25}]', InputFormat.JSON, False
    )
    from_csv = parse("name,age\nAlice,30\nBob,25", InputFormat.CSV, True)
    assert from_json == from_csv


def test_json_objects_with_different_keys():
    table = parse('[{"a":1,"b":2},{"b":3,"c":4}]', InputFormat.JSON, False)
    assert table.headers == ["a", "b", "c"]
    assert table.rows == [["1", "2", ""], ["", "3", "4"]]


def test_json_header_order_is_first_appearance_not_per_object_order():
    raw = '[{"b":1,"a":2},{"a":3,"c":4,"b":5},{"d":6}]'
    table = parse(raw, InputFormat.JSON, False)
    assert table.headers == ["b", "a", "c", "d"]
    assert table.rows[1] == ["5", "3", "4", ""]


def test_json_array_of_arrays():
    table = parse('[["Alice",30],["Bob",25,true]]', InputFormat.JSON, False)
    assert table.headers is None
    assert table.rows == [["Alice", "30"], ["Bob", "25", "true"]]


def test_json_empty_array():
    table = parse("[]", InputFormat.JSON, True)
    assert table == TableModel(headers=None, rows=[])


def test_json_scalars_and_nested_values_are_stringified():
    raw = '[{"name":"Alice","meta":{"x":1},"ok":false,"n":null,"f":1.5},' \
        '{"name":"Bob","meta":[1,2],"note":"café"}]'
    table = parse(raw, InputFormat.JSON, False)
    assert table.headers == ["name", "meta", "ok", "n", "f", "note"]
    assert table.rows[0] == ["Alice", '{"x":1}', "false", "", "1.5", ""]
    assert table.rows[1] == ["Bob", "[1,2]", "", "", "", "café"]


def test_json_nested_non_ascii_is_not_escaped():
    table = parse('[{"m":{"k":"é"}}]', InputFormat.JSON, False)
    assert table.rows == [['{"k":"é"}']]


def test_json_top_level_object_is_rejected():
    with pytest.raises(NotAnArrayError):
        parse('{"key":"value"}', InputFormat.JSON, False)


def test_json_invalid_text():
    with pytest.raises(InvalidJsonError):
        parse("not valid json", InputFormat.JSON, False)


def test_json_nan_constant_is_rejected():
    with pytest.raises(InvalidJsonError):
        parse("[[NaN]]", InputFormat.JSON, False)


@pytest.mark.parametrize("number", ["1e400", "-1e400"])
def test_json_out_of_range_number_is_rejected(number):
    with pytest.raises(InvalidJsonError):
        parse(f"[[{number}]]", InputFormat.JSON, False)


def test_json_large_finite_numbers_are_kept():
    table = parse("[[1e300, 123456789012345678901234567890]]", InputFormat.JSON, False)
    assert table.rows == [["1e+300", "123456789012345678901234567890"]]


@pytest.mark.parametrize(
    "raw",
    [
        '[{"a":1},[1,2]]',
        '[[1,2],{"a":1}]',
        "[1,2,3]",
        '["a","b"]',
    ],
)
def test_json_inconsistent_shapes(raw):
    with pytest.raises(InconsistentShapeError):
        parse(raw, InputFormat.JSON, False)


def test_unknown_format_name():
    with pytest.raises(ValueError):
        parse("a", "xml", True)
