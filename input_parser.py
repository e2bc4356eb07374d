"""Decode raw CSV or JSON input into a TableModel.

CSV follows RFC 4180 quoting and keeps ragged rows exactly as written.
JSON must be a top-level array of objects or of arrays; every cell is
collapsed to text at parse time.
"""

import csv
import io
import json
import logging
import math
import sys

from table_model import InputFormat, TableModel

logger = logging.getLogger(__name__)


class ParseError(ValueError):
    """Raised when input cannot be turned into a table."""


class InputDecodeError(ParseError):
    pass


class UnterminatedQuoteError(ParseError):
    pass


class MalformedCsvError(ParseError):
    pass


class InvalidJsonError(ParseError):
    pass


class NotAnArrayError(ParseError):
    pass


class InconsistentShapeError(ParseError):
    pass


def parse(raw, input_format, has_header=True) -> TableModel:
    text = decode_input(raw)
    if not isinstance(input_format, InputFormat):
        input_format = InputFormat.from_name(input_format)

    if input_format is InputFormat.CSV:
        table = parse_csv(text, has_header)
    else:
        table = parse_json(text)

    logger.debug(
        "parsed %s input: %d rows, %d columns, headers=%s",
        input_format.value,
        table.row_count,
        table.column_count,
        table.headers is not None,
    )
    return table


def decode_input(raw) -> str:
    if raw is None:
        return ""
    if isinstance(raw, str):
        return raw[1:] if raw.startswith("\ufeff") else raw
    try:
        return bytes(raw).decode("utf-8-sig")
    except UnicodeDecodeError as exc:
        raise InputDecodeError(
            f"input is not valid UTF-8 (byte offset {exc.start})"
        ) from exc


# ---------- csv ----------


def _lift_field_size_limit():
    # no cap on field length
    limit = sys.maxsize
    while True:
        try:
            csv.field_size_limit(limit)
            return
        except OverflowError:
            limit //= 2


_lift_field_size_limit()


def parse_csv(text: str, has_header: bool) -> TableModel:
    reader = csv.reader(io.StringIO(text, newline=""), strict=True)
    records = []
    try:
        for record in reader:
            # blank lines are not records
            if not record:
                continue
            records.append(record)
    except csv.Error as exc:
        message = str(exc)
        if "unexpected end of data" in message:
            raise UnterminatedQuoteError(
                f"unterminated quoted field starting before line {reader.line_num}"
            ) from exc
        raise MalformedCsvError(f"line {reader.line_num}: {message}") from exc

    headers = None
    if has_header and records:
        first = records.pop(0)
        headers = list(first) if first else None

    return TableModel(headers=headers, rows=records)


# ---------- json ----------


def _reject_constant(name):
    raise ValueError(f"non-standard JSON constant {name}")


def _parse_finite_float(text):
    value = float(text)
    if not math.isfinite(value):
        raise ValueError(f"number {text} is out of range")
    return value


def stringify_value(value) -> str:
    if value is None:
        return ""
    if isinstance(value, str):
        return value
    return json.dumps(value, separators=(",", ":"), ensure_ascii=False)


def parse_json(text: str) -> TableModel:
    try:
        value = json.loads(
            text, parse_constant=_reject_constant, parse_float=_parse_finite_float
        )
    except json.JSONDecodeError as exc:
        raise InvalidJsonError(
            f"invalid JSON at line {exc.lineno} column {exc.colno}: {exc.msg}"
        ) from exc
    except ValueError as exc:
        raise InvalidJsonError(f"invalid JSON: {exc}") from exc

    if not isinstance(value, list):
        raise NotAnArrayError("JSON input must be a top-level array")
    if not value:
        return TableModel(headers=None, rows=[])

    first = value[0]
    if isinstance(first, dict):
        return _parse_objects(value)
    if isinstance(first, list):
        return _parse_arrays(value)
    raise InconsistentShapeError(
        "JSON input must be an array of objects or an array of arrays"
    )


def _parse_objects(items) -> TableModel:
    headers = []
    seen = set()
    for idx, item in enumerate(items):
        if not isinstance(item, dict):
            raise InconsistentShapeError(
                f"element {idx} is not an object; expected all elements to be objects"
            )
        for key in item:
            if key not in seen:
                seen.add(key)
                headers.append(key)

    rows = []
    for item in items:
        rows.append(
            [stringify_value(item[key]) if key in item else "" for key in headers]
        )
    return TableModel(headers=headers, rows=rows)


def _parse_arrays(items) -> TableModel:
    rows = []
    for idx, item in enumerate(items):
        if not isinstance(item, list):
            raise InconsistentShapeError(
                f"element {idx} is not an array; expected all elements to be arrays"
            )
        rows.append([stringify_value(v) for v in item])
    return TableModel(headers=None, rows=rows)
