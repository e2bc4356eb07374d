import csv
import io
import json

from table_model import OutputFormat, SelectionMode, TableModel


def _coerce_format(fmt) -> OutputFormat:
    if isinstance(fmt, OutputFormat):
        return fmt
    return OutputFormat.from_name(fmt)


def _to_json(value) -> str:
    return json.dumps(value, separators=(",", ":"), ensure_ascii=False)


def csv_encode_record(fields) -> str:
    """Encode one RFC 4180 record without its trailing terminator."""
    buf = io.StringIO(newline="")
    writer = csv.writer(buf, lineterminator="\r\n", quoting=csv.QUOTE_MINIMAL)
    writer.writerow(list(fields))
    text = buf.getvalue()
    if text.endswith("\r\n"):
        text = text[:-2]
    return text


def format_row(table: TableModel, fmt, row_idx: int) -> str:
    fmt = _coerce_format(fmt)
    row = table.rows[row_idx]

    if fmt is OutputFormat.PLAIN:
        return ",".join(row)
    if fmt is OutputFormat.CSV:
        return csv_encode_record(row)

    if table.headers is not None:
        obj = {}
        for col, name in enumerate(table.headers):
            obj[name] = row[col] if col < len(row) else ""
        return _to_json(obj)
    return _to_json(list(row))


def format_column(table: TableModel, fmt, col_idx: int) -> str:
    fmt = _coerce_format(fmt)
    label = table.header_label(col_idx)
    if fmt is OutputFormat.JSON:
        return _to_json({"column": label})
    return label


def format_cell(table: TableModel, fmt, row_idx: int, col_idx: int) -> str:
    fmt = _coerce_format(fmt)
    value = table.cell(row_idx, col_idx)

    if fmt is OutputFormat.PLAIN:
        return value
    if fmt is OutputFormat.CSV:
        return csv_encode_record([value])
    return _to_json(
        {"value": value, "row": row_idx, "column": table.header_label(col_idx)}
    )


def format_selection(table: TableModel, fmt, result) -> str:
    if result.mode is SelectionMode.ROW:
        return format_row(table, fmt, result.row)
    if result.mode is SelectionMode.COLUMN:
        return format_column(table, fmt, result.col)
    return format_cell(table, fmt, result.row, result.col)
