import argparse
import contextlib
import curses
import logging
import os
import sys
from importlib.metadata import PackageNotFoundError, version

import config_paths
from file_type_handler import FileTypeHandler
from logger_setup import ConfigureLogger
from output_formatter import format_selection
from selection_engine import SelectionEngine, SelectionError
from table_model import InputFormat, OutputFormat, SelectionMode

# Make ESC snappy
os.environ.setdefault("ESCDELAY", "25")

logger = logging.getLogger("tabsel")

EXIT_OK = 0
EXIT_ABORTED = 1
EXIT_USAGE = 2


def _package_version() -> str:
    try:
        return version("tabsel")
    except PackageNotFoundError:
        return "0.0.0"


def _split_list(text) -> list[str]:
    if isinstance(text, (list, tuple)):
        return [str(t).strip() for t in text if str(t).strip()]
    return [part.strip() for part in str(text or "").split(",") if part.strip()]


def _error(message) -> None:
    print(f"tabsel: {message}", file=sys.stderr)


def build_parser(cfg=None) -> argparse.ArgumentParser:
    cfg = cfg or config_paths.default_config()
    parser = argparse.ArgumentParser(
        prog="tabsel",
        description="Pick a row, column or cell from CSV or JSON input.",
    )
    parser.add_argument("path", nargs="?", help="input file (default: stdin)")
    parser.add_argument(
        "-f", "--format", choices=InputFormat.names(), default=None,
        help="input format (default: from extension, else %s)" % cfg["INPUT_FORMAT"],
    )
    parser.add_argument(
        "--header", action=argparse.BooleanOptionalAction, default=cfg["HAS_HEADER"],
        help="treat the first CSV record as column names",
    )
    parser.add_argument(
        "-m", "--modes", default=",".join(cfg["SELECTION_MODES"]),
        help="comma-separated selection modes to cycle through (row,column,cell)",
    )
    parser.add_argument(
        "-o", "--output", choices=OutputFormat.names(), default=cfg["OUTPUT_FORMAT"],
        help="output encoding",
    )
    parser.add_argument(
        "--filter", action=argparse.BooleanOptionalAction, default=cfg["FILTER_ENABLED"],
        help="show the filter bar",
    )
    parser.add_argument("-q", "--query", default="", help="initial filter text")
    parser.add_argument(
        "-c", "--columns", default=None,
        help="comma-separated columns to show, by header name or index",
    )
    parser.add_argument(
        "--non-interactive", action="store_true",
        help="confirm the initial selection without opening the picker",
    )
    parser.add_argument("--log-level", default=cfg["LOG_LEVEL"], help="console log level")
    parser.add_argument("-v", "--version", action="store_true", help="print version")
    return parser


def resolve_columns(table, spec) -> list[int]:
    indices = []
    headers = table.headers or []
    for token in _split_list(spec):
        if token in headers:
            indices.append(headers.index(token))
        elif token.isdigit() and int(token) < table.column_count:
            indices.append(int(token))
        else:
            raise ValueError(f"unknown column '{token}'")
    return indices


@contextlib.contextmanager
def _controlling_terminal():
    """Point stdin/stdout at /dev/tty while the picker runs.

    Piped input has already been consumed and stdout may be captured by the
    caller, so curses needs the terminal itself. The original descriptors
    are restored on exit so the selection reaches the real stdout.
    """
    saved = []
    tty_fd = None
    try:
        for fd in (0, 1):
            if os.isatty(fd):
                continue
            if tty_fd is None:
                tty_fd = os.open("/dev/tty", os.O_RDWR)
            saved.append((fd, os.dup(fd)))
            os.dup2(tty_fd, fd)
        yield
    finally:
        sys.stdout.flush()
        for fd, dup in reversed(saved):
            os.dup2(dup, fd)
            os.close(dup)
        if tty_fd is not None:
            os.close(tty_fd)


def run_picker(engine, filter_enabled, output_format, source_name):
    from orchestrator import Orchestrator

    outcome = {}

    def curses_main(stdscr):
        outcome["result"] = Orchestrator(
            stdscr,
            engine,
            filter_enabled=filter_enabled,
            output_format=output_format,
            source_name=source_name,
        ).run()

    with _controlling_terminal():
        curses.wrapper(curses_main)
    return outcome.get("result")


def main(argv=None) -> int:
    cfg = config_paths.load_config()
    args = build_parser(cfg).parse_args(argv)

    if args.version:
        print(_package_version())
        return EXIT_OK

    ConfigureLogger(console_level=args.log_level)

    input_format = args.format
    if input_format is None and not args.path:
        input_format = cfg["INPUT_FORMAT"]

    try:
        modes = [SelectionMode.from_name(m) for m in _split_list(args.modes)]
        output_format = OutputFormat.from_name(args.output)
        handler = FileTypeHandler(args.path, input_format)
        table = handler.load(has_header=args.header)
        visible = resolve_columns(table, args.columns) if args.columns else None
        engine = SelectionEngine(
            table, available_modes=modes, visible_columns=visible, filter_text=args.query
        )
    except (ValueError, OSError) as exc:
        _error(exc)
        return EXIT_USAGE

    logger.info(
        "loaded %d rows from %s (modes=%s, output=%s)",
        table.row_count,
        handler.source_name,
        ",".join(m.value for m in modes),
        output_format.value,
    )

    try:
        if args.non_interactive:
            result = engine.confirm()
        else:
            result = run_picker(engine, args.filter, output_format, handler.source_name)
    except SelectionError as exc:
        _error(exc)
        return EXIT_ABORTED
    except (OSError, curses.error) as exc:
        _error(f"cannot open the terminal ({exc}); use --non-interactive")
        return EXIT_USAGE

    if result is None:
        logger.info("selection aborted")
        return EXIT_ABORTED

    print(format_selection(table, output_format, result))
    return EXIT_OK


if __name__ == "__main__":
    sys.exit(main())
