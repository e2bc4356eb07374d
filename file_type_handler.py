import logging
import os
import sys

from input_parser import parse
from table_model import InputFormat, TableModel

logger = logging.getLogger(__name__)


class UnsupportedFileType(ValueError):
    pass


class NoInputError(ValueError):
    pass


class FileTypeHandler:
    """Locates the raw table bytes (a file or stdin) and picks the decoder."""

    EXTENSIONS = {".csv": InputFormat.CSV, ".json": InputFormat.JSON}

    def __init__(self, path: str | None = None, input_format=None, stdin=None):
        self.path = path
        self.stdin = stdin if stdin is not None else sys.stdin
        if input_format is not None and not isinstance(input_format, InputFormat):
            input_format = InputFormat.from_name(input_format)

        self.ext = ""
        if path:
            _, ext = os.path.splitext(path)
            self.ext = ext.lower()
            if input_format is None:
                input_format = self.EXTENSIONS.get(self.ext)
                if input_format is None:
                    raise UnsupportedFileType(
                        f"Unsupported file type '{self.ext or path}' "
                        "(use .csv or .json, or pass --format)"
                    )
        self.input_format = input_format or InputFormat.CSV

    @property
    def source_name(self) -> str:
        return os.path.basename(self.path) if self.path else "stdin"

    def read_bytes(self) -> bytes:
        if self.path:
            with open(self.path, "rb") as f:
                data = f.read()
        else:
            isatty = getattr(self.stdin, "isatty", None)
            if isatty is not None and isatty():
                raise NoInputError(
                    "no input provided; pipe data into tabsel or redirect from a file"
                )
            stream = getattr(self.stdin, "buffer", self.stdin)
            data = stream.read()
            if isinstance(data, str):
                data = data.encode("utf-8")
        logger.debug("read %d bytes from %s", len(data), self.source_name)
        return data

    def load(self, has_header: bool = True) -> TableModel:
        return parse(self.read_bytes(), self.input_format, has_header)
