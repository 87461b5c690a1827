from __future__ import annotations
import csv, io, json, logging, re
from typing import Any, Dict, List, Mapping, Optional, Sequence, Set
from ..core.types import Cell, CellKind, Record, Table
from ..core.errors import ParseError, UnsupportedFormatError
from ..core.utils import TextInput, _ensure_text
from ..core.constants import (
    SUPPORTED_EXTENSIONS, _CSV_TRUE_VALUES, _CSV_FALSE_VALUES, _CSV_FLOAT_PATTERN, _MAX_SAFE_INTEGER
)

logger = logging.getLogger(__name__)

_FLOAT_RE = re.compile(_CSV_FLOAT_PATTERN)
_INT_RE = re.compile(r"^\s*-?\d+\s*$")


def _coerce_csv_value(raw: str) -> Cell:
    if raw == "":
        return Cell(CellKind.NULL, None)
    if raw in _CSV_TRUE_VALUES:
        return Cell(CellKind.BOOLEAN, True)
    if raw in _CSV_FALSE_VALUES:
        return Cell(CellKind.BOOLEAN, False)
    if not _FLOAT_RE.match(raw):
        return Cell(CellKind.TEXT, raw)
    parsed = float(raw)
    # magnitudes of 2**53 and beyond, overflow included, stay verbatim
    if not -_MAX_SAFE_INTEGER < parsed < _MAX_SAFE_INTEGER:
        return Cell(CellKind.TEXT, raw)
    if _INT_RE.match(raw):
        return Cell(CellKind.NUMBER, int(raw))
    return Cell(CellKind.NUMBER, parsed)


class _HeaderNormalizer:
    """Normalizes and deduplicates column headers for delimited inputs."""

    def __init__(self) -> None:
        self._base_counts: Dict[str, int] = {}
        self._used: Set[str] = set()

    def _clean(self, raw: Any, index: int) -> str:
        text = "" if raw is None else str(raw)
        text = text.lstrip("\ufeff").strip()
        if not text:
            return f"column_{index + 1}"
        return text

    def _allocate(self, base: str) -> str:
        count = self._base_counts.get(base, 0)
        candidate = base if count == 0 else f"{base}_{count + 1}"
        while candidate in self._used:
            count += 1
            candidate = f"{base}_{count + 1}"
        self._base_counts[base] = count + 1
        self._used.add(candidate)
        return candidate

    def normalize(self, fieldnames: Sequence[Any]) -> List[str]:
        return [self._allocate(self._clean(name, index)) for index, name in enumerate(fieldnames)]

    def generate_default(self, index: int) -> str:
        return self._allocate(f"column_{index + 1}")


def _is_blank_record(record: Mapping[str, Cell]) -> bool:
    return all(cell.is_blank for cell in record.values())


def parse_csv(body: TextInput, *, file_name: Optional[str] = None) -> Table:
    """Parse CSV text with a header row, coercing cells to numbers and booleans where unambiguous.

    Records whose every cell is empty (trailing blank lines, ",,,") are dropped.
    """
    text = _ensure_text(body, file_name=file_name, source_format="csv")
    normalizer = _HeaderNormalizer()
    records: List[Record] = []

    try:
        reader = csv.reader(io.StringIO(text, newline=""), strict=True)
        try:
            first_row = next(reader)
        except StopIteration:
            return Table()

        headers = normalizer.normalize(first_row)

        for raw_row in reader:
            if not raw_row:
                continue
            row = list(raw_row)
            if len(row) < len(headers):
                row.extend([""] * (len(headers) - len(row)))
            elif len(row) > len(headers):
                while len(headers) < len(row):
                    headers.append(normalizer.generate_default(len(headers)))

            record = {headers[index]: _coerce_csv_value(row[index]) for index in range(len(headers))}
            if _is_blank_record(record):
                continue
            records.append(record)
    except csv.Error as exc:
        raise ParseError(
            f"Malformed CSV in {file_name or 'input'}: {exc}",
            file_name=file_name,
            source_format="csv",
        ) from exc

    return Table(tuple(records))


def parse_json(body: TextInput, *, file_name: Optional[str] = None) -> Table:
    """Parse a JSON array of objects, or a single object, into a Table."""
    text = _ensure_text(body, file_name=file_name, source_format="json")
    try:
        data = json.loads(text)
    except json.JSONDecodeError as exc:
        raise ParseError(
            f"Malformed JSON in {file_name or 'input'}: {exc.msg} (line {exc.lineno}, column {exc.colno})",
            file_name=file_name,
            source_format="json",
        ) from exc

    if isinstance(data, Mapping):
        return Table.from_records([data])
    if not isinstance(data, list):
        raise ParseError(
            f"{file_name or 'input'} must contain a JSON object or an array of objects",
            file_name=file_name,
            source_format="json",
        )
    for position, item in enumerate(data):
        if not isinstance(item, Mapping):
            raise ParseError(
                f"Element {position} of {file_name or 'input'} is not a JSON object",
                file_name=file_name,
                source_format="json",
            )
    return Table.from_records(data)


def detect_format(file_name: str) -> str:
    lowered = (file_name or "").lower()
    for extension in SUPPORTED_EXTENSIONS:
        if lowered.endswith(extension):
            return extension[1:]
    raise UnsupportedFormatError(
        f"Unsupported file type: {file_name or '<unnamed>'} (expected a .csv or .json file)",
        file_name=file_name,
    )


def load_dataset(file_name: str, body: TextInput) -> Table:
    source_format = detect_format(file_name)
    if source_format == "json":
        table = parse_json(body, file_name=file_name)
    else:
        table = parse_csv(body, file_name=file_name)
    logger.info(
        "dataset loaded",
        extra={
            "file_name": file_name,
            "source_format": source_format,
            "rows": len(table),
            "columns": len(table.columns),
        },
    )
    return table
