"""
Reader and writer for the line-oriented triplet text format::

    rows = 3
    cols = 4
    (0,1,5)
    {2,3,-7}

The first non-blank line declares the row count and the second the column
count. Every following non-blank line holds one (row, col, value) entry in
either bracket style.
"""

import os
import re
import logging
from enum import Enum
from typing import Optional, Union

from .config import CodecConfig
from .constants import ROWS_KEY, COLS_KEY, OPEN_TO_CLOSE, SEPARATOR
from .sparse_matrix import SparseMatrix
from .matrix_errors import MalformedHeaderError, MalformedTripletError, IndexOutOfRangeError, IOFailureError


logger = logging.getLogger(__name__)

PathLike = Union[str, os.PathLike]

_HEADER_RE = re.compile(r'^\s*([A-Za-z_]+)\s*=\s*([+-]?[0-9]+)\s*$')
_DIGITS = frozenset('0123456789')
_CLOSERS = frozenset(OPEN_TO_CLOSE.values())


class _State(Enum):
    BEFORE_OPEN = 'before-open'
    IN_ROW = 'in-row'
    IN_COL = 'in-col'
    IN_VALUE = 'in-value'
    AFTER_CLOSE = 'after-close'


_NEXT_FIELD = {_State.IN_ROW: _State.IN_COL, _State.IN_COL: _State.IN_VALUE}


def parse_triplet_line(line: str, line_number: Optional[int] = None) -> tuple[int, int, int]:
    """
    Parse a single '(row,col,value)' or '{row,col,value}' line.

    Whitespace is allowed around brackets, numbers and separators, but not
    inside a number. Each number may carry one leading minus sign. The
    closing bracket must match the opening one and nothing but whitespace
    may follow it.

    Args:
        line: The text of the line
        line_number: 1-based line number, used in error messages

    Returns:
        The (row, col, value) integers as written; bounds are not checked here.

    Raises:
        MalformedTripletError: If the line does not follow either grammar.
    """
    def malformed(reason: str) -> MalformedTripletError:
        return MalformedTripletError(line.rstrip('\r\n'), line_number, reason)

    state = _State.BEFORE_OPEN
    closing = None
    fields: list[int] = []
    number = ''
    number_ended = False

    for ch in line:
        if ch.isspace():
            if number:
                number_ended = True
            continue

        if state is _State.BEFORE_OPEN:
            if ch not in OPEN_TO_CLOSE:
                raise malformed(f"expected '(' or '{{', got {ch!r}")
            closing = OPEN_TO_CLOSE[ch]
            state = _State.IN_ROW
            continue

        if state is _State.AFTER_CLOSE:
            raise malformed(f"unexpected {ch!r} after closing bracket")

        if ch == '-':
            if number:
                raise malformed("misplaced '-'")
            number = ch
        elif ch in _DIGITS:
            if number_ended:
                raise malformed("whitespace inside a number")
            number += ch
        elif ch == SEPARATOR or ch in _CLOSERS:
            if number in ('', '-'):
                raise malformed(f"empty {state.value[3:]} field")
            fields.append(int(number))
            number = ''
            number_ended = False
            if ch == SEPARATOR:
                if state is _State.IN_VALUE:
                    raise malformed("more than three fields")
                state = _NEXT_FIELD[state]
            elif ch != closing:
                raise malformed(f"expected {closing!r} to close, got {ch!r}")
            elif state is not _State.IN_VALUE:
                raise malformed("fewer than three fields")
            else:
                state = _State.AFTER_CLOSE
        else:
            raise malformed(f"unexpected character {ch!r}")

    if state is _State.BEFORE_OPEN:
        raise malformed("empty line")
    if state is not _State.AFTER_CLOSE:
        raise malformed(f"missing closing {closing!r}")

    row, col, value = fields
    return row, col, value


def _parse_header(line: str, expected_key: str, line_number: int) -> int:
    match = _HEADER_RE.match(line)
    if match is None or match.group(1) != expected_key:
        raise MalformedHeaderError(expected_key, line.rstrip('\r\n'), line_number)
    value = int(match.group(2))
    if value <= 0:
        raise MalformedHeaderError(expected_key, line.rstrip('\r\n'), line_number)
    return value


def parse_text(text: str) -> SparseMatrix:
    """
    Parse the triplet text format into a SparseMatrix.

    Blank lines are skipped anywhere. Triplets with value 0 are dropped, and
    when a position is listed twice the last non-zero value wins. Parsing
    stops at the first error.

    Raises:
        MalformedHeaderError: If the rows or cols header is missing, out of order or not a positive integer.
        MalformedTripletError: If a data line matches neither bracket grammar.
        IndexOutOfRangeError: If a triplet lies outside the declared dimensions.
    """
    rows = None
    cols = None
    entries: dict[tuple[int, int], int] = {}

    for line_number, line in enumerate(text.splitlines(), start=1):
        if not line.strip():
            continue
        if rows is None:
            rows = _parse_header(line, ROWS_KEY, line_number)
            continue
        if cols is None:
            cols = _parse_header(line, COLS_KEY, line_number)
            continue

        row, col, value = parse_triplet_line(line, line_number)
        if row < 0 or row >= rows or col < 0 or col >= cols:
            raise IndexOutOfRangeError(row, col, rows, cols, line_number)
        if value == 0:
            logger.debug(f"Line {line_number}: dropping zero-valued triplet at ({row}, {col})")
            continue
        if (row, col) in entries:
            logger.debug(f"Line {line_number}: ({row}, {col}) listed again, keeping the later value")
        entries[(row, col)] = value

    if rows is None:
        raise MalformedHeaderError(ROWS_KEY)
    if cols is None:
        raise MalformedHeaderError(COLS_KEY)

    return SparseMatrix.from_triplets(rows, cols, ((r, c, v) for (r, c), v in entries.items()))


def serialize_text(matrix: SparseMatrix, config: Optional[CodecConfig] = None) -> str:
    """Render a matrix in the triplet text format, one entry per line in (row, col) order."""
    config = config if config is not None else CodecConfig()
    config.validate()

    open_ch, close_ch = config.brackets
    eq = ' = ' if config.header_spacing else '='
    lines = [f"{ROWS_KEY}{eq}{matrix.rows}", f"{COLS_KEY}{eq}{matrix.cols}"]
    lines.extend(f"{open_ch}{row}{SEPARATOR}{col}{SEPARATOR}{value}{close_ch}" for row, col, value in matrix)
    return "\n".join(lines) + "\n"


def parse(path: PathLike, config: Optional[CodecConfig] = None) -> SparseMatrix:
    """
    Read a matrix file.

    Args:
        path: Path of the file to read
        config: Codec configuration; only the encoding is used when reading

    Raises:
        IOFailureError: If the file cannot be opened or decoded.
        MalformedHeaderError, MalformedTripletError, IndexOutOfRangeError: See parse_text.
    """
    config = config if config is not None else CodecConfig()
    config.validate()

    try:
        with open(path, 'r', encoding=config.encoding) as f:
            text = f.read()
    except OSError as e:
        raise IOFailureError(path, 'r', e.strerror or str(e)) from e
    except UnicodeDecodeError as e:
        raise IOFailureError(path, 'r', str(e)) from e

    matrix = parse_text(text)
    logger.debug(f"Read {matrix.rows}x{matrix.cols} matrix with {matrix.nnz} non-zero entries from {path}")
    return matrix


def serialize(matrix: SparseMatrix, path: PathLike, config: Optional[CodecConfig] = None) -> None:
    """
    Write a matrix file, replacing any existing file at path.

    The full text is rendered before the file is opened, so a failure while
    rendering never leaves a truncated file behind.

    Raises:
        IOFailureError: If the file cannot be opened or written.
    """
    config = config if config is not None else CodecConfig()
    text = serialize_text(matrix, config)

    try:
        with open(path, 'w', encoding=config.encoding, newline='\n') as f:
            f.write(text)
    except OSError as e:
        raise IOFailureError(path, 'w', e.strerror or str(e)) from e

    logger.debug(f"Wrote {matrix.rows}x{matrix.cols} matrix with {matrix.nnz} non-zero entries to {path}")
