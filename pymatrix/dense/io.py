"""
Plain-text serialization for Matrix.

Layout:

    <rows> <cols>
    v(0,0) v(0,1) ... v(0,cols-1)
    ...
    v(rows-1,0) ... v(rows-1,cols-1)

Every value is followed by one space and every row ends with a newline, so
[[1, 2], [3, 4]] serializes to ``"2 2\\n1 2 \\n3 4 \\n"``. Values use the
shortest text that parses back to the same double, with a trailing ".0"
dropped, so writing then reading reproduces the matrix exactly.

Reading only relies on whitespace-delimited tokens: values may be spread
over lines freely, and several matrices may share a line. read_matrix()
stops right after the last value it needs, so repeated calls on one stream
read consecutive matrices. loads() and load() expect exactly one matrix and
reject any trailing token. Anything unparsable raises MatrixFormatError
with the offending line number.
"""

from __future__ import annotations

import io
from pathlib import Path
from typing import Iterator, TextIO

import numpy as np

from pymatrix.core.exceptions import MatrixFormatError
from pymatrix.dense.matrix import Matrix


def format_value(value: float) -> str:
    """
    Shortest round-trip text for a double.

    Examples:
        >>> format_value(1.0), format_value(0.1), format_value(-2.5e-300)
        ('1', '0.1', '-2.5e-300')
    """
    text = repr(float(value))
    if text.endswith('.0'):
        text = text[:-2]
    return text


def write_matrix(matrix: Matrix, stream: TextIO) -> None:
    """Write the shape header, then one line of values per row."""
    height, width = matrix.shape
    stream.write(f"{height} {width}\n")
    values = matrix.data.tolist()
    for row in range(height):
        start = row * width
        stream.write(
            ''.join(format_value(v) + ' ' for v in values[start:start + width]) + '\n'
        )


class _TokenReader:
    """
    Pull whitespace-delimited tokens from a text stream.

    Characters are consumed one at a time and reading stops at the
    whitespace that ends the current token, so whatever follows stays in
    the stream for the next reader. ``line`` is the line of the last token
    returned, counted from 1 where this reader started (0 before any token).
    """

    def __init__(self, stream: TextIO):
        self._stream = stream
        self._current_line = 1
        self.line = 0

    def next(self) -> str | None:
        ch = self._stream.read(1)
        while ch and ch.isspace():
            if ch == '\n':
                self._current_line += 1
            ch = self._stream.read(1)
        if not ch:
            return None

        self.line = self._current_line
        chars = []
        while ch and not ch.isspace():
            chars.append(ch)
            ch = self._stream.read(1)
        if ch == '\n':
            self._current_line += 1
        return ''.join(chars)


def _parse_dimension(token: str | None, name: str, tokens: _TokenReader) -> int:
    if token is None:
        raise MatrixFormatError(f"truncated header: missing {name} count", line=tokens.line)
    try:
        value = int(token)
    except ValueError:
        raise MatrixFormatError(
            f"header {name} count is not an integer: {token!r}", line=tokens.line
        ) from None
    if value < 0:
        raise MatrixFormatError(
            f"header {name} count must be non-negative, got {value}", line=tokens.line
        )
    return value


def _read_next(tokens: _TokenReader, cls: type[Matrix]) -> Matrix | None:
    """Read one matrix, or return None if the stream ends before a header."""
    first = tokens.next()
    if first is None:
        return None
    rows = _parse_dimension(first, 'row', tokens)
    cols = _parse_dimension(tokens.next(), 'column', tokens)

    # The buffer is built only once every value is in hand, so a bogus
    # header on short input is reported as truncation.
    count = rows * cols
    values: list[float] = []
    while len(values) < count:
        token = tokens.next()
        if token is None:
            raise MatrixFormatError(
                f"truncated data: expected {count} values for a {rows}x{cols} matrix, "
                f"got {len(values)}",
                line=tokens.line,
            )
        try:
            values.append(float(token))
        except ValueError:
            raise MatrixFormatError(
                f"value {len(values)} is not a number: {token!r}", line=tokens.line
            ) from None

    return cls._wrap(np.array(values, dtype=np.float64), cols)


def read_matrix(stream: TextIO, *, cls: type[Matrix] = Matrix) -> Matrix:
    """
    Read one matrix from a text stream.

    Consumes the header, exactly rows * cols value tokens and the single
    whitespace character after the last one; anything further is left in
    the stream, so consecutive calls read consecutive matrices.

    Args:
        stream: Text stream positioned at a header
        cls: Matrix class to build

    Raises:
        MatrixFormatError: On an empty stream, a bad header or value,
            or truncated data
    """
    tokens = _TokenReader(stream)
    result = _read_next(tokens, cls)
    if result is None:
        raise MatrixFormatError("no matrix header found: stream is empty", line=tokens.line)
    return result


def _read_whole(stream: TextIO, cls: type[Matrix]) -> Matrix:
    """Read exactly one matrix and require nothing but whitespace after it."""
    tokens = _TokenReader(stream)
    result = _read_next(tokens, cls)
    if result is None:
        raise MatrixFormatError("no matrix header found: stream is empty", line=tokens.line)
    extra = tokens.next()
    if extra is not None:
        raise MatrixFormatError(
            f"unexpected token {extra!r} after {result.size} values", line=tokens.line
        )
    return result


def iter_matrices(stream: TextIO, *, cls: type[Matrix] = Matrix) -> Iterator[Matrix]:
    """Yield consecutive matrices from one stream until it is exhausted."""
    tokens = _TokenReader(stream)
    while True:
        result = _read_next(tokens, cls)
        if result is None:
            return
        yield result


def dumps(matrix: Matrix) -> str:
    buffer = io.StringIO()
    write_matrix(matrix, buffer)
    return buffer.getvalue()


def loads(text: str, *, cls: type[Matrix] = Matrix) -> Matrix:
    """Parse text holding exactly one matrix; trailing tokens are an error."""
    return _read_whole(io.StringIO(text), cls)


def save(matrix: Matrix, path: str | Path) -> None:
    """Write a matrix to a file, replacing its contents."""
    with Path(path).open('w', encoding='utf-8') as fh:
        write_matrix(matrix, fh)


def load(path: str | Path, *, cls: type[Matrix] = Matrix) -> Matrix:
    """Read a file holding exactly one matrix; trailing tokens are an error."""
    with Path(path).open('r', encoding='utf-8') as fh:
        return _read_whole(fh, cls)
